"""Luau payload rendering for gate decisions.

Every payload is a complete Luau chunk. Denials and fetch failures render a
kick script that halts the executor before any protected code is reached;
grants render an identity preamble followed by the verbatim asset source.
"""

from typing import Optional

from scriptguard.assets.fetcher import FetchOk, FetchResult
from scriptguard.gate.decision import DenialReason, GrantDecision, IdentityClaims
from scriptguard.projects.models import ProjectModel

DENIAL_MESSAGES = {
    DenialReason.INVALID_CLIENT: "Invalid executor",
    DenialReason.MISSING_KEY: "No key provided",
    DenialReason.INVALID_KEY: "Invalid key provided",
    DenialReason.KEY_EXPIRED: "Key has expired",
    DenialReason.DEVICE_MISMATCH: "Key is registered to a different device",
    DenialReason.FETCH_FAILURE: "Failed to fetch script",
    DenialReason.INTERNAL: "Unable to verify key, please try again later",
}
NOT_CONFIGURED_MESSAGE = "No script has been initialized yet"


def escape_lua_string(value: str) -> str:
    """Escape ``value`` for use inside a double-quoted Lua string literal."""
    out = []
    for ch in value:
        code = ord(ch)
        if ch == "\\":
            out.append("\\\\")
        elif ch == '"':
            out.append('\\"')
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        elif code < 32 or code == 127:
            # Always three digits so a following digit is not swallowed
            out.append(f"\\{code:03d}")
        else:
            out.append(ch)
    return "".join(out)


def lua_string(value: str) -> str:
    return f'"{escape_lua_string(value)}"'


def kick_script(brand: str, message: str, companion_link: Optional[str] = None) -> str:
    """Abort payload: show ``message``, offer the companion link, kick, stop."""
    text = f"[{brand}] {message}"
    lines = []
    if companion_link:
        text += f"\nNeed help? {companion_link} (copied to clipboard)"
        lines.append(f"pcall(setclipboard, {lua_string(companion_link)})")
    lines.insert(0, f"local message = {lua_string(text)}")
    lines.append('game:GetService("Players").LocalPlayer:Kick(message)')
    lines.append("return")
    return "\n".join(lines) + "\n"


class ScriptComposer:
    """Renders decisions into executor payloads."""

    def __init__(self, brand: str = "scriptguard"):
        self.brand = brand

    def compose_unconfigured(self) -> bytes:
        return kick_script(self.brand, NOT_CONFIGURED_MESSAGE).encode("utf-8")

    def compose_denial(self, project: ProjectModel, reason: DenialReason) -> bytes:
        return kick_script(
            self.brand, DENIAL_MESSAGES[reason], project.companion_link
        ).encode("utf-8")

    def compose(
        self,
        project: ProjectModel,
        decision: GrantDecision,
        asset: Optional[FetchResult] = None,
    ) -> bytes:
        """Render the payload; the asset bytes are appended untouched."""
        if not decision.granted:
            return self.compose_denial(project, decision.denial_reason)
        if not isinstance(asset, FetchOk):
            return self.compose_denial(project, DenialReason.FETCH_FAILURE)

        preamble = self.preamble(project, decision.identity_claims)
        return preamble.encode("utf-8") + b"\n" + asset.content

    def preamble(self, project: ProjectModel, claims: IdentityClaims) -> str:
        guard = f"getgenv not found, {project.name} could not be run."
        fields = []
        if claims.display_name is not None:
            fields.append(("username", lua_string(claims.display_name)))
        if claims.owner_identity is not None:
            fields.append(("userid", lua_string(claims.owner_identity)))
        if claims.note is not None:
            fields.append(("note", lua_string(claims.note)))
        fields.append(("hwid", lua_string(claims.fingerprint)))
        fields.append(("script_name", lua_string(project.name)))
        if claims.remaining is not None:
            seconds = max(0, int(claims.remaining.total_seconds()))
            fields.append(("expiry", f"os.time() + {seconds}"))
        fields.append(("is_premium", "true" if claims.premium else "false"))

        lines = [
            f"assert(getgenv, {lua_string(guard)})",
            f"getgenv()[{lua_string(self.brand)}] = {{",
        ]
        lines.extend(f"  {name} = {value}," for name, value in fields)
        lines.append("}")
        return "\n".join(lines) + "\n"
