"""Scriptguard: per-device license gate for distributed scripts."""

from scriptguard.gate.composer import ScriptComposer, escape_lua_string, kick_script
from scriptguard.gate.decision import DenialReason, GrantDecision, IdentityClaims, Outcome
from scriptguard.gate.fingerprint import extract_fingerprint
from scriptguard.gate.service import ValidationGate

__all__ = [
    "ScriptComposer",
    "escape_lua_string",
    "kick_script",
    "DenialReason",
    "GrantDecision",
    "IdentityClaims",
    "Outcome",
    "extract_fingerprint",
    "ValidationGate",
]
__version__ = "0.1.0"
