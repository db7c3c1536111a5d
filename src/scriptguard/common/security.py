"""Admin authentication: super-admin API key and signed session tokens."""

from dataclasses import dataclass

from fastapi import Cookie, Header, HTTPException
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

SESSION_HEADER = "X-Scriptguard-Session"
SESSION_COOKIE = "scriptguard_session"


@dataclass
class Principal:
    """Authenticated admin identity available to request handlers."""
    admin_id: str


def _get_serializer() -> URLSafeTimedSerializer:
    from scriptguard.common.config import get_settings
    return URLSafeTimedSerializer(get_settings().secret_key, salt="admin-session")


def create_session_token(admin_id: str) -> str:
    """Sign a session payload for an admin and return the token."""
    return _get_serializer().dumps({"sub": admin_id})


def verify_session_token(token: str) -> str | None:
    """Verify and decode a session token. Returns the admin id or None."""
    from scriptguard.common.config import get_settings

    try:
        payload = _get_serializer().loads(
            token, max_age=get_settings().session_max_age
        )
    except (BadSignature, SignatureExpired):
        return None
    if not isinstance(payload, dict) or not payload.get("sub"):
        return None
    return payload["sub"]


async def require_super_admin(
    x_scriptguard_api_key: str = Header(..., alias="X-Scriptguard-Api-Key"),
) -> str:
    """FastAPI dependency that validates the super-admin API key from header."""
    from scriptguard.common.config import get_settings

    settings = get_settings()
    if x_scriptguard_api_key != settings.api_key:
        raise HTTPException(status_code=403, detail="Invalid API key")
    return x_scriptguard_api_key


async def require_principal(
    x_scriptguard_session: str | None = Header(None, alias=SESSION_HEADER),
    scriptguard_session: str | None = Cookie(None, alias=SESSION_COOKIE),
) -> Principal:
    """FastAPI dependency resolving the admin principal from header or cookie."""
    token = x_scriptguard_session or scriptguard_session
    if not token:
        raise HTTPException(status_code=401, detail="Missing session")
    admin_id = verify_session_token(token)
    if admin_id is None:
        raise HTTPException(status_code=401, detail="Invalid session")
    return Principal(admin_id=admin_id)
