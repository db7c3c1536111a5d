"""Validation gate — license checks and first-use device binding."""

from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from scriptguard.common.config import ScriptguardSettings
from scriptguard.common.logging import get_logger
from scriptguard.common.models import as_utc
from scriptguard.gate.decision import DenialReason, GrantDecision, IdentityClaims
from scriptguard.keys.service import KeyService
from scriptguard.projects.models import ProjectModel

logger = get_logger("gate")

# Returned by _bind when the key row disappeared mid-request
_DELETED = object()


class ValidationGate:
    """Decides whether a device may receive a project's script."""

    def __init__(self, settings: ScriptguardSettings, keys: KeyService):
        self.settings = settings
        self.keys = keys

    async def evaluate(
        self,
        session: AsyncSession,
        project: ProjectModel,
        fingerprint: str | None,
        presented_key: str | None,
    ) -> GrantDecision:
        """
        Evaluate a request against ``project``:
        1. Fingerprint present
        2. Free-paywall projects grant here
        3. Key present, known and owned by the project
        4. Expiry
        5. Bind on first use, otherwise compare the bound device

        Denials are returned, never raised. The only write is the bind.
        """
        if not fingerprint or not fingerprint.strip():
            return GrantDecision.deny(DenialReason.INVALID_CLIENT)

        # Any mode other than free-paywall is held to the paid checks
        if project.license_mode == "free-paywall":
            return GrantDecision.grant(IdentityClaims(fingerprint=fingerprint))

        if not presented_key:
            return GrantDecision.deny(DenialReason.MISSING_KEY)

        key = await self.keys.get_by_token(session, presented_key)
        # Keys of other projects look exactly like unknown keys
        if key is None or key.project_id != project.project_id:
            return GrantDecision.deny(DenialReason.INVALID_KEY)

        # Snapshot before any commit or rollback touches the instance
        key_id = key.id
        bound = key.bound_fingerprint
        expires_at = as_utc(key.expires_at)
        claims = dict(
            owner_identity=key.owner_identity,
            display_name=key.display_name,
            note=key.note,
            key_type=key.key_type,
        )

        now = datetime.now(timezone.utc)
        if expires_at is not None and expires_at < now:
            return GrantDecision.deny(DenialReason.KEY_EXPIRED)

        if bound is None:
            bound = await self._bind(session, project.project_id, key_id, fingerprint)
            if bound is None:
                return GrantDecision.deny(DenialReason.INTERNAL)
            if bound is _DELETED:
                return GrantDecision.deny(DenialReason.INVALID_KEY)

        if bound != fingerprint:
            return GrantDecision.deny(DenialReason.DEVICE_MISMATCH)

        return GrantDecision.grant(IdentityClaims(
            fingerprint=bound,
            premium=True,
            remaining=expires_at - now if expires_at is not None else None,
            **claims,
        ))

    async def _bind(
        self,
        session: AsyncSession,
        project_id: str,
        key_id: str,
        fingerprint: str,
    ):
        """Run the conditional bind with bounded retries.

        Returns the stored fingerprint, ``_DELETED`` if the key vanished,
        or None when every attempt failed.
        """
        attempts = max(1, self.settings.bind_max_attempts)
        for attempt in range(1, attempts + 1):
            try:
                stored = await self.keys.bind_fingerprint(session, key_id, fingerprint)
            except SQLAlchemyError:
                await session.rollback()
                logger.warning(
                    "Fingerprint bind failed",
                    extra={"project_id": project_id, "key_id": key_id, "attempt": attempt},
                    exc_info=True,
                )
                continue
            return _DELETED if stored is None else stored

        logger.error(
            "Fingerprint bind exhausted retries",
            extra={"project_id": project_id, "key_id": key_id, "attempt": attempts},
        )
        return None

