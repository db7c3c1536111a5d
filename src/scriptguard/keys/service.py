"""Key store — license key CRUD and fingerprint binding."""

from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from scriptguard.common.exceptions import DuplicateKeyError, KeyNotFoundError
from scriptguard.common.models import utcnow
from scriptguard.keygen.generator import generate_license_key
from scriptguard.keys.models import KeyModel


class KeyService:
    """License key operations scoped to a project."""

    # ── Lookup ──

    async def get_by_token(
        self, session: AsyncSession, token: str
    ) -> KeyModel | None:
        """Exact token match across all projects."""
        result = await session.execute(
            select(KeyModel).where(KeyModel.key == token)
        )
        return result.scalar_one_or_none()

    async def get_project_key(
        self, session: AsyncSession, project_id: str, token: str
    ) -> KeyModel:
        result = await session.execute(
            select(KeyModel).where(
                KeyModel.project_id == project_id,
                KeyModel.key == token,
            )
        )
        key = result.scalar_one_or_none()
        if key is None:
            raise KeyNotFoundError()
        return key

    async def list_keys(
        self, session: AsyncSession, project_id: str
    ) -> list[KeyModel]:
        result = await session.execute(
            select(KeyModel)
            .where(KeyModel.project_id == project_id)
            .order_by(KeyModel.created_at.asc())
        )
        return list(result.scalars().all())

    # ── Admin mutations ──

    async def create_key(
        self,
        session: AsyncSession,
        project_id: str,
        owner_identity: str,
        display_name: str,
        key: str | None = None,
        key_type: str = "permanent",
        expires_at: datetime | None = None,
        note: str | None = None,
        bound_fingerprint: str | None = None,
        executor: str | None = None,
    ) -> KeyModel:
        """Create a key with explicit values; the token is generated when omitted."""
        token = key or generate_license_key()
        if await self.get_by_token(session, token) is not None:
            raise DuplicateKeyError()

        key_obj = KeyModel(
            project_id=project_id,
            key=token,
            key_type=key_type,
            expires_at=expires_at,
            owner_identity=owner_identity,
            display_name=display_name,
            note=note or None,
            bound_fingerprint=bound_fingerprint or None,
            executor=executor or None,
        )
        session.add(key_obj)
        try:
            await session.flush()
        except IntegrityError:
            # A concurrent create took the token after the lookup above
            raise DuplicateKeyError()
        return key_obj

    async def delete_key(
        self, session: AsyncSession, project_id: str, token: str
    ) -> None:
        key = await self.get_project_key(session, project_id, token)
        await session.delete(key)
        await session.flush()

    async def reset_binding(
        self, session: AsyncSession, project_id: str, token: str
    ) -> KeyModel:
        """Clear the bound fingerprint so the next device to validate binds."""
        key = await self.get_project_key(session, project_id, token)
        key.bound_fingerprint = None
        key.executor = None
        await session.flush()
        return key

    async def modify_note(
        self, session: AsyncSession, project_id: str, token: str, note: str
    ) -> KeyModel:
        key = await self.get_project_key(session, project_id, token)
        key.note = note if note.strip() else None
        await session.flush()
        return key

    # ── Binding ──

    async def bind_fingerprint(
        self, session: AsyncSession, key_id: str, fingerprint: str
    ) -> Optional[str]:
        """Bind ``fingerprint`` to the key only if it is still unbound.

        The conditional UPDATE is the compare-and-swap: of several concurrent
        callers exactly one matches ``bound_fingerprint IS NULL``. The bind is
        committed before returning. Returns the fingerprint now stored on the
        key (ours or the winner's), or None if the key no longer exists.
        """
        await session.execute(
            update(KeyModel)
            .where(KeyModel.id == key_id, KeyModel.bound_fingerprint.is_(None))
            .values(bound_fingerprint=fingerprint, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await session.commit()

        result = await session.execute(
            select(KeyModel.bound_fingerprint).where(KeyModel.id == key_id)
        )
        return result.scalar_one_or_none()
