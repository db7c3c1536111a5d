"""Tests for the key store — CRUD, project scoping and conditional bind."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from scriptguard.accounts.service import AccountService
from scriptguard.common.config import ScriptguardSettings
from scriptguard.common.database import DatabaseManager
from scriptguard.common.exceptions import DuplicateKeyError, KeyNotFoundError
from scriptguard.keys.service import KeyService
from scriptguard.projects.service import ProjectService


def make_settings(**overrides) -> ScriptguardSettings:
    defaults = {"db_url": "sqlite+aiosqlite://"}
    defaults.update(overrides)
    return ScriptguardSettings(**defaults)


@pytest.fixture
async def db():
    manager = DatabaseManager(make_settings())
    await manager.init()
    await manager.create_all()
    yield manager
    await manager.close()


@pytest.fixture
def keys():
    return KeyService()


@pytest.fixture
async def session(db):
    projects = ProjectService()
    async with db.get_session() as s:
        await AccountService(projects).register_admin(s, "admin-1", "Admin", "a@example.com")
        yield s


@pytest.fixture
async def project(session):
    return await ProjectService().create_project(
        session, "admin-1", "Demo", "octo", "scripts", "main.lua"
    )


async def _key(session, keys, project, token="K1", **kwargs):
    return await keys.create_key(
        session, project.project_id, "user-1", "Player One", key=token, **kwargs
    )


class TestCreateKey:
    async def test_explicit_token(self, session, keys, project):
        key = await _key(session, keys, project)
        assert key.key == "K1"
        assert key.key_type == "permanent"
        assert key.bound_fingerprint is None
        assert key.expires_at is None

    async def test_generated_token(self, session, keys, project):
        key = await keys.create_key(session, project.project_id, "user-1", "Player")
        assert key.key.startswith("SG-")

    async def test_duplicate_token(self, session, keys, project):
        await _key(session, keys, project)
        with pytest.raises(DuplicateKeyError):
            await _key(session, keys, project)

    async def test_all_fields(self, session, keys, project):
        expires = datetime.now(timezone.utc) + timedelta(days=1)
        key = await _key(
            session, keys, project,
            key_type="temporary", expires_at=expires, note="vip",
            bound_fingerprint="fp-A", executor="synapse",
        )
        assert key.key_type == "temporary"
        assert key.note == "vip"
        assert key.bound_fingerprint == "fp-A"
        assert key.executor == "synapse"

    async def test_blank_optional_fields_become_none(self, session, keys, project):
        key = await _key(session, keys, project, note="", bound_fingerprint="")
        assert key.note is None
        assert key.bound_fingerprint is None


class TestLookup:
    async def test_get_by_token(self, session, keys, project):
        await _key(session, keys, project)
        assert (await keys.get_by_token(session, "K1")).key == "K1"
        assert await keys.get_by_token(session, "k1") is None

    async def test_project_scoped(self, session, keys, project):
        other = await ProjectService().create_project(
            session, "admin-1", "Other", "octo", "other", "main.lua"
        )
        await _key(session, keys, project)
        with pytest.raises(KeyNotFoundError):
            await keys.get_project_key(session, other.project_id, "K1")

    async def test_list_keys(self, session, keys, project):
        await _key(session, keys, project, token="K1")
        await _key(session, keys, project, token="K2")
        listed = await keys.list_keys(session, project.project_id)
        assert [k.key for k in listed] == ["K1", "K2"]


class TestMutations:
    async def test_delete(self, session, keys, project):
        await _key(session, keys, project)
        await keys.delete_key(session, project.project_id, "K1")
        assert await keys.get_by_token(session, "K1") is None

    async def test_delete_missing(self, session, keys, project):
        with pytest.raises(KeyNotFoundError):
            await keys.delete_key(session, project.project_id, "nope")

    async def test_reset_binding(self, session, keys, project):
        await _key(session, keys, project, bound_fingerprint="fp-A", executor="synapse")
        key = await keys.reset_binding(session, project.project_id, "K1")
        assert key.bound_fingerprint is None
        assert key.executor is None

    async def test_modify_note(self, session, keys, project):
        await _key(session, keys, project)
        key = await keys.modify_note(session, project.project_id, "K1", "refunded")
        assert key.note == "refunded"
        key = await keys.modify_note(session, project.project_id, "K1", "   ")
        assert key.note is None


class TestBindFingerprint:
    async def test_binds_unbound(self, db, keys, session, project):
        key = await _key(session, keys, project)
        assert await keys.bind_fingerprint(session, key.id, "fp-A") == "fp-A"

    async def test_does_not_overwrite(self, db, keys, session, project):
        key = await _key(session, keys, project)
        await keys.bind_fingerprint(session, key.id, "fp-A")
        assert await keys.bind_fingerprint(session, key.id, "fp-B") == "fp-A"

    async def test_missing_key(self, keys, session):
        assert await keys.bind_fingerprint(session, "no-such-id", "fp-A") is None


class TestConcurrentCreate:
    async def test_unique_index_maps_to_duplicate(self, db, keys, session, project):
        await _key(session, keys, project)
        await session.commit()

        # Lookup misses as if a racing create had not committed yet
        with patch.object(keys, "get_by_token", new_callable=AsyncMock, return_value=None):
            with pytest.raises(DuplicateKeyError):
                async with db.get_session() as other:
                    await keys.create_key(
                        other, project.project_id, "user-2", "Player Two", key="K1"
                    )

        assert len(await keys.list_keys(session, project.project_id)) == 1
