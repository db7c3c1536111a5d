"""Shared test fixtures for Scriptguard."""

import base64
import os

import httpx
import pytest
from httpx import ASGITransport, AsyncClient


API_KEY = "test-super-admin-key"
SECRET_KEY = "test-secret-key-for-sessions"
SCRIPT_SOURCE = 'print("protected script running")\n'


@pytest.fixture
def api_key():
    return API_KEY


def github_contents(data: str | bytes) -> httpx.Response:
    """A GitHub contents API response carrying ``data`` as a file."""
    if isinstance(data, str):
        data = data.encode()
    encoded = base64.encodebytes(data).decode()
    return httpx.Response(
        200,
        json={"type": "file", "encoding": "base64", "content": encoded},
    )


class FakeGitHub:
    """MockTransport handler that records requests and serves one file."""

    def __init__(self, text: str = SCRIPT_SOURCE):
        self.text = text
        self.status_code = 200
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"message": "error"})
        return github_contents(self.text)


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def app(github):
    """Create a test app with in-memory DB and a fake GitHub."""
    os.environ["SCRIPTGUARD_DB_URL"] = "sqlite+aiosqlite://"
    os.environ["SCRIPTGUARD_API_KEY"] = API_KEY
    os.environ["SCRIPTGUARD_SECRET_KEY"] = SECRET_KEY

    # Clear caches and singletons so new env vars take effect
    from scriptguard.common.config import get_settings
    get_settings.cache_clear()

    from scriptguard import deps
    deps.reset_singletons()

    from scriptguard.assets.fetcher import GitHubAssetFetcher
    deps._fetcher = GitHubAssetFetcher(transport=httpx.MockTransport(github))

    from scriptguard.app import create_app
    return create_app()


@pytest.fixture
async def client(app):
    # Manually init DB since ASGITransport doesn't run lifespan
    from scriptguard.deps import get_asset_fetcher, get_db
    db = get_db()
    await db.init()
    await db.create_all()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await get_asset_fetcher().close()
    await db.close()


@pytest.fixture
def super_admin_headers():
    return {"X-Scriptguard-Api-Key": API_KEY}


async def register_admin(client, admin_id: str = "admin-1") -> dict:
    resp = await client.post(
        "/admins",
        json={"admin_id": admin_id, "name": "Admin", "email": f"{admin_id}@example.com"},
        headers={"X-Scriptguard-Api-Key": API_KEY},
    )
    assert resp.status_code == 201
    return {"X-Scriptguard-Session": resp.json()["session_token"]}


@pytest.fixture
async def admin_headers(client):
    return await register_admin(client)


@pytest.fixture
def make_admin(client):
    async def _make(admin_id: str):
        return await register_admin(client, admin_id)
    return _make


@pytest.fixture
def make_project(client):
    async def _make(headers, **overrides):
        return await create_project(client, headers, **overrides)
    return _make


async def create_project(client, headers, **overrides) -> dict:
    body = {
        "name": "Demo Script",
        "github_owner": "octo",
        "github_repo": "scripts",
        "github_path": "src/main.lua",
    }
    body.update(overrides)
    resp = await client.post("/projects", json=body, headers=headers)
    assert resp.status_code == 201
    return resp.json()
