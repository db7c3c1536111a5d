"""Integration tests for admin registration, sessions and account endpoints."""


async def test_register_requires_api_key(client):
    body = {"admin_id": "a1", "name": "A", "email": "a@example.com"}
    resp = await client.post("/admins", json=body)
    assert resp.status_code == 422

    resp = await client.post("/admins", json=body, headers={"X-Scriptguard-Api-Key": "wrong"})
    assert resp.status_code == 403


async def test_register_returns_session(client, super_admin_headers):
    resp = await client.post(
        "/admins",
        json={"admin_id": "a1", "name": "A", "email": "a@example.com"},
        headers=super_admin_headers,
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["admin_id"] == "a1"
    assert data["session_token"]


async def test_mint_session(client, super_admin_headers, admin_headers):
    resp = await client.post("/admins/admin-1/session", headers=super_admin_headers)
    assert resp.status_code == 200
    token = resp.json()["session_token"]

    resp = await client.get("/projects", headers={"X-Scriptguard-Session": token})
    assert resp.status_code == 200


async def test_mint_session_unknown_admin(client, super_admin_headers):
    resp = await client.post("/admins/ghost/session", headers=super_admin_headers)
    assert resp.status_code == 404


async def test_session_required(client):
    resp = await client.get("/projects")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Missing session"


async def test_invalid_session(client):
    resp = await client.get("/projects", headers={"X-Scriptguard-Session": "forged"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid session"


async def test_session_cookie(client, admin_headers):
    token = admin_headers["X-Scriptguard-Session"]
    client.cookies.set("scriptguard_session", token)
    resp = await client.get("/projects")
    assert resp.status_code == 200


async def test_api_keys_lifecycle(client, admin_headers, make_project):
    project = await make_project(admin_headers)
    pid = project["project_id"]

    resp = await client.post(
        f"/projects/{pid}/api-keys", json={"name": "bot"}, headers=admin_headers
    )
    assert resp.status_code == 201
    api_key = resp.json()["api_key"]
    assert api_key.startswith("sgt_")

    resp = await client.get("/account/api-keys", headers=admin_headers)
    assert [k["api_key"] for k in resp.json()] == [api_key]

    resp = await client.post(
        "/account/api-keys/delete",
        json={"keys": [{"project_id": pid, "api_key": api_key}]},
        headers=admin_headers,
    )
    assert resp.json() == {"deleted": 1}

    resp = await client.get("/account/api-keys", headers=admin_headers)
    assert resp.json() == []


async def test_delete_account(client, admin_headers, make_project, super_admin_headers):
    await make_project(admin_headers)
    await make_project(admin_headers)

    resp = await client.delete("/account", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"admin_id": "admin-1", "projects_deleted": 2}

    # The token still verifies but the account is gone
    resp = await client.get("/projects", headers=admin_headers)
    assert resp.status_code == 403

    resp = await client.post("/admins/admin-1/session", headers=super_admin_headers)
    assert resp.status_code == 404
