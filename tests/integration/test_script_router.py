"""Integration tests for script delivery."""

import httpx

KEY_HEADER = "user-scriptguard-key"


def device(fingerprint, key="K1"):
    headers = {"hwid": fingerprint}
    if key is not None:
        headers[KEY_HEADER] = key
    return headers


async def _add_key(client, headers, project_id, key="K1", **extra):
    body = {"key": key, "owner_identity": "user-1", "display_name": "Player One"}
    body.update(extra)
    resp = await client.post(f"/projects/{project_id}/keys", json=body, headers=headers)
    assert resp.status_code == 201
    return resp.json()


async def _execution_count(client, headers, project_id):
    resp = await client.get(f"/projects/{project_id}/executions/count", headers=headers)
    assert resp.status_code == 200
    return resp.json()["count"]


async def test_no_project_configured(client):
    resp = await client.get("/script", headers=device("fp-A"))
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert "No script has been initialized yet" in resp.text
    assert "Kick(message)" in resp.text


async def test_paid_flow(client, admin_headers, make_project, github):
    source = github.text
    project = await make_project(admin_headers)
    pid = project["project_id"]
    await _add_key(client, admin_headers, pid)

    # First device binds the key
    resp = await client.get("/script", headers=device("fp-A"))
    assert resp.status_code == 200
    assert 'getgenv()["scriptguard"] = {' in resp.text
    assert '  hwid = "fp-A",' in resp.text
    assert '  userid = "user-1",' in resp.text
    assert "  is_premium = true," in resp.text
    assert resp.text.endswith(source)
    assert github.requests[0].url.path == "/repos/octo/scripts/contents/src/main.lua"

    # Same device again
    resp = await client.get("/script", headers=device("fp-A"))
    assert source in resp.text

    # Another device is refused and nothing is fetched for it
    fetched = len(github.requests)
    resp = await client.get("/script", headers=device("fp-B"))
    assert "Key is registered to a different device" in resp.text
    assert source not in resp.text
    assert len(github.requests) == fetched

    # Admin reset lets the next device bind
    resp = await client.post(f"/projects/{pid}/keys/K1/reset", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["bound_fingerprint"] is None

    resp = await client.get("/script", headers=device("fp-B"))
    assert '  hwid = "fp-B",' in resp.text

    resp = await client.get("/script", headers=device("fp-A"))
    assert "Key is registered to a different device" in resp.text

    assert await _execution_count(client, admin_headers, pid) == 3


async def test_binding_visible_to_admin(client, admin_headers, make_project):
    project = await make_project(admin_headers)
    pid = project["project_id"]
    await _add_key(client, admin_headers, pid)

    await client.get("/script", headers=device("fp-A"))

    resp = await client.get(f"/projects/{pid}/keys", headers=admin_headers)
    assert resp.json()[0]["bound_fingerprint"] == "fp-A"


async def test_missing_fingerprint(client, admin_headers, make_project):
    await make_project(admin_headers)
    resp = await client.get("/script", headers={KEY_HEADER: "K1"})
    assert "Invalid executor" in resp.text


async def test_missing_key(client, admin_headers, make_project):
    await make_project(admin_headers)
    resp = await client.get("/script", headers=device("fp-A", key=None))
    assert "No key provided" in resp.text


async def test_unknown_key(client, admin_headers, make_project):
    await make_project(admin_headers)
    resp = await client.get("/script", headers=device("fp-A", key="nope"))
    assert "Invalid key provided" in resp.text


async def test_expired_key(client, admin_headers, make_project):
    project = await make_project(admin_headers)
    await _add_key(
        client, admin_headers, project["project_id"],
        key_type="temporary", expires_at="2000-01-01T00:00:00Z",
    )
    resp = await client.get("/script", headers=device("fp-A"))
    assert "Key has expired" in resp.text

    keys = await client.get(f"/projects/{project['project_id']}/keys", headers=admin_headers)
    assert keys.json()[0]["bound_fingerprint"] is None


async def test_temporary_key_expiry_line(client, admin_headers, make_project):
    project = await make_project(admin_headers)
    await _add_key(
        client, admin_headers, project["project_id"],
        key_type="temporary", expires_at="2999-01-01T00:00:00Z",
    )
    resp = await client.get("/script", headers=device("fp-A"))
    assert "  expiry = os.time() + " in resp.text


async def test_free_paywall(client, admin_headers, make_project, github):
    source = github.text
    project = await make_project(admin_headers, license_mode="free-paywall")

    resp = await client.get("/script", headers={"syn-fingerprint": "fp-X"})
    assert '  hwid = "fp-X",' in resp.text
    assert "  is_premium = false," in resp.text
    assert resp.text.endswith(source)

    assert await _execution_count(client, admin_headers, project["project_id"]) == 0


async def test_fetch_failure(client, admin_headers, make_project, github):
    project = await make_project(admin_headers, companion_link="https://discord.gg/demo")
    await _add_key(client, admin_headers, project["project_id"])
    github.status_code = 404

    resp = await client.get("/script", headers=device("fp-A"))
    assert resp.status_code == 200
    assert "Failed to fetch script" in resp.text
    assert 'pcall(setclipboard, "https://discord.gg/demo")' in resp.text
    assert "getgenv()" not in resp.text


async def test_project_github_token_forwarded(client, admin_headers, make_project, github):
    await make_project(admin_headers, github_token="ghp_project", license_mode="free-paywall")
    await client.get("/script", headers=device("fp-A", key=None))
    assert github.requests[0].headers["Authorization"] == "Bearer ghp_project"


async def test_oldest_project_is_served(client, admin_headers, make_project):
    await make_project(admin_headers, name="First", license_mode="free-paywall")
    await make_project(admin_headers, name="Second", license_mode="free-paywall")
    resp = await client.get("/script", headers=device("fp-A", key=None))
    assert '  script_name = "First",' in resp.text


async def test_key_of_deleted_project(client, admin_headers, make_project):
    doomed = await make_project(admin_headers, name="Doomed")
    await _add_key(client, admin_headers, doomed["project_id"])
    await make_project(admin_headers, name="Live")
    await client.delete(f"/projects/{doomed['project_id']}", headers=admin_headers)

    resp = await client.get("/script", headers=device("fp-A"))
    assert "Invalid key provided" in resp.text


async def test_binary_asset_served_verbatim(client, admin_headers, make_project, github):
    raw = b'local s = "\xff\xfe\x80"\nprint(#s)\n'
    github.text = raw
    await make_project(admin_headers, license_mode="free-paywall")

    resp = await client.get("/script", headers=device("fp-A", key=None))
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.content.endswith(b"}\n\n" + raw)


async def test_null_content_renders_fetch_failure(client, admin_headers, make_project):
    from scriptguard import deps
    from scriptguard.assets.fetcher import GitHubAssetFetcher

    def handler(request):
        return httpx.Response(
            200, json={"type": "file", "encoding": "base64", "content": None}
        )

    await deps.get_asset_fetcher().close()
    deps._fetcher = GitHubAssetFetcher(transport=httpx.MockTransport(handler))
    await make_project(admin_headers, license_mode="free-paywall")

    resp = await client.get("/script", headers=device("fp-A", key=None))
    assert resp.status_code == 200
    assert "Failed to fetch script" in resp.text
