"""
Tests for the token-authenticated HTTP API and the public routes.
"""

import pytest

from backend.app.core.storage import MemoryBackend

API_TOKEN = "test-token"

AUTH = {"Authorization": f"Bearer {API_TOKEN}"}


# ─── Public routes ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_index_page(client):
    r = await client.get("/")
    assert r.status_code == 200
    assert "ValueAPI" in r.text


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path",
    ["/.env", "/config.json", "/history.json", "/settings.json", "/data/config.json"],
)
async def test_sensitive_paths_are_forbidden(client, path):
    r = await client.get(path)
    assert r.status_code == 403
    assert r.text == "Forbidden"


# ─── Authentication ──────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_missing_token_is_rejected(client):
    r = await client.get("/api/v1/variables")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_wrong_token_is_rejected(client):
    r = await client.get("/get", params={"name": "foo", "token": "wrong"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid or missing token"


@pytest.mark.asyncio
async def test_named_token_is_accepted(client, state):
    t1 = await state.tokens.add_token("t1")
    r = await client.get("/api/v1/groups", params={"token": t1.token})
    assert r.status_code == 200


# ─── Legacy /get and /set ────────────────────────────────────────────


@pytest.mark.asyncio
async def test_get_returns_plain_value(client, state):
    await state.variables.create_variable("foo", "bar")
    r = await client.get("/get", params={"name": "foo", "token": API_TOKEN})
    assert r.status_code == 200
    assert r.text == "bar"


@pytest.mark.asyncio
async def test_get_requires_name(client):
    r = await client.get("/get", params={"token": API_TOKEN})
    assert r.status_code == 400
    assert r.json() == {"error": "Missing variable name"}


@pytest.mark.asyncio
async def test_get_unknown_variable(client):
    r = await client.get("/get", params={"name": "ghost", "token": API_TOKEN})
    assert r.status_code == 404
    assert r.json() == {"error": "Variable not found"}


@pytest.mark.asyncio
async def test_set_updates_existing_variable(client, state):
    await state.variables.create_variable("foo", "1")
    r = await client.post("/set", params={"name": "foo", "value": "2", "token": API_TOKEN})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["variable"] == {"name": "foo", "value": "2", "groupId": "default"}

    history = await state.variables.variable_history("foo")
    assert history[0].source_address == "127.0.0.1"


@pytest.mark.asyncio
async def test_set_requires_value(client):
    r = await client.post("/set", params={"name": "foo", "token": API_TOKEN})
    assert r.status_code == 400
    assert r.json() == {"error": "Missing name or value"}


@pytest.mark.asyncio
async def test_set_unknown_variable(client):
    r = await client.post("/set", params={"name": "ghost", "value": "1", "token": API_TOKEN})
    assert r.status_code == 404
    assert r.json() == {"error": "Variable not found"}


@pytest.mark.asyncio
async def test_set_storage_failure_uses_legacy_body(client, state):
    await state.variables.create_variable("foo", "1")
    failing = MemoryBackend(state.config_store.dump(await state.config_store.load()))
    failing.fail_writes = True
    state.config_store.backend = failing

    r = await client.post("/set", params={"name": "foo", "value": "2", "token": API_TOKEN})
    assert r.status_code == 500
    assert r.json() == {"error": "保存失败"}


# ─── REST variables ──────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_variable_crud(client):
    r = await client.post("/api/v1/variables", json={"name": "foo", "value": "1"}, headers=AUTH)
    assert r.status_code == 201
    assert r.json() == {"name": "foo", "value": "1", "groupId": "default"}

    r = await client.post("/api/v1/variables", json={"name": "foo", "value": "1"}, headers=AUTH)
    assert r.status_code == 409

    r = await client.put("/api/v1/variables/foo", json={"value": "2"}, headers=AUTH)
    assert r.status_code == 200
    assert r.json()["value"] == "2"

    r = await client.get("/api/v1/variables/foo", headers=AUTH)
    assert r.json()["value"] == "2"

    r = await client.get("/api/v1/variables/foo/history", headers=AUTH)
    body = r.json()
    assert body["total"] == 2
    assert [h["action"] for h in body["history"]] == ["update", "create"]
    assert body["history"][0]["oldValue"] == "1"
    assert body["history"][0]["ip"] == "127.0.0.1"

    r = await client.delete("/api/v1/variables/foo", headers=AUTH)
    assert r.status_code == 204

    r = await client.get("/api/v1/variables/foo", headers=AUTH)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_create_variable_in_unknown_group(client):
    r = await client.post(
        "/api/v1/variables",
        json={"name": "foo", "value": "1", "groupId": "nope"},
        headers=AUTH,
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_create_variable_validation_message(client):
    r = await client.post("/api/v1/variables", json={"value": "1"}, headers=AUTH)
    assert r.status_code == 422
    assert r.json()["detail"] == "请填写名称"


@pytest.mark.asyncio
async def test_list_variables_with_filters(client, state):
    team = await state.variables.create_group("Team")
    await state.variables.create_variable("app.a", "1")
    await state.variables.create_variable("app.b", "2", group_id=team.id)
    await state.variables.create_variable("db.c", "3", group_id=team.id)

    r = await client.get("/api/v1/variables", params={"name_prefix": "app."}, headers=AUTH)
    assert [v["name"] for v in r.json()["variables"]] == ["app.a", "app.b"]

    r = await client.get("/api/v1/variables", params={"group_id": team.id}, headers=AUTH)
    assert r.json()["total"] == 2


# ─── REST groups ─────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_group_list_and_create(client):
    r = await client.get("/api/v1/groups", headers=AUTH)
    assert r.json()["groups"] == [{"id": "default", "name": "默认分组"}]

    r = await client.post("/api/v1/groups", json={"name": "Team"}, headers=AUTH)
    assert r.status_code == 201
    group = r.json()

    r = await client.post(
        "/api/v1/variables",
        json={"name": "x", "value": "1", "groupId": group["id"]},
        headers=AUTH,
    )
    assert r.status_code == 201

    r = await client.get("/api/v1/groups", headers=AUTH)
    assert r.json()["total"] == 2


@pytest.mark.asyncio
async def test_data_is_persisted_to_data_dir(client, app_settings):
    await client.post("/api/v1/variables", json={"name": "foo", "value": "1"}, headers=AUTH)
    assert app_settings.config_path.exists()
    assert app_settings.history_path.exists()
    assert app_settings.settings_path.exists()
