"""
Tests for TokenRegistry, SettingsService and AdminSessionManager.
"""

import pytest

from backend.app.core.document_store import DocumentStore
from backend.app.core.exceptions import AlreadyExistsError, NotFoundError, ProtectedError
from backend.app.core.storage import MemoryBackend
from backend.app.models.token import DEFAULT_TOKEN_NAME, SettingsDocument
from backend.app.services.session_service import AdminSessionManager
from backend.app.services.token_service import SettingsService, TokenRegistry


# ─── Bootstrap ───────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_default_token_bootstrapped_from_secret(registry):
    tokens = await registry.list_tokens()
    assert [t.name for t in tokens] == [DEFAULT_TOKEN_NAME]
    assert tokens[0].token == "bootstrap-secret"
    assert tokens[0].is_default
    assert await registry.validate("bootstrap-secret")


@pytest.mark.asyncio
async def test_missing_bootstrap_secret_generates_random(caplog):
    registry = TokenRegistry(DocumentStore(MemoryBackend(), SettingsDocument))
    default = await registry.get_token(DEFAULT_TOKEN_NAME)
    assert len(default.token) == 32
    assert "未配置 TOKEN" in caplog.text


@pytest.mark.asyncio
async def test_edited_default_token_is_not_rotated_back():
    store = DocumentStore(MemoryBackend(), SettingsDocument)
    first = TokenRegistry(store, bootstrap_secret="original")
    await first.edit_token(DEFAULT_TOKEN_NAME, new_secret="rotated")

    # A restart with the same environment must keep the manual edit
    second = TokenRegistry(store, bootstrap_secret="original")
    assert await second.validate("rotated")
    assert not await second.validate("original")


# ─── Validation & CRUD ───────────────────────────────────────────────


@pytest.mark.asyncio
async def test_empty_candidate_is_invalid(registry):
    assert not await registry.validate("")
    assert not await registry.validate(None)
    assert not await registry.validate("wrong")


@pytest.mark.asyncio
async def test_token_lifecycle_scenario(registry):
    t1 = await registry.add_token("t1", "ci")
    assert len(t1.token) == 32
    assert await registry.validate(t1.token)

    with pytest.raises(ProtectedError):
        await registry.remove_token(DEFAULT_TOKEN_NAME)

    await registry.remove_token("t1")
    assert not await registry.validate(t1.token)
    assert await registry.validate("bootstrap-secret")


@pytest.mark.asyncio
async def test_add_duplicate_token_fails(registry):
    await registry.add_token("t1")
    with pytest.raises(AlreadyExistsError):
        await registry.add_token("t1")
    with pytest.raises(AlreadyExistsError):
        await registry.add_token(DEFAULT_TOKEN_NAME)


@pytest.mark.asyncio
async def test_remove_unknown_token_fails(registry):
    with pytest.raises(NotFoundError):
        await registry.remove_token("ghost")


@pytest.mark.asyncio
async def test_edit_token(registry):
    t1 = await registry.add_token("t1", "old")
    edited = await registry.edit_token("t1", new_remark="new")
    assert edited.token == t1.token
    assert edited.remark == "new"

    edited = await registry.edit_token("t1", new_secret="s3cret")
    assert await registry.validate("s3cret")
    assert not await registry.validate(t1.token)

    with pytest.raises(NotFoundError):
        await registry.edit_token("ghost", new_remark="x")


@pytest.mark.asyncio
async def test_allow_new_token_setting_blocks_creation(registry):
    panel = SettingsService(registry.store)
    await panel.update_settings(allow_new_token=False)
    with pytest.raises(ProtectedError):
        await registry.add_token("t1")

    await panel.update_settings(allow_new_token=True)
    assert (await registry.add_token("t1")).name == "t1"


# ─── Panel settings ──────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_update_settings_keeps_unspecified_values(registry):
    panel = SettingsService(registry.store)
    await panel.update_settings(history_limit=50)
    updated = await panel.update_settings(page_size=5)
    assert updated.history_limit == 50
    assert updated.page_size == 5
    assert updated.allow_new_token is True
    assert await panel.history_limit() == 50


# ─── Admin sessions ──────────────────────────────────────────────────


def test_session_lifecycle():
    sessions = AdminSessionManager()
    sid = sessions.create_session()
    assert len(sid) == 32
    assert sessions.is_valid(sid)
    assert not sessions.is_valid("other")
    assert not sessions.is_valid(None)

    sessions.destroy_session(sid)
    assert not sessions.is_valid(sid)


def test_sessions_are_independent_and_cleared():
    sessions = AdminSessionManager()
    a = sessions.create_session()
    b = sessions.create_session()
    assert a != b
    sessions.destroy_session(a)
    assert sessions.is_valid(b)

    sessions.clear()
    assert len(sessions) == 0
