"""
Shared test fixtures.

Every test gets its own data directory and its own app instance, so the
JSON documents, token list and session set never leak between tests.
"""

import os

# Settings() is instantiated at import time; give it the required values
# before anything under backend.app is imported.
os.environ.setdefault("ADMIN_PASSWORD", "admin-secret")
os.environ.setdefault("TOKEN", "bootstrap-token")

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport  # noqa: E402

from backend.app.core.config import Settings  # noqa: E402
from backend.app.core.document_store import DocumentStore  # noqa: E402
from backend.app.core.storage import MemoryBackend  # noqa: E402
from backend.app.main import create_app  # noqa: E402
from backend.app.models.history import HistoryDocument  # noqa: E402
from backend.app.models.token import SettingsDocument  # noqa: E402
from backend.app.models.variable import ConfigDocument  # noqa: E402
from backend.app.services.history_service import HistoryLedger  # noqa: E402
from backend.app.services.token_service import TokenRegistry  # noqa: E402
from backend.app.services.variable_service import VariableService  # noqa: E402

API_TOKEN = "test-token"
ADMIN_PASSWORD = "admin-secret"


@pytest.fixture
def app_settings(tmp_path):
    return Settings(
        token=API_TOKEN,
        admin_password=ADMIN_PASSWORD,
        data_dir=tmp_path / "data",
    )


@pytest.fixture
def app(app_settings):
    return create_app(app_settings)


@pytest.fixture
def state(app):
    return app.state.value_store


@pytest_asyncio.fixture
async def client(app):
    """Async HTTP client wrapping the app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def admin_client(client):
    """Client that already holds a valid admin session cookie."""
    r = await client.post("/admin/login", data={"password": ADMIN_PASSWORD})
    assert r.status_code == 303
    return client


@pytest.fixture
def config_backend():
    return MemoryBackend()


@pytest.fixture
def history_backend():
    return MemoryBackend()


@pytest.fixture
def config_store(config_backend):
    return DocumentStore(config_backend, ConfigDocument)


@pytest.fixture
def ledger(history_backend):
    return HistoryLedger(DocumentStore(history_backend, HistoryDocument))


@pytest.fixture
def service(config_store, ledger):
    return VariableService(config_store, ledger)


@pytest.fixture
def registry():
    store = DocumentStore(MemoryBackend(), SettingsDocument)
    return TokenRegistry(store, bootstrap_secret="bootstrap-secret")
