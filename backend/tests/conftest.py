"""
MediaShare Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (real SQLite store, local blob
       storage in a temp dir, an API client wired to both).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── test_settings: Settings pointing at tmp_path (sql + local backends)
    ├── sql_store: SqlMetadataStore on a fresh SQLite file
    ├── local_blob_store: LocalBlobStore under tmp_path
    ├── app: create_app() with the two stores injected
    ├── test_client: HTTPX AsyncClient for API endpoint testing
    └── sample_image_bytes: Fake image content for upload tests

No test talks to Azure: Cosmos and Blob Storage clients are mocked in
test_cosmos_store.py and test_blob_store.py.
"""

import os
import tempfile

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any app imports
# (mediashare.main builds a module-level app from the environment)
os.environ["METADATA_BACKEND"] = "sql"
os.environ["BLOB_BACKEND"] = "local"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="mediashare_test_")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    os.environ["STORAGE_ROOT"], "default.db"
)
os.environ["LOG_LEVEL"] = "WARNING"

from mediashare.config import Settings  # noqa: E402
from mediashare.main import create_app  # noqa: E402
from mediashare.services.file_service import LocalBlobStore  # noqa: E402
from mediashare.services.sql_store import SqlMetadataStore  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path):
    """Settings for the SQL + local backends, isolated in tmp_path."""
    return Settings(
        metadata_backend="sql",
        blob_backend="local",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'mediashare.db'}",
        storage_root=str(tmp_path / "storage"),
        cors_origin="*",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def sql_store(test_settings):
    """
    A real SqlMetadataStore on an empty SQLite file.

    The schema is created lazily on the first collection call.
    """
    store = SqlMetadataStore(test_settings)
    yield store
    await store.close()


@pytest.fixture
def local_blob_store(test_settings):
    """LocalBlobStore writing to tmp_path/storage."""
    return LocalBlobStore(
        storage_root=test_settings.storage_root,
        container_name=test_settings.blob_container_name,
    )


@pytest.fixture
def app(test_settings, sql_store, local_blob_store):
    """The FastAPI app with the test stores injected."""
    return create_app(
        settings=test_settings,
        metadata_store=sql_store,
        blob_store=local_blob_store,
    )


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Uses ASGITransport to route requests directly to the app (no server).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_image_bytes():
    """
    Minimal JPEG bytes: Start of Image + JFIF header + End of Image.
    Not a real photograph; nothing in the API decodes images.
    """
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )
