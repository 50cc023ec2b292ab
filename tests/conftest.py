"""
Catalog Backend - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment variables are set before any catalog import, so the
       module-level settings singleton never points at a real database.

Fixture Hierarchy (all function-scoped):
    ├── test_settings:      Settings pointing at a per-test SQLite file + upload dir
    ├── database:           Database with the schema created
    ├── db_session:         AsyncSession from that database
    ├── blob_store:         BlobStore rooted in a temp directory
    ├── app / test_client:  Fresh app with its lifespan running + HTTPX AsyncClient
    ├── mock_repository:    AsyncMock standing in for ProductRepository
    └── sample_image_bytes: Minimal PNG bytes
"""

import os
import tempfile
import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

_import_dir = tempfile.mkdtemp(prefix="catalog_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_import_dir, 'import.db')}"
os.environ["STORAGE_ROOT"] = os.path.join(_import_dir, "uploads")
os.environ["LOG_LEVEL"] = "WARNING"

from catalog.config import Settings  # noqa: E402
from catalog.database import Database  # noqa: E402
from catalog.main import create_app, lifespan  # noqa: E402
from catalog.migrations import upgrade_schema  # noqa: E402
from catalog.services.blob_store import BlobStore  # noqa: E402


async def create_schema(database: Database) -> None:
    """Builds the schema through the Alembic migrations, as production does."""
    await upgrade_schema(database)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated to this test's temporary directory."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
        storage_root=str(tmp_path / "uploads"),
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    db = Database.from_settings(test_settings)
    await create_schema(db)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
def blob_store(tmp_path):
    return BlobStore(str(tmp_path / "blobs"), "uploads")


@pytest_asyncio.fixture
async def app(test_settings):
    """
    A fresh application with its lifespan running.

    ASGITransport does not send lifespan events, so the lifespan context is
    entered here and the schema is created on the app's own database.
    """
    application = create_app(test_settings)
    async with lifespan(application):
        await create_schema(application.state.database)
        yield application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/products")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_repository():
    """An AsyncMock with the ProductRepository method surface."""
    repository = AsyncMock()
    repository.create = AsyncMock()
    repository.list_all = AsyncMock(return_value=[])
    repository.get = AsyncMock()
    repository.update = AsyncMock()
    repository.toggle_favorite = AsyncMock()
    repository.delete = AsyncMock()
    return repository


@pytest.fixture
def make_product():
    """Builds attribute bags shaped like Product rows."""
    def _make(**overrides):
        fields = {
            "id": uuid.uuid4(),
            "sku": "A1",
            "name": "Widget",
            "quantity": 3.0,
            "description": "x",
            "images": [],
            "featured_image": None,
            "is_favorite": False,
        }
        fields.update(overrides)
        return SimpleNamespace(**fields)
    return _make


@pytest.fixture
def sample_image_bytes():
    """PNG signature plus an empty IHDR-sized tail; enough for byte comparisons."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
