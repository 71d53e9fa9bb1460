"""
Pytest configuration and shared fixtures for the order tracker tests.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from restaurant.catalog import build_default_catalog
from restaurant.core.config import Settings
from restaurant.main import create_app
from restaurant.services.storage import SqlOrderStore

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def catalog():
    """Standard menu (meal ids 0-5)."""
    return build_default_catalog()


@pytest.fixture
def settings():
    """Settings pointing at a private in-memory database."""
    return Settings(_env_file=None, database_url=MEMORY_URL, debug=True)


@pytest_asyncio.fixture
async def store():
    """Initialized in-memory order store."""
    store = SqlOrderStore.from_url(MEMORY_URL)
    await store.initialize()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def file_store(tmp_path):
    """Initialized order store backed by a SQLite file with a real connection pool."""
    store = SqlOrderStore.from_url(f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def client(settings, catalog):
    """Test client running the full application lifespan."""
    app = create_app(
        settings=settings,
        catalog=catalog,
        store=SqlOrderStore.from_url(MEMORY_URL),
    )
    with TestClient(app) as client:
        yield client
