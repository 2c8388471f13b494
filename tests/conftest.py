"""Pytest configuration and shared fixtures"""
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add the project root to Python path for imports
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from users_api.application import duckdb_store_factory
from users_api.config import Settings
from users_api.database import InMemoryUserStore
from users_api.legacy_service import create_legacy_app
from users_api.main import create_users_app
from users_api.v2_service import create_v2_app


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway DuckDB file, .env ignored"""
    return Settings(
        _env_file=None,
        DATABASE_URL=str(tmp_path / "users.duckdb"),
        HEALTH_CHECK_TIMEOUT=1.0,
    )

@pytest.fixture
def memory_store():
    """In-memory store seeded with Alice and Bob"""
    return InMemoryUserStore()

@pytest.fixture
def duckdb_store(settings):
    """Shared users table in a temporary DuckDB file"""
    store = duckdb_store_factory(settings)
    yield store
    store.close()

@pytest.fixture
def users_client(settings, memory_store):
    with TestClient(create_users_app(settings, memory_store)) as client:
        yield client

@pytest.fixture
def v2_client(settings, duckdb_store):
    with TestClient(create_v2_app(settings, duckdb_store)) as client:
        yield client

@pytest.fixture
def legacy_client(settings, duckdb_store):
    with TestClient(create_legacy_app(settings, duckdb_store)) as client:
        yield client

@pytest.fixture
def charlie():
    """Valid create-user body"""
    return {"name": "Charlie", "email": "charlie@example.com"}
