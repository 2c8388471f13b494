"""Tests for the in-memory and DuckDB user stores"""
from concurrent.futures import ThreadPoolExecutor
from datetime import timezone

import pytest

from users_api.application import duckdb_store_factory
from users_api.database import DuckDBConnectionPool, DuckDBUserStore, InMemoryUserStore
from users_api.errors import NotFoundError, StoreError
from users_api.models import CreateUserRequest


def new_user(name):
    return CreateUserRequest(name=name, email=f"{name.lower()}@example.com")


class TestInMemoryUserStore:
    """Test suite for the process-local store"""

    def test_seeded(self, memory_store):
        users = memory_store.list_users()
        assert [(u.id, u.name) for u in users] == [(1, "Alice"), (2, "Bob")]

    def test_unseeded(self):
        store = InMemoryUserStore(seed=False)
        assert store.list_users() == []
        assert store.create_user(new_user("Zed")).id == 1

    def test_create_assigns_next_id_and_timestamp(self, memory_store):
        user = memory_store.create_user(new_user("Charlie"))

        assert user.id == 3
        assert user.created_at.tzinfo == timezone.utc
        assert memory_store.get_user(3) == user

    def test_get_missing(self, memory_store):
        with pytest.raises(NotFoundError):
            memory_store.get_user(42)

    def test_list_limit(self, memory_store):
        assert [u.name for u in memory_store.list_users(limit=1)] == ["Alice"]

    def test_list_is_a_copy(self, memory_store):
        users = memory_store.list_users()
        users.clear()
        assert len(memory_store) == 2

    def test_concurrent_creates_get_unique_ids(self, memory_store):
        """Test parallel writers never share an id"""
        with ThreadPoolExecutor(max_workers=8) as executor:
            users = list(executor.map(lambda i: memory_store.create_user(new_user(f"U{i}")), range(50)))

        ids = sorted(u.id for u in users)
        assert ids == list(range(3, 53))
        assert len(memory_store) == 52

    def test_ping(self, memory_store):
        assert memory_store.ping() is None


class TestDuckDBUserStore:
    """Test suite for the shared users table"""

    def test_tables_creation(self, duckdb_store):
        with duckdb_store.pool.connection() as conn:
            result = conn.execute("""
                SELECT table_name FROM information_schema.tables
                WHERE table_name = 'users'
            """).fetchall()
        assert len(result) == 1

    def test_indexes_created(self, duckdb_store):
        with duckdb_store.pool.connection() as conn:
            rows = conn.execute("""
                SELECT index_name FROM duckdb_indexes()
                WHERE table_name = 'users'
            """).fetchall()
        indexes = {row[0] for row in rows}

        assert {"idx_users_email", "idx_users_created_at"} <= indexes

    def test_seeded(self, duckdb_store):
        users = duckdb_store.list_users_by_id()
        assert [(u.id, u.name, u.email) for u in users] == [
            (1, "Alice", "alice@example.com"),
            (2, "Bob", "bob@example.com"),
        ]

    def test_reopen_does_not_reseed(self, settings):
        """Test seeding is skipped when the seed emails already exist"""
        first = duckdb_store_factory(settings)
        first.close()

        second = duckdb_store_factory(settings)
        try:
            assert len(second.list_users_by_id()) == 2
        finally:
            second.close()

    def test_create_returns_generated_id(self, duckdb_store):
        user = duckdb_store.create_user(new_user("Charlie"))

        assert user.id == 3
        assert user.name == "Charlie"
        assert user.created_at.tzinfo == timezone.utc
        assert duckdb_store.get_user(3) == user

    def test_get_missing(self, duckdb_store):
        with pytest.raises(NotFoundError):
            duckdb_store.get_user(999)

    def test_list_newest_first(self, duckdb_store):
        duckdb_store.create_user(new_user("Charlie"))
        duckdb_store.create_user(new_user("Dana"))

        names = [u.name for u in duckdb_store.list_users()]

        assert names[:2] == ["Dana", "Charlie"]
        assert len(names) == 4

    def test_list_capped_at_limit(self, settings):
        pool = DuckDBConnectionPool(db_path=settings.DATABASE_URL)
        store = DuckDBUserStore(pool, list_limit=3)
        try:
            for i in range(5):
                store.create_user(new_user(f"User{i}"))

            assert len(store.list_users()) == 3
            assert len(store.list_users(limit=50)) == 3
            assert len(store.list_users(limit=1)) == 1
        finally:
            store.close()

    def test_duplicate_email_is_store_error(self, duckdb_store):
        with pytest.raises(StoreError) as exc_info:
            duckdb_store.create_user(CreateUserRequest(name="Alice 2", email="alice@example.com"))

        assert exc_info.value.__cause__ is not None
        assert len(duckdb_store.list_users_by_id()) == 2

    def test_ping(self, duckdb_store):
        duckdb_store.ping()

    def test_closed_store_errors(self, settings):
        store = duckdb_store_factory(settings)
        store.close()

        with pytest.raises(StoreError):
            store.ping()
        with pytest.raises(StoreError):
            store.list_users()

    def test_concurrent_creates(self, duckdb_store):
        with ThreadPoolExecutor(max_workers=4) as executor:
            users = list(executor.map(lambda i: duckdb_store.create_user(new_user(f"P{i}")), range(20)))

        assert len({u.id for u in users}) == 20
        assert len(duckdb_store.list_users_by_id()) == 22
