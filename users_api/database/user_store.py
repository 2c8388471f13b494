"""User stores: an in-memory collection and the shared DuckDB users table"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional
import logging
import threading

import duckdb

from users_api.database.connection import DuckDBConnectionPool
from users_api.errors import NotFoundError, StoreError
from users_api.models import CreateUserRequest, User

logger = logging.getLogger(__name__)

SEED_USERS = [
    ("Alice", "alice@example.com"),
    ("Bob", "bob@example.com"),
]

USER_COLUMNS = "id, name, email, created_at"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UserStore(ABC):
    """Persistence boundary the route handlers depend on"""

    @abstractmethod
    def list_users(self, limit: Optional[int] = None) -> List[User]:
        """Return known users, ordering is store specific"""

    @abstractmethod
    def get_user(self, user_id: int) -> User:
        """Return one user or raise NotFoundError"""

    @abstractmethod
    def create_user(self, request: CreateUserRequest) -> User:
        """Persist a validated request and return the stored record"""

    @abstractmethod
    def ping(self) -> None:
        """Raise StoreError when the backing store is unreachable"""

    def list_users_by_id(self) -> List[User]:
        """Every user, lowest id first"""
        return sorted(self.list_users(), key=lambda user: user.id)

    def close(self) -> None:
        pass


class InMemoryUserStore(UserStore):
    """Process-local users list, seeded with Alice and Bob.

    Reads and writes go through one lock, so concurrent creates never hand out
    the same id.
    """

    def __init__(self, seed: bool = True):
        self._lock = threading.Lock()
        self._users: List[User] = []
        if seed:
            for name, email in SEED_USERS:
                self.create_user(CreateUserRequest(name=name, email=email))

    def list_users(self, limit: Optional[int] = None) -> List[User]:
        with self._lock:
            users = list(self._users)
        return users if limit is None else users[:limit]

    def get_user(self, user_id: int) -> User:
        with self._lock:
            for user in self._users:
                if user.id == user_id:
                    return user
        raise NotFoundError()

    def create_user(self, request: CreateUserRequest) -> User:
        with self._lock:
            user = User(
                id=len(self._users) + 1,
                name=request.name,
                email=request.email,
                created_at=utc_now(),
            )
            self._users.append(user)
        logger.info("Created user %d in memory", user.id)
        return user

    def ping(self) -> None:
        return None

    def __len__(self):
        with self._lock:
            return len(self._users)


class DuckDBUserStore(UserStore):
    """Users table shared by the legacy and v2 services"""

    def __init__(self, pool: DuckDBConnectionPool, list_limit: int = 100, seed: bool = True):
        self.pool = pool
        self.list_limit = list_limit
        self._create_tables()
        if seed:
            self._seed()

    def _create_tables(self):
        """Create the shared users schema when missing"""
        with self.pool.connection() as conn:
            conn.execute("CREATE SEQUENCE IF NOT EXISTS users_id_seq START 1")
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY DEFAULT nextval('users_id_seq'),
                    name VARCHAR NOT NULL,
                    email VARCHAR NOT NULL UNIQUE,
                    password VARCHAR,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_users_email ON users (email)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_users_created_at ON users (created_at DESC)")
        logger.info("DuckDB users table ready")

    def _seed(self):
        with self.pool.connection() as conn:
            for name, email in SEED_USERS:
                exists = conn.execute("SELECT 1 FROM users WHERE email = ?", [email]).fetchone()
                if exists:
                    continue
                now = _to_db_timestamp(utc_now())
                conn.execute(
                    "INSERT INTO users (name, email, created_at, updated_at) VALUES (?, ?, ?, ?)",
                    [name, email, now, now],
                )
                logger.info("Seeded user %s", email)

    def list_users(self, limit: Optional[int] = None) -> List[User]:
        """Newest first, capped at list_limit"""
        limit = self.list_limit if limit is None else min(limit, self.list_limit)
        rows = self._fetchall(f"""
            SELECT {USER_COLUMNS} FROM users
            ORDER BY created_at DESC, id DESC
            LIMIT ?
        """, [limit])
        return [_row_to_user(row) for row in rows]

    def list_users_by_id(self) -> List[User]:
        """Every user in id order, as the v1 listing returns them"""
        rows = self._fetchall(f"SELECT {USER_COLUMNS} FROM users ORDER BY id", [])
        return [_row_to_user(row) for row in rows]

    def get_user(self, user_id: int) -> User:
        rows = self._fetchall(f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", [user_id])
        if not rows:
            raise NotFoundError()
        return _row_to_user(rows[0])

    def create_user(self, request: CreateUserRequest) -> User:
        now = _to_db_timestamp(utc_now())
        try:
            with self.pool.connection() as conn:
                row = conn.execute(f"""
                    INSERT INTO users (name, email, created_at, updated_at)
                    VALUES (?, ?, ?, ?)
                    RETURNING {USER_COLUMNS}
                """, [request.name, request.email, now, now]).fetchone()
        except duckdb.Error as e:
            raise StoreError() from e
        user = _row_to_user(row)
        logger.info("Created user %d in users table", user.id)
        return user

    def ping(self) -> None:
        self.pool.ping()

    def close(self) -> None:
        self.pool.close()

    def _fetchall(self, query: str, params: list):
        try:
            with self.pool.connection() as conn:
                return conn.execute(query, params).fetchall()
        except duckdb.Error as e:
            raise StoreError() from e


def _to_db_timestamp(value: datetime) -> datetime:
    """Column type is a naive TIMESTAMP holding UTC"""
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _row_to_user(row) -> User:
    user_id, name, email, created_at = row
    if created_at is not None and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return User(id=user_id, name=name, email=email, created_at=created_at)
