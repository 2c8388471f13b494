from contextlib import contextmanager
from pathlib import Path
import logging
import threading
import time

import duckdb

from users_api.errors import StoreError

logger = logging.getLogger(__name__)


class DuckDBConnectionPool:
    """Bounded pool of DuckDB cursors over one database handle.

    Each checkout gets its own cursor (a DuckDB connection that shares the
    database), so concurrent requests never share a cursor. At most
    ``max_open`` cursors are in use at once, at most ``max_idle`` are kept for
    reuse, and idle cursors older than ``max_lifetime`` seconds are dropped.
    """

    def __init__(self, db_path="data/users.duckdb", max_open=25, max_idle=5,
                 max_lifetime=300.0, acquire_timeout=5.0):
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self.db_path = db_path
        self.max_open = max_open
        self.max_idle = max_idle
        self.max_lifetime = max_lifetime
        self.acquire_timeout = acquire_timeout

        self._slots = threading.BoundedSemaphore(max_open)
        self._lock = threading.Lock()
        self._idle = []  # (created_at, cursor)
        self._closed = False

        try:
            self.conn = duckdb.connect(db_path)
        except duckdb.Error as e:
            raise StoreError(f"Failed to open database {db_path}") from e
        logger.info("DuckDB connected: %s (max_open=%d, max_idle=%d)", db_path, max_open, max_idle)

    @property
    def closed(self):
        return self._closed

    def idle_count(self):
        with self._lock:
            return len(self._idle)

    def _checkout(self):
        with self._lock:
            if self._closed:
                raise StoreError("Connection pool is closed")
            while self._idle:
                created_at, cursor = self._idle.pop()
                if time.monotonic() - created_at < self.max_lifetime:
                    return created_at, cursor
                cursor.close()
            return time.monotonic(), self.conn.cursor()

    def _checkin(self, created_at, cursor, broken=False):
        with self._lock:
            expired = time.monotonic() - created_at >= self.max_lifetime
            if self._closed or broken or expired or len(self._idle) >= self.max_idle:
                cursor.close()
                return
            self._idle.append((created_at, cursor))

    @contextmanager
    def connection(self):
        """Borrow a cursor for the duration of one operation"""
        if not self._slots.acquire(timeout=self.acquire_timeout):
            raise StoreError("Timed out waiting for a database connection")
        try:
            created_at, cursor = self._checkout()
            broken = False
            try:
                yield cursor
            except duckdb.Error:
                broken = True
                raise
            finally:
                self._checkin(created_at, cursor, broken=broken)
        finally:
            self._slots.release()

    def ping(self):
        """Lightweight liveness probe, raises StoreError when unreachable"""
        try:
            with self.connection() as cursor:
                cursor.execute("SELECT 1").fetchone()
        except duckdb.Error as e:
            raise StoreError("Database unreachable") from e

    def close(self):
        """Close idle cursors and the database handle"""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            for _, cursor in self._idle:
                cursor.close()
            self._idle.clear()
        self.conn.close()
        logger.info("DuckDB connection pool closed")
