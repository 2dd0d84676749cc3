"""
SQLite-backed durable keyed store.

An ordered map from unsigned 64-bit keys to encoded item records, plus one
persisted counter cell. Uses WAL mode and parameterized queries; every call
opens a short-lived connection that commits on exit and rolls back on error.
The store knows nothing about items beyond their encoded bytes.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from stockroom.errors import StorageFailure
from stockroom.ids import pack_u64, unpack_u64

logger = logging.getLogger(__name__)

COUNTER_NAME = "item_id"


@contextmanager
def _connection(db_path: str):
    """Context manager for a SQLite connection (auto-commit on exit, rollback on error)."""
    try:
        conn = sqlite3.connect(db_path)
    except sqlite3.Error as e:
        raise StorageFailure(f"cannot open store at {db_path}: {e}") from e
    try:
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        raise StorageFailure(f"storage error: {e}") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


class KeyedStore:
    """
    Durable ``key(u64) -> record(bytes)`` map with a companion counter cell.

    >>> import tempfile, os
    >>> store = KeyedStore(os.path.join(tempfile.mkdtemp(), "inv.db"))
    >>> store.insert(2, b"b") is None
    True
    >>> store.insert(1, b"a") is None
    True
    >>> list(store.iterate())
    [(1, b'a'), (2, b'b')]
    >>> store.remove(2)
    b'b'
    >>> store.counter_get()
    0
    """

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self.init_db()

    def init_db(self) -> None:
        """
        Create database and tables if they do not exist.

        Tables:
        - inventory_items(key, record): key is the 8-byte big-endian id
        - counters(name, value): value is an 8-byte big-endian u64
        """
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        with _connection(self.db_path) as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("""
                CREATE TABLE IF NOT EXISTS inventory_items (
                    key BLOB PRIMARY KEY,
                    record BLOB NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS counters (
                    name TEXT PRIMARY KEY,
                    value BLOB NOT NULL
                )
            """)
            conn.execute(
                "INSERT OR IGNORE INTO counters (name, value) VALUES (?, ?)",
                (COUNTER_NAME, pack_u64(0)),
            )
        logger.info("Inventory store ready at %s", self.db_path)

    # -------------------------------------------------------------------------
    # Map
    # -------------------------------------------------------------------------

    def get(self, key: int) -> bytes | None:
        """Return the record stored under key, or None."""
        with _connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT record FROM inventory_items WHERE key = ?",
                (pack_u64(key),),
            ).fetchone()
        return None if row is None else bytes(row[0])

    def insert(self, key: int, record: bytes) -> bytes | None:
        """Store record under key, replacing any existing one. Returns the previous record."""
        packed = pack_u64(key)
        with _connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT record FROM inventory_items WHERE key = ?", (packed,)
            ).fetchone()
            conn.execute(
                "INSERT OR REPLACE INTO inventory_items (key, record) VALUES (?, ?)",
                (packed, record),
            )
        logger.debug("Stored record key=%d (%d bytes)", key, len(record))
        return None if row is None else bytes(row[0])

    def remove(self, key: int) -> bytes | None:
        """Delete key. Returns the removed record, or None if it was unset."""
        packed = pack_u64(key)
        with _connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT record FROM inventory_items WHERE key = ?", (packed,)
            ).fetchone()
            if row is None:
                return None
            conn.execute("DELETE FROM inventory_items WHERE key = ?", (packed,))
        logger.debug("Removed record key=%d", key)
        return bytes(row[0])

    def iterate(self) -> Iterator[tuple[int, bytes]]:
        """
        Return (key, record) pairs in ascending key order.

        The read snapshot is taken here, at call time; rows are then
        streamed lazily from it. Each call starts a fresh scan. The
        connection closes when the scan is exhausted or closed.
        """
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, isolation_level=None)
            conn.execute("BEGIN")
            cursor = conn.execute("SELECT key, record FROM inventory_items ORDER BY key")
        except sqlite3.Error as e:
            if conn is not None:
                conn.close()
            raise StorageFailure(f"storage error: {e}") from e
        return self._scan(conn, cursor)

    @staticmethod
    def _scan(conn: sqlite3.Connection, cursor: sqlite3.Cursor) -> Iterator[tuple[int, bytes]]:
        try:
            for key, record in cursor:
                yield unpack_u64(bytes(key)), bytes(record)
        except sqlite3.Error as e:
            raise StorageFailure(f"storage error: {e}") from e
        finally:
            conn.close()

    def __len__(self) -> int:
        with _connection(self.db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM inventory_items").fetchone()[0]

    # -------------------------------------------------------------------------
    # Counter
    # -------------------------------------------------------------------------

    def counter_get(self) -> int:
        """Return the persisted counter (last allocated id, 0 if none)."""
        with _connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM counters WHERE name = ?", (COUNTER_NAME,)
            ).fetchone()
        if row is None:
            raise StorageFailure("id counter cell is missing")
        return unpack_u64(bytes(row[0]))

    def counter_set(self, value: int) -> None:
        """Persist a new counter value."""
        packed = pack_u64(value)
        with _connection(self.db_path) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO counters (name, value) VALUES (?, ?)",
                (COUNTER_NAME, packed),
            )
