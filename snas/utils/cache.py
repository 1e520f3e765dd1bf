"""
Key/value cache with per-entry TTL.

Two stores share the CacheStore contract:
- InMemoryCache: process-local dict, evicts expired entries on read and sweeps
  them on every write
- SQLiteCache: persistent ai_cache table, expired rows filtered by the query

Invariant: get() never returns a payload whose expires_at has passed.
"""

import json
import sqlite3
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from snas.utils.errors import ErrorKind, SNASError


@dataclass
class CacheEntry:
    key: str
    payload: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class CacheStore(ABC):
    """
    Abstract TTL cache.

    Subclasses implement get() and set(); the clock is injectable so expiry can be
    tested without sleeping.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the cached payload, or None on miss or expiry."""
        pass

    @abstractmethod
    def set(self, key: str, payload: Any, ttl_seconds: float) -> None:
        """Store payload under key, overwriting any previous entry."""
        pass

    @abstractmethod
    def purge_expired(self) -> int:
        """Remove expired entries. Returns number removed."""
        pass


class InMemoryCache(CacheStore):
    """Process-local TTL cache."""

    def __init__(self, clock: Callable[[], float] = time.time):
        super().__init__(clock)
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return None
        return entry.payload

    def set(self, key: str, payload: Any, ttl_seconds: float) -> None:
        self.purge_expired()
        self._entries[key] = CacheEntry(key, payload, self._clock() + ttl_seconds)

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns number of entries removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()


class SQLiteCache(CacheStore):
    """
    Persistent TTL cache in SQLite.

    Payloads are stored as JSON text, so they must be JSON-serializable.
    Database errors are raised as SNASError(STORAGE_FAILURE).
    """

    def __init__(self, db_path: Path, clock: Callable[[], float] = time.time):
        super().__init__(clock)
        self.db_path = db_path

        if str(db_path) != ":memory:":
            db_path.parent.mkdir(parents=True, exist_ok=True)

        self.conn = sqlite3.connect(str(db_path))
        self.conn.execute(
            """
            CREATE TABLE IF NOT EXISTS ai_cache (
                cache_key TEXT PRIMARY KEY,
                content TEXT NOT NULL,
                expires_at REAL NOT NULL
            )
        """
        )
        self.conn.commit()

    def get(self, key: str) -> Optional[Any]:
        try:
            row = self.conn.execute(
                "SELECT content FROM ai_cache WHERE cache_key = ? AND expires_at > ?",
                (key, self._clock()),
            ).fetchone()
        except sqlite3.Error as e:
            raise SNASError(ErrorKind.STORAGE_FAILURE, "Cache read failed", original_error=e)

        if row is None:
            return None
        return json.loads(row[0])

    def set(self, key: str, payload: Any, ttl_seconds: float) -> None:
        try:
            self.conn.execute(
                "INSERT OR REPLACE INTO ai_cache (cache_key, content, expires_at) VALUES (?, ?, ?)",
                (key, json.dumps(payload), self._clock() + ttl_seconds),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            raise SNASError(ErrorKind.STORAGE_FAILURE, "Cache write failed", original_error=e)

    def purge_expired(self) -> int:
        """Delete expired rows. Returns number of rows removed."""
        cursor = self.conn.execute("DELETE FROM ai_cache WHERE expires_at <= ?", (self._clock(),))
        self.conn.commit()
        return cursor.rowcount

    def close(self) -> None:
        self.conn.close()
