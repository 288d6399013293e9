"""
cache/store.py -- SQLite-backed read-through cache for user lookups by email.

The hot path of every workflow operation is "find the user with this email".
UserCache keeps a JSON snapshot of each user for a fixed TTL (default 10
minutes); CachedUserStore wraps any UserRepository and consults the cache
first, so the workflow never knows whether a cache is present.

Snapshots are serialized, so a caller that mutates a returned User does not
mutate the cached copy.

Cache policy:
  - get_by_email miss -> read the store, cache the result if found
  - add / update      -> cache the record under its current email
  - delete            -> invalidate the email of the deleted record

An update that changes a user's email leaves the old key cached until its
TTL runs out.

The API and the management CLI open the same cache file, so an eviction in
one process is seen by the other. The default ":memory:" database is private
to a single process.

Usage:
    cache = UserCache("user_cache.db", ttl=600)
    users = CachedUserStore(UserStore(db_url), cache)
    users.get_by_email("ada@example.com")
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
import time
from typing import Optional

from auth.models import Role, User
from auth.store import UserRepository

logger = logging.getLogger("usermanagement.cache")

_DEFAULT_TTL = 60 * 10  # 10 minutes in seconds

_DDL = """
CREATE TABLE IF NOT EXISTS user_cache (
    email       TEXT PRIMARY KEY,
    data        TEXT NOT NULL,
    cached_at   REAL NOT NULL
);
"""


class UserCache:
    def __init__(self, db_path: str = ":memory:", ttl: int = _DEFAULT_TTL) -> None:
        self.ttl = ttl
        # One connection shared by every request thread; the lock serializes it.
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute(_DDL)
        self._conn.commit()

    def get(self, email: str) -> Optional[User]:
        """Return the cached user for email if present and not expired."""
        with self._lock:
            row = self._conn.execute(
                "SELECT data, cached_at FROM user_cache WHERE email = ?",
                (email,),
            ).fetchone()
            if row is None:
                return None
            data, cached_at = row
            if time.time() - cached_at > self.ttl:
                self._delete(email)
                return None
        return _load_user(data)

    def set(self, email: str, user: User) -> None:
        """Store a snapshot of user under email, replacing any existing entry."""
        with self._lock:
            self._conn.execute(
                "INSERT OR REPLACE INTO user_cache (email, data, cached_at) VALUES (?, ?, ?)",
                (email, _dump_user(user), time.time()),
            )
            self._conn.commit()

    def invalidate(self, email: str) -> None:
        with self._lock:
            self._delete(email)

    def _delete(self, email: str) -> None:
        self._conn.execute("DELETE FROM user_cache WHERE email = ?", (email,))
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()


class CachedUserStore:
    """UserRepository decorator adding the read-through email cache."""

    def __init__(self, store: UserRepository, cache: UserCache) -> None:
        self._store = store
        self._cache = cache

    def get_by_email(self, email: str) -> Optional[User]:
        user = self._cache.get(email)
        if user is not None:
            return user
        user = self._store.get_by_email(email)
        if user is not None:
            self._cache.set(email, user)
        return user

    def add(self, user: User) -> None:
        self._store.add(user)
        self._cache.set(user.email, user)

    def update(self, user: User) -> None:
        self._store.update(user)
        self._cache.set(user.email, user)

    def delete(self, user_id: str) -> None:
        user = self._store.get_by_id(user_id)
        if user is None:
            return
        self._store.delete(user_id)
        self._cache.invalidate(user.email)
        logger.info("Evicted cached user %s after delete", user_id)

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._store.get_by_id(user_id)

    def exists(self, email: str) -> bool:
        return self._store.exists(email)


def _dump_user(user: User) -> str:
    return json.dumps(
        {
            "id": user.id,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "email": user.email,
            "password": user.password,
            "role": Role(user.role).value,
        }
    )


def _load_user(data: str) -> User:
    fields = json.loads(data)
    fields["role"] = Role(fields["role"])
    return User(**fields)
