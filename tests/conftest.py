"""
tests/conftest.py -- Shared test fixtures for the user management tests.

This module provides:
  - TEST_JWT: a fixed JwtConfig so tests can decode the tokens they receive
  - _make_test_store(): creates an isolated in-memory accounts DB
  - _patch_lifespan(): wires test objects into app.state, bypassing real startup
  - api_client: TestClient against the real app with the read-through cache on
  - user_store / auth_service: unit-level fixtures with no HTTP involved

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
for the TestClient fixtures because route handlers run in a thread pool.
Plain :memory: DBs are per-connection and would present a blank schema to
each worker thread.

The DEBUG env var must be set before any core import so get_settings()
auto-generates JWT_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager
from types import SimpleNamespace

# CRITICAL: Set DEBUG before any core/auth import so get_settings() can
# auto-generate JWT_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenIssuer
from cache.store import CachedUserStore, UserCache
from core.config import JwtConfig

TEST_JWT = JwtConfig(
    key="test-signing-key-that-is-at-least-32-characters",
    issuer="https://issuer.test",
    audience="https://audience.test",
)


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_store(db_suffix: str) -> UserStore:
    """Create an isolated named shared-memory SQLite store.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    return UserStore(f"sqlite:///file:test_users_{db_suffix}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(user_store: UserStore, cache: UserCache):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.jwt_config = TEST_JWT
        app.state.user_store = user_store
        app.state.user_cache = cache
        app.state.auth_service = AuthService(CachedUserStore(user_store, cache), TokenIssuer(TEST_JWT))
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client() -> Generator[SimpleNamespace, None, None]:
    """Yield a namespace with client, store and cache for HTTP integration tests.

    One TestClient per test module for speed. Tests register their own users
    with unique emails, so ordering between tests does not matter.
    """
    user_store = _make_test_store("api")
    cache = UserCache(ttl=600)

    app.router.lifespan_context = _patch_lifespan(user_store, cache)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield SimpleNamespace(client=client, store=user_store, cache=cache)

    cache.close()
    user_store.close()


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    """Fresh single-thread in-memory store, one per test."""
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def jwt_config() -> JwtConfig:
    return TEST_JWT


@pytest.fixture
def token_issuer(jwt_config: JwtConfig) -> TokenIssuer:
    return TokenIssuer(jwt_config)


@pytest.fixture
def auth_service(user_store: UserStore, token_issuer: TokenIssuer) -> Generator[AuthService, None, None]:
    """AuthService over a real store with the read-through cache in front."""
    cache = UserCache(ttl=600)
    yield AuthService(CachedUserStore(user_store, cache), token_issuer)
    cache.close()
