"""
tests/conftest.py -- Shared test fixtures for SessionAuth tests.

This module provides:
  - _make_test_store(): isolated named shared-memory SQLite credential store
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - client: TestClient over the real app with a fresh store per test
  - service: AuthService over in-memory stores for unit tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread.

Environment is set before any app import: get_settings() is cached on first
call and api/main.py reads it at import time to build the middleware stack.
"""

from __future__ import annotations

import asyncio
import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ALLOWED_HOSTS", '["testserver", "localhost"]')
os.environ.setdefault("CREDENTIAL_BACKEND", "memory")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.service import AuthService
from auth.sessions import SessionStore
from auth.store import InMemoryCredentialStore, SqlCredentialStore

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_store() -> SqlCredentialStore:
    """Create a SQL credential store on a uniquely named in-memory database."""
    url = f"sqlite:///file:test_auth_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"
    return SqlCredentialStore(url)


def _patch_lifespan(credential_store, session_store: SessionStore):
    """Return an async context manager that replaces the real lifespan.

    The purge_task is a long-sleeping coroutine so shutdown has a real
    asyncio.Task to cancel.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.credential_store = credential_store
        app.state.session_store = session_store
        app.state.auth_service = AuthService(credential_store, session_store)
        app.state.purge_task = asyncio.create_task(asyncio.sleep(99999))
        yield
        app.state.purge_task.cancel()

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Yield a TestClient whose app uses a fresh SQL store and session store.

    Function-scoped: session cookies and registrations from one test must
    not leak into the next.
    """
    credential_store = _make_test_store()
    app.router.lifespan_context = _patch_lifespan(credential_store, SessionStore(ttl_seconds=3600))

    with TestClient(app, raise_server_exceptions=True) as test_client:
        yield test_client

    credential_store.close()


@pytest.fixture
def service() -> AuthService:
    """AuthService over in-memory stores."""
    return AuthService(InMemoryCredentialStore(), SessionStore(ttl_seconds=3600))
