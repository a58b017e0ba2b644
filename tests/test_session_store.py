"""Unit tests for auth/sessions.py -- SessionStore.

Covers:
- create() returns distinct ids bound to the given identity
- resolve() of unknown / empty ids
- destroy() is idempotent
- idle expiry, sliding deadline, purge_expired()
- concurrent resolve/destroy never leaves a half-destroyed session
"""

from __future__ import annotations

import threading

from auth.models import Identity
from auth.sessions import SessionStore

ALICE = Identity(login="alice", first_name="A", last_name="B")


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestCreateResolveDestroy:
    def test_create_then_resolve_returns_identity(self) -> None:
        store = SessionStore(ttl_seconds=60)
        sid = store.create(ALICE)
        assert store.resolve(sid) == ALICE

    def test_ids_are_unique_and_opaque(self) -> None:
        store = SessionStore(ttl_seconds=60)
        ids = {store.create(ALICE) for _ in range(200)}
        assert len(ids) == 200
        assert all("alice" not in sid for sid in ids)
        assert all(len(sid) >= 40 for sid in ids)

    def test_resolve_unknown_and_empty(self) -> None:
        store = SessionStore(ttl_seconds=60)
        assert store.resolve("nope") is None
        assert store.resolve("") is None
        assert store.resolve(None) is None

    def test_destroy_is_idempotent(self) -> None:
        store = SessionStore(ttl_seconds=60)
        sid = store.create(ALICE)
        assert store.destroy(sid) is True
        assert store.destroy(sid) is False
        assert store.destroy(None) is False
        assert store.resolve(sid) is None
        assert len(store) == 0


class TestExpiry:
    def test_session_expires_after_idle_ttl(self) -> None:
        clock = FakeClock()
        store = SessionStore(ttl_seconds=60, clock=clock)
        sid = store.create(ALICE)
        clock.now += 60
        assert store.resolve(sid) is None
        assert len(store) == 0

    def test_resolve_slides_the_deadline(self) -> None:
        clock = FakeClock()
        store = SessionStore(ttl_seconds=60, clock=clock)
        sid = store.create(ALICE)
        for _ in range(5):
            clock.now += 45
            assert store.resolve(sid) == ALICE

    def test_purge_expired_removes_only_stale_entries(self) -> None:
        clock = FakeClock()
        store = SessionStore(ttl_seconds=60, clock=clock)
        old = store.create(ALICE)
        clock.now += 30
        fresh = store.create(ALICE)
        clock.now += 31
        assert store.purge_expired() == 1
        assert store.resolve(old) is None
        assert store.resolve(fresh) == ALICE


def test_concurrent_destroy_and_resolve() -> None:
    """Every resolve sees either the full identity or None -- never anything else."""
    store = SessionStore(ttl_seconds=60)
    sids = [store.create(ALICE) for _ in range(200)]
    seen: list = []
    destroyed: list[bool] = []

    def resolver() -> None:
        for sid in sids:
            seen.append(store.resolve(sid))

    def destroyer() -> None:
        for sid in sids:
            destroyed.append(store.destroy(sid))

    threads = [threading.Thread(target=resolver), threading.Thread(target=destroyer)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert all(result in (ALICE, None) for result in seen)
    assert all(destroyed)
    assert len(store) == 0
