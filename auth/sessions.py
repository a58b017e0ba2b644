"""
auth/sessions.py -- Server-side session store.

Maps an opaque session id to the Identity it was created for. The client only
ever sees the id (in a cookie); everything else stays here.

Entries expire after ttl_seconds without a successful resolve(). Expired
entries are dropped lazily on resolve() and in bulk by purge_expired(), which
the application lifespan calls periodically.

Every operation takes the same lock, so a destroy() racing a resolve() on the
same id is observed either entirely before or entirely after it.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
import secrets
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from auth.models import Identity

logger = logging.getLogger("sessionauth.sessions")

# 32 random bytes -> 43 URL-safe characters.
_TOKEN_BYTES = 32


@dataclass(slots=True)
class _SessionEntry:
    identity: Identity
    expires_at: float


class SessionStore:
    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, _SessionEntry] = {}

    def create(self, identity: Identity) -> str:
        """Bind a fresh, unguessable id to identity and return it."""
        with self._lock:
            session_id = secrets.token_urlsafe(_TOKEN_BYTES)
            while session_id in self._entries:
                session_id = secrets.token_urlsafe(_TOKEN_BYTES)
            self._entries[session_id] = _SessionEntry(identity=identity, expires_at=self._clock() + self._ttl)
            return session_id

    def resolve(self, session_id: str | None) -> Identity | None:
        """Return the identity for session_id, or None if unknown or expired."""
        if not session_id:
            return None
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                return None
            now = self._clock()
            if now >= entry.expires_at:
                del self._entries[session_id]
                logger.info("Session expired for login=%s", entry.identity.login)
                return None
            entry.expires_at = now + self._ttl
            return entry.identity

    def destroy(self, session_id: str | None) -> bool:
        """Remove session_id. Returns False if it was not stored; never raises."""
        if not session_id:
            return False
        with self._lock:
            return self._entries.pop(session_id, None) is not None

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [sid for sid, entry in self._entries.items() if now >= entry.expires_at]
            for sid in expired:
                del self._entries[sid]
        if expired:
            logger.info("Purged %d expired sessions", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
