"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and the service
do the work; api/models.py owns the wire shape.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Credential:
    """A registered user record.

    Immutable after registration. password_hash is a bcrypt hash of the
    secret chosen at registration; the plaintext is never stored.
    """

    login: str
    password_hash: str
    first_name: str
    last_name: str
    created_at: str | None = None


@dataclass(frozen=True)
class Identity:
    """The part of a Credential a session is bound to."""

    login: str
    first_name: str
    last_name: str

    @classmethod
    def from_credential(cls, credential: Credential) -> Identity:
        return cls(
            login=credential.login,
            first_name=credential.first_name,
            last_name=credential.last_name,
        )


@dataclass(frozen=True)
class Session:
    """A live login: the opaque id handed to the client and who it belongs to."""

    session_id: str
    identity: Identity


@dataclass(frozen=True)
class LogoutMarker:
    """Timestamp of a logout, persisted client-side by the transport layer."""

    login: str
    timestamp: str  # ISO 8601, UTC


@dataclass(frozen=True)
class Profile:
    """What the current-user resource reports about a session's owner."""

    first_name: str
    last_name: str
    last_logged: str | None = None
