"""
auth/service.py -- Register / login / logout / current-user orchestration.

AuthService is the only component with logic. It owns no state of its own:
the credential store and session store are created by the caller (the API
lifespan, the CLI, or a test) and passed in, so their lifetime is explicit.

Every session-dependent operation takes the session id as a parameter. The
HTTP layer is responsible for reading it from and writing it to cookies.

Failures are raised as AuthServiceError subclasses (auth/errors.py). Store
failures are logged here and re-raised as InternalError so no storage detail
reaches the client.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from auth.errors import (
    AuthError,
    ConflictError,
    InternalError,
    NoSessionError,
    UnauthenticatedError,
    ValidationError,
)
from auth.models import Credential, Identity, LogoutMarker, Profile, Session
from auth.passwords import hash_password, verify_dummy, verify_password
from auth.sessions import SessionStore
from auth.store import CredentialExistsError, CredentialStore, StoreUnavailableError

logger = logging.getLogger("sessionauth.auth")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuthService:
    """Session and credential lifecycle.

    Usage:
        service = AuthService(InMemoryCredentialStore(), SessionStore(ttl_seconds=3600))
        service.register("Ada", "Lovelace", "ada", "secret")
        session = service.login("ada", "secret")
        profile = service.current_user(session.session_id, lambda login: None)
        marker = service.logout(session.session_id)
    """

    def __init__(
        self,
        credentials: CredentialStore,
        sessions: SessionStore,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.credentials = credentials
        self.sessions = sessions
        self._clock = clock

    # ------------------------------------------------------------------
    # Registration and login
    # ------------------------------------------------------------------

    def register(
        self,
        name: str | None,
        surname: str | None,
        login: str | None,
        password: str | None,
    ) -> None:
        """Create a new credential.

        Raises ValidationError if any field is empty or missing, ConflictError
        if the login is taken. Nothing is written on failure.
        """
        if not name or not surname or not login or not password:
            raise ValidationError()

        credential = Credential(
            login=login,
            password_hash=hash_password(password),
            first_name=name,
            last_name=surname,
        )
        try:
            self.credentials.insert(credential)
        except CredentialExistsError as exc:
            logger.info("Registration rejected: login=%s already exists", login)
            raise ConflictError() from exc
        except StoreUnavailableError as exc:
            logger.exception("Credential store failed during registration")
            raise InternalError() from exc
        logger.info("Registered login=%s", login)

    def login(self, login: str | None, password: str | None, previous_session_id: str | None = None) -> Session:
        """Check the login/password pair and open a new session.

        Unknown login and wrong password raise the same AuthError, and both
        paths spend one bcrypt check. A session the client still holds is
        destroyed first so one client never carries two.
        """
        if not login or not password:
            raise AuthError()
        try:
            credential = self.credentials.find_by_login(login)
        except StoreUnavailableError as exc:
            logger.exception("Credential store failed during login")
            raise InternalError() from exc

        if credential is None:
            verify_dummy(password)
            logger.info("Login failed for login=%s", login)
            raise AuthError()
        if not verify_password(password, credential.password_hash):
            logger.info("Login failed for login=%s", login)
            raise AuthError()

        if previous_session_id:
            self.sessions.destroy(previous_session_id)
        identity = Identity.from_credential(credential)
        session_id = self.sessions.create(identity)
        logger.info("Login succeeded for login=%s", login)
        return Session(session_id=session_id, identity=identity)

    # ------------------------------------------------------------------
    # Session-gated operations
    # ------------------------------------------------------------------

    def require_session(self, session_id: str | None) -> Session:
        """Resolve session_id or raise UnauthenticatedError."""
        identity = self.sessions.resolve(session_id)
        if identity is None:
            raise UnauthenticatedError()
        return Session(session_id=session_id, identity=identity)

    def logout(self, session_id: str | None) -> LogoutMarker:
        """End the session and return the marker the caller should persist.

        destroy() is the arbiter: if a concurrent logout already removed the
        session, this call reports NoSessionError instead of a second marker.
        """
        identity = self.sessions.resolve(session_id)
        if identity is None or not self.sessions.destroy(session_id):
            raise NoSessionError()
        logger.info("Logged out login=%s", identity.login)
        return LogoutMarker(login=identity.login, timestamp=self._clock().isoformat())

    def current_user(self, session_id: str | None, marker_lookup: Callable[[str], str | None]) -> Profile:
        """Return the profile of the session owner.

        marker_lookup maps a login to the timestamp of its last logout, as
        held by the client, or None when there is none.
        """
        session = self.require_session(session_id)
        identity = session.identity
        return Profile(
            first_name=identity.first_name,
            last_name=identity.last_name,
            last_logged=marker_lookup(identity.login) or None,
        )
