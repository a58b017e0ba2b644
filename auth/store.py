"""
auth/store.py -- Credential persistence for SessionAuth.

Pattern: Repository + Data Mapper. CredentialStore is the interface the auth
service depends on; InMemoryCredentialStore and SqlCredentialStore are the two
repositories; _row_to_credential is the mapper. Route and service code never
touches SQL directly.

Atomic insert:
  insert() must never let two registrations of the same login both succeed.
  The in-memory store checks and writes under one lock. The SQL store relies
  on the UNIQUE(login) constraint and additionally serializes writes inside
  the process, because SQLite shared-cache connections fail fast with
  "table is locked" instead of waiting.

Security:
  All queries use bound parameters. No f-strings in SQL.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Protocol

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.models import Credential

if TYPE_CHECKING:
    from core.config import Settings

logger = logging.getLogger("sessionauth.store")


class CredentialExistsError(Exception):
    """insert() was called for a login that is already registered."""


class StoreUnavailableError(Exception):
    """The backing store could not be read or written."""


class CredentialStore(Protocol):
    def find_by_login(self, login: str) -> Credential | None: ...

    def insert(self, credential: Credential) -> None: ...

    def ping(self) -> bool: ...

    def close(self) -> None: ...


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# In-memory repository
# ---------------------------------------------------------------------------


class InMemoryCredentialStore:
    """Dict-backed store. Contents live as long as the process."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, Credential] = {}

    def find_by_login(self, login: str) -> Credential | None:
        with self._lock:
            return self._records.get(login)

    def insert(self, credential: Credential) -> None:
        with self._lock:
            if credential.login in self._records:
                raise CredentialExistsError(credential.login)
            if credential.created_at is None:
                credential = Credential(
                    login=credential.login,
                    password_hash=credential.password_hash,
                    first_name=credential.first_name,
                    last_name=credential.last_name,
                    created_at=_now_iso(),
                )
            self._records[credential.login] = credential

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass


# ---------------------------------------------------------------------------
# SQL repository -- schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_credentials = Table(
    "credentials",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("login", String(255), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("first_name", String(255), nullable=False),
    Column("last_name", String(255), nullable=False),
    Column("created_at", String(32), nullable=False),
)


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode so readers do not block behind the writer.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


class SqlCredentialStore:
    """SQLAlchemy Core repository for Credential records.

    Usage:
        store = SqlCredentialStore("sqlite:///./users.db")
        store.insert(Credential(login="alice", password_hash=..., first_name="A", last_name="B"))
        credential = store.find_by_login("alice")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        self._write_lock = threading.Lock()
        try:
            _metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(str(exc)) from exc

    def find_by_login(self, login: str) -> Credential | None:
        """Look up a credential by exact login (case-sensitive)."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_credentials.select().where(_credentials.c.login == login)).fetchone()
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(str(exc)) from exc
        return _row_to_credential(row) if row is not None else None

    def insert(self, credential: Credential) -> None:
        """Insert a new credential.

        Raises CredentialExistsError if the login is already taken. The
        UNIQUE constraint makes the check and the write one statement.
        """
        try:
            with self._write_lock, self.engine.begin() as conn:
                conn.execute(
                    _credentials.insert().values(
                        login=credential.login,
                        password_hash=credential.password_hash,
                        first_name=credential.first_name,
                        last_name=credential.last_name,
                        created_at=credential.created_at or _now_iso(),
                    )
                )
        except IntegrityError as exc:
            raise CredentialExistsError(credential.login) from exc
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(str(exc)) from exc

    def count(self) -> int:
        try:
            with self.engine.connect() as conn:
                result = conn.execute(text("SELECT COUNT(*) FROM credentials")).scalar()
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(str(exc)) from exc
        return result or 0

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.warning("Credential store ping failed", exc_info=True)
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()


def _row_to_credential(row) -> Credential:
    return Credential(
        login=row.login,
        password_hash=row.password_hash,
        first_name=row.first_name,
        last_name=row.last_name,
        created_at=row.created_at,
    )


def create_credential_store(settings: Settings) -> CredentialStore:
    """Build the store selected by CREDENTIAL_BACKEND."""
    if settings.credential_backend == "memory":
        return InMemoryCredentialStore()
    return SqlCredentialStore(settings.database_url)
