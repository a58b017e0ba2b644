"""
auth/passwords.py -- Password hashing and verification.

Passwords: bcrypt used directly (no passlib wrapper). The cost factor comes
from Settings.bcrypt_rounds so tests can run with the minimum cost.

bcrypt only looks at the first 72 bytes of a secret and recent releases
raise on longer input. Every secret is first reduced to base64(SHA-256),
a fixed 44 bytes, so secrets of any length are compared in full and two
long secrets sharing a 72-byte prefix never match each other.

Timing equalization: verify_dummy() runs a bcrypt check against a throwaway
hash when the login does not exist, so response time does not reveal which
logins are registered.

Layer rule: no imports from api/. Import from core/ is allowed.
"""

from __future__ import annotations

import base64
import hashlib
from functools import lru_cache

import bcrypt

from core.config import get_settings


def _prehash(plain: str) -> bytes:
    return base64.b64encode(hashlib.sha256(plain.encode("utf-8")).digest())


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password."""
    salt = bcrypt.gensalt(rounds=get_settings().bcrypt_rounds)
    return bcrypt.hashpw(_prehash(plain), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(_prehash(plain), hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash -- cannot match.
        return False


@lru_cache
def _dummy_hash() -> str:
    return hash_password("sessionauth_timing_dummy")


def verify_dummy(plain: str) -> None:
    """Spend the same bcrypt work as a real check, discarding the result."""
    verify_password(plain, _dummy_hash())
