"""
auth/errors.py -- Error taxonomy raised by the auth service.

Every error carries the HTTP status and machine-readable code the API layer
puts in the response envelope, so api/main.py needs a single handler for the
whole family. Messages are safe to show to clients.

Layer rule: no imports from api/.
"""

from __future__ import annotations


class AuthServiceError(Exception):
    """Base class for every failure the auth service reports to callers."""

    status_code: int = 500
    code: str = "internal_error"
    message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AuthServiceError):
    """A required field is missing or empty."""

    status_code = 400
    code = "validation_error"
    message = "All fields are required."


class ConflictError(AuthServiceError):
    """The login is already registered."""

    status_code = 409
    code = "conflict"
    message = "A user with that login already exists."


class AuthError(AuthServiceError):
    # One message for unknown login and wrong password -- no enumeration.
    status_code = 401
    code = "bad_credentials"
    message = "Invalid login or password."


class NoSessionError(AuthServiceError):
    """Logout was requested without an active session."""

    status_code = 400
    code = "no_session"
    message = "No active session."


class UnauthenticatedError(AuthServiceError):
    """A session-gated resource was requested without a valid session."""

    status_code = 401
    code = "unauthorized"
    message = "Authentication required."


class InternalError(AuthServiceError):
    """The credential store failed. Details go to the server log only."""
