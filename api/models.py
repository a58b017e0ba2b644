"""
API request and response models for SessionAuth REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Request fields are optional on purpose: a missing field must reach the auth
service and come back as a 400 validation_error, not as FastAPI's 422.
Response fields are snake_case in Python and camelCase on the wire.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from auth.models import Identity, Profile

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /auth/register."""

    name: Optional[str] = None
    surname: Optional[str] = None
    login: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """Request body for POST /auth/login."""

    login: Optional[str] = None
    password: Optional[str] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class UserInfo(_CamelModel):
    """Identity echoed back after a successful login."""

    login: str
    first_name: str
    last_name: str

    @classmethod
    def from_identity(cls, identity: Identity) -> "UserInfo":
        return cls(login=identity.login, first_name=identity.first_name, last_name=identity.last_name)


class LoginResponse(BaseModel):
    """Response body for POST /auth/login."""

    model_config = ConfigDict(frozen=True)

    message: str
    user: UserInfo


class CurrentUserResponse(_CamelModel):
    """Response body for GET /api/user."""

    first_name: str
    last_name: str
    last_logged: Optional[str] = None

    @classmethod
    def from_profile(cls, profile: Profile) -> "CurrentUserResponse":
        return cls(
            first_name=profile.first_name,
            last_name=profile.last_name,
            last_logged=profile.last_logged,
        )


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
    components: dict[str, str] = {}
