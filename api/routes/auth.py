"""
api/routes/auth.py -- Registration, login and logout endpoints.

Routes:
  POST /auth/register  -- create a credential; 201
  POST /auth/login     -- open a session; sets the session cookie
  POST /auth/logout    -- end the session; sets the last-logout cookie and
                          clears the session cookie

Errors raised by AuthService propagate to the AuthServiceError handler in
api/main.py, which renders the shared error envelope.

Security:
  Cache-Control: no-store on login responses so the session cookie response
  is never cached by an intermediary.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import LoginRequest, LoginResponse, MessageResponse, RegisterRequest, UserInfo
from auth.cookies import clear_session_cookie, read_session_id, set_last_logout_cookie, set_session_cookie
from auth.dependencies import get_auth_service
from auth.service import AuthService

# Auth policy:
# - POST /auth/register: public
# - POST /auth/login:    public
# - POST /auth/logout:   requires a session (400 no_session otherwise)
router = APIRouter()


@router.post("/auth/register", response_model=MessageResponse, status_code=201)
def register(
    body: Optional[RegisterRequest] = None, service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    """Register a new user. All four fields are required; a missing body counts as all missing."""
    body = body or RegisterRequest()
    service.register(body.name, body.surname, body.login, body.password)
    return MessageResponse(message="Registration successful.")


@router.post("/auth/login", response_model=LoginResponse)
def login(
    request: Request, body: Optional[LoginRequest] = None, service: AuthService = Depends(get_auth_service)
) -> JSONResponse:
    """Authenticate with login and password; set the session cookie.

    Returns the same error for unknown login and wrong password to avoid
    leaking which logins exist.
    """
    body = body or LoginRequest()
    session = service.login(body.login, body.password, previous_session_id=read_session_id(request))
    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(
            message="Logged in successfully.",
            user=UserInfo.from_identity(session.identity),
        ).model_dump(by_alias=True),
    )
    set_session_cookie(resp, session.session_id)
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/auth/logout", response_model=MessageResponse)
def logout(request: Request, service: AuthService = Depends(get_auth_service)) -> JSONResponse:
    """Destroy the session and record the logout time in a client cookie."""
    marker = service.logout(read_session_id(request))
    resp = JSONResponse(content=MessageResponse(message="Logged out successfully.").model_dump())
    set_last_logout_cookie(resp, marker)
    clear_session_cookie(resp)
    return resp
