"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

get_auth_service() fetches the AuthService the lifespan placed on app.state.
require_session() is the gate for session-gated resources: it reads the
session cookie and asks the service to resolve it, raising
UnauthenticatedError (401) when there is no live session.

Layer rule: no imports from api/.
  auth/dependencies.py may import from fastapi because this module is part of
  the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Depends, Request

from auth.cookies import read_session_id
from auth.models import Session
from auth.service import AuthService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def require_session(request: Request, service: AuthService = Depends(get_auth_service)) -> Session:
    """Require a live session.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(session: Session = Depends(require_session)): ...
    """
    return service.require_session(read_session_id(request))
