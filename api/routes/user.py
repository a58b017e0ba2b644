"""
api/routes/user.py -- Session-gated user endpoints.

Routes:
  GET /api/user -- names of the logged-in user and their last logout time

Every successful response re-issues the session cookie so its max-age
follows the sliding server-side idle timeout instead of the login time.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from api.models import CurrentUserResponse
from auth.cookies import read_last_logout, read_session_id, set_session_cookie
from auth.dependencies import get_auth_service
from auth.service import AuthService

router = APIRouter()


@router.get("/user", response_model=CurrentUserResponse)
def current_user(
    request: Request, response: Response, service: AuthService = Depends(get_auth_service)
) -> CurrentUserResponse:
    """Return the current user's profile. 401 without a live session.

    lastLogged comes from the client's own last-logout cookie for this login,
    so it is null until the user has logged out at least once.
    """
    session_id = read_session_id(request)
    profile = service.current_user(session_id, lambda login: read_last_logout(request, login))
    set_session_cookie(response, session_id)
    return CurrentUserResponse.from_profile(profile)
