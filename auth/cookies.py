"""
auth/cookies.py -- Cookie helpers for the session handle and logout marker.

Session cookie:
  httponly=True: JS cannot read the cookie (XSS mitigation).
  samesite="lax": not sent on cross-site POST -- CSRF mitigation for most cases.
  secure: only sent over HTTPS when SECURE_COOKIES=true (set in production).
  max_age: matches the session idle timeout.

Logout marker cookie:
  One per login, named LAST_LOGOUT_COOKIE_PREFIX + login. The login is
  percent-encoded so logins with spaces or "@" still give a legal cookie
  name. The value is an ISO 8601 timestamp the UI may display, so it is
  readable from JS and outlives the session.

Layer rule: no imports from api/. Import from core/ is allowed.
"""

from __future__ import annotations

from urllib.parse import quote

from starlette.requests import Request
from starlette.responses import Response

from auth.models import LogoutMarker
from core.config import get_settings

# Ten years -- the marker should survive browser restarts.
_MARKER_MAX_AGE = 10 * 365 * 24 * 3600


def last_logout_cookie_name(login: str) -> str:
    return get_settings().last_logout_cookie_prefix + quote(login, safe="")


def read_session_id(request: Request) -> str | None:
    return request.cookies.get(get_settings().session_cookie_name) or None


def read_last_logout(request: Request, login: str) -> str | None:
    return request.cookies.get(last_logout_cookie_name(login)) or None


def set_session_cookie(response: Response, session_id: str) -> None:
    """Write the session id as an httpOnly cookie on the response."""
    settings = get_settings()
    response.set_cookie(
        settings.session_cookie_name,
        value=session_id,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
        max_age=settings.session_ttl_seconds,
    )


def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        settings.session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
    )


def set_last_logout_cookie(response: Response, marker: LogoutMarker) -> None:
    settings = get_settings()
    response.set_cookie(
        last_logout_cookie_name(marker.login),
        value=marker.timestamp,
        samesite="lax",
        secure=settings.secure_cookies,
        max_age=_MARKER_MAX_AGE,
    )
