"""Cookie-carried sessions: resolve the caller's identity and set the cookie."""

from starlette.requests import HTTPConnection
from starlette.responses import Response

from app.core import settings
from app.services.auth import SessionClaims, verify_token


def resolve_session(request: HTTPConnection) -> SessionClaims | None:
    """Return the identity in the session cookie, or None.

    A missing cookie and an invalid or expired token are both ordinary
    outcomes and are reported the same way.
    """
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    return verify_token(token)


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        path="/",
        secure=settings.cookie_secure,
        httponly=True,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        secure=settings.cookie_secure,
        httponly=True,
        samesite="lax",
    )
