"""Shared route dependencies: session gate and rate limiting."""

import logging

from fastapi import HTTPException, Request, status

from app.services.auth import SessionClaims
from app.services.rate_limiter import Quota, get_rate_limiter
from app.services.session import resolve_session

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "Not authenticated"
TOO_MANY_REQUESTS = "Too many requests. Please try again later."
INVALID_REQUEST = "Invalid request data"


def get_current_session(request: Request) -> SessionClaims:
    """Dependency returning the caller's session, or 401.

    Missing, forged and expired tokens all produce the same response.
    """
    session = resolve_session(request)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=NOT_AUTHENTICATED,
        )
    return session


def enforce_rate_limit(quota: Quota, caller: str) -> None:
    """Count one request for caller against quota, raising 429 when exhausted."""
    key = quota.key(caller)
    if not get_rate_limiter().admit(key, quota.max_requests, quota.window_ms):
        logger.warning(f"Rate limit exceeded for {key}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=TOO_MANY_REQUESTS,
        )


def bad_request(detail: str = INVALID_REQUEST) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
