"""CSRF defense: reject cross-origin state-changing requests.

Complements the SameSite=Lax session cookie. A mutating request whose Origin
header names a different host than the Host header is refused before it
reaches any route handler. Requests without an Origin or Host header pass.
"""

import logging
from urllib.parse import urlsplit

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


DEFAULT_PORTS = {"http": 80, "https": 443}


def origin_host(origin: str) -> str | None:
    """Return the host[:port] an Origin value refers to, or None if malformed.

    The port is omitted when it is the scheme's default, matching how
    browsers build the Host header.
    """
    try:
        parts = urlsplit(origin.strip())
        port = parts.port  # raises ValueError for a malformed port
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None

    hostname = parts.hostname
    if ":" in hostname:
        hostname = f"[{hostname}]"
    if port is None or DEFAULT_PORTS.get(parts.scheme.lower()) == port:
        return hostname
    return f"{hostname}:{port}"


def origin_matches_host(origin: str, host: str) -> bool | None:
    """Compare an Origin value with a Host header.

    Returns None when the origin cannot be parsed as an absolute URL.
    """
    expected = origin_host(origin)
    if expected is None:
        return None
    return expected == host


class OriginCheckMiddleware(BaseHTTPMiddleware):
    """Return 403 for mutating requests whose Origin does not match Host."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method not in MUTATING_METHODS:
            return await call_next(request)

        origin = request.headers.get("origin")
        host = request.headers.get("host")
        if not origin or not host:
            return await call_next(request)

        matches = origin_matches_host(origin, host)
        if matches is None:
            logger.warning(f"Malformed Origin on {request.method} {request.url.path}: {origin!r}")
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"detail": "Invalid origin"},
            )
        if not matches:
            logger.warning(
                f"Cross-origin {request.method} {request.url.path} rejected: "
                f"origin={origin!r} host={host!r}"
            )
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"detail": "Cross-origin request rejected"},
            )

        return await call_next(request)
