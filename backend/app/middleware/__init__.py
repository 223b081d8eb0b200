"""Middleware module for Athena Flow backend."""

from app.middleware.origin_check import OriginCheckMiddleware
from app.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "OriginCheckMiddleware",
    "SecurityHeadersMiddleware",
]
