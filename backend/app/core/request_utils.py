"""Request utility functions for handling common request operations."""

import ipaddress
import logging

from fastapi import Request

from app.core.config import settings

logger = logging.getLogger(__name__)


def _is_valid_ip(ip_str: str) -> bool:
    """Check if a string is a valid IP address."""
    try:
        ipaddress.ip_address(ip_str)
        return True
    except ValueError:
        return False


def get_client_ip(request: Request) -> str:
    """Get the client IP address used to key per-caller rate limits.

    X-Forwarded-For can be set by anyone, so its first hop is only trusted
    when the direct peer is listed in TRUSTED_PROXY_IPS. Otherwise the socket
    peer is used, and "unknown" when the transport does not expose one.
    """
    direct_ip = request.client.host if request.client else None
    trusted = settings.trusted_proxy_ip_set

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded and trusted and direct_ip in trusted:
        client_ip = forwarded.split(",")[0].strip()
        if _is_valid_ip(client_ip):
            return client_ip
        logger.warning(f"Invalid IP in X-Forwarded-For header: {client_ip}")

    if direct_ip:
        return direct_ip

    return "unknown"
