"""Pydantic schemas for authentication API.

Field rules (email format, password length, name length) are checked by the
handlers with the sanitizer predicates so that every failure maps to the same
generic 400 response.
"""

from datetime import datetime
from uuid import UUID

from app.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    """Request to create an account."""

    name: str
    email: str
    password: str


class LoginRequest(CamelModel):
    """Request for login."""

    email: str
    password: str


class UserResponse(CamelModel):
    """Public profile of the signed-in user."""

    id: UUID
    name: str
    email: str
    level: str | None = None
    objectives: list[str] = []
    onboarding_complete: bool
    created_at: datetime


class AuthResponse(CamelModel):
    """Response after register or login.

    The token is also set as the HTTP-only session cookie.
    """

    user: UserResponse
    token: str
