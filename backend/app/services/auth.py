"""Authentication service: session tokens, password hashing and accounts."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from jwt.exceptions import PyJWTError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import settings
from app.models.user import User

logger = logging.getLogger(__name__)

# Argon2 password hasher with recommended parameters
# Memory: 64 MiB, Time: 3 iterations, Parallelism: 4
ph = PasswordHasher(
    time_cost=3,
    memory_cost=65536,
    parallelism=4,
    hash_len=32,
    salt_len=16,
)

# Verified against when the account does not exist so that both failure
# paths cost one Argon2 verification.
_DUMMY_HASH = ph.hash("athena-dummy-password")


class AuthError(Exception):
    """Base authentication error."""

    pass


class InvalidCredentialsError(AuthError):
    """Invalid email or password."""

    pass


class EmailAlreadyRegisteredError(AuthError):
    """An account already uses this email."""

    pass


class TokenError(AuthError):
    """JWT token error."""

    pass


class TokenExpiredError(TokenError):
    """JWT token has expired."""

    pass


class InvalidTokenError(TokenError):
    """JWT token is invalid."""

    pass


@dataclass(frozen=True)
class SessionClaims:
    """Identity carried by a session token."""

    user_id: UUID
    email: str


def hash_password(password: str) -> str:
    """Hash a password using Argon2id."""
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash using constant-time comparison."""
    try:
        ph.verify(password_hash, password)
        return True
    except (VerificationError, InvalidHashError):
        return False


def issue_token(user_id: UUID, email: str, now: datetime | None = None) -> str:
    """Create a signed session token valid for the configured session lifetime."""
    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.session_max_age_days),
    }
    token = jwt.encode(
        payload,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    # PyJWT 2.x returns str; older type stubs may declare bytes
    return str(token)


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate a session token, raising TokenError on failure."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "email", "iat", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError("Token has expired") from e
    except PyJWTError as e:
        raise InvalidTokenError(f"Invalid token: {e}") from e
    return payload


def verify_token(token: str) -> SessionClaims | None:
    """Return the claims of a valid token, or None.

    Malformed, forged and expired tokens all produce None so callers cannot
    tell them apart.
    """
    try:
        payload = decode_token(token)
        user_id = UUID(str(payload["sub"]))
        email = payload["email"]
    except (TokenError, ValueError) as e:
        logger.debug(f"Session token rejected: {e}")
        return None
    if not isinstance(email, str):
        return None
    return SessionClaims(user_id=user_id, email=email)


class AuthService:
    """Service for account registration and login."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user_by_email(self, email: str) -> User | None:
        """Get user by (lower-cased) email."""
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def register(self, name: str, email: str, password: str) -> User:
        """Create a new account. Inputs must already be sanitized and validated."""
        if await self.get_user_by_email(email) is not None:
            raise EmailAlreadyRegisteredError("Email already registered")

        user = User(name=name, email=email, password_hash=hash_password(password))
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as e:
            # Concurrent registration with the same email
            await self.session.rollback()
            raise EmailAlreadyRegisteredError("Email already registered") from e
        await self.session.refresh(user)

        logger.info(f"Registered user {user.id}")
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Authenticate a user and return the user object.

        Raises InvalidCredentialsError for both "user not found" and
        "wrong password" to prevent user enumeration.
        """
        user = await self.get_user_by_email(email)

        if user is None:
            verify_password(password, _DUMMY_HASH)
            raise InvalidCredentialsError("Invalid email or password")

        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Invalid email or password")

        return user
