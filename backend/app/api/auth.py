"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import bad_request, enforce_rate_limit, get_current_session
from app.core import get_db
from app.core.request_utils import get_client_ip
from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from app.schemas.common import MessageResponse
from app.services.auth import (
    AuthService,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    SessionClaims,
    issue_token,
)
from app.services.rate_limiter import LOGIN_QUOTA, REGISTER_QUOTA
from app.services.sanitizer import (
    is_valid_email,
    is_valid_name,
    is_valid_password,
    sanitize_text,
)
from app.services.session import clear_session_cookie, set_session_cookie

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    """Dependency to get auth service."""
    return AuthService(db)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Create an account and start a session."""
    enforce_rate_limit(REGISTER_QUOTA, get_client_ip(request))

    name = sanitize_text(data.name)
    email = data.email.strip().lower()
    if not (is_valid_name(name) and is_valid_email(email) and is_valid_password(data.password)):
        raise bad_request()

    try:
        user = await auth_service.register(name=name, email=email, password=data.password)
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        ) from e

    token = issue_token(user.id, user.email)
    set_session_cookie(response, token)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Authenticate and start a session.

    Unknown email and wrong password produce the same 401 response.
    """
    client_ip = get_client_ip(request)
    enforce_rate_limit(LOGIN_QUOTA, client_ip)

    email = data.email.strip().lower()
    if not is_valid_email(email) or not data.password:
        raise bad_request()

    try:
        user = await auth_service.authenticate(email, data.password)
    except InvalidCredentialsError as e:
        logger.warning(f"Failed login from {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        ) from e

    token = issue_token(user.id, user.email)
    set_session_cookie(response, token)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    """End the session by clearing the cookie.

    Tokens are stateless; a copied token stays valid until it expires.
    """
    clear_session_cookie(response)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserResponse)
async def get_me(
    session: SessionClaims = Depends(get_current_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Get the signed-in user's profile."""
    user = await auth_service.get_user_by_id(session.user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return UserResponse.model_validate(user)
