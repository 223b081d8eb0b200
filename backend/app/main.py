"""Athena Flow Backend - FastAPI Application Factory."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api import api_router
from app.api.deps import INVALID_REQUEST
from app.api.health import router as health_router
from app.core import get_logger, settings, setup_logging
from app.middleware import OriginCheckMiddleware, SecurityHeadersMiddleware

# Import all models to ensure they're registered with Base for Alembic
from app.models import (  # noqa: F401
    ChatMessage,
    DiagnosticResult,
    Resource,
    RevisionSlot,
    ScheduleBlock,
    Skill,
    User,
)
from app.services.llm import CompletionClient, CompletionError
from app.services.rate_limiter import rate_limit_cleanup_loop

logger = get_logger("main")


def task_done_callback(task: asyncio.Task[None]) -> None:
    """Log unhandled exceptions from background tasks."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Background task {task.get_name()} failed: {exc}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    setup_logging(level=settings.log_level, format_type=settings.log_format)
    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.environment})")

    # Check security configuration
    for warning in settings.check_security_configuration():
        logger.warning(f"SECURITY: {warning}")

    cleanup_task = asyncio.create_task(rate_limit_cleanup_loop())
    cleanup_task.add_done_callback(task_done_callback)

    yield

    # Shutdown
    logger.info("Shutting down...")
    cleanup_task.cancel()
    try:
        await cleanup_task
    except asyncio.CancelledError:
        pass

    await CompletionClient.get_instance().close()


def _server_error_detail(exc: Exception) -> str:
    """Underlying error text outside production, a generic message inside it."""
    if settings.is_production:
        return "Internal server error"
    return str(exc) or exc.__class__.__name__


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies and parameters without naming the offending fields."""
    logger.debug(f"Rejected {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": INVALID_REQUEST},
    )


async def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": _server_error_detail(exc)},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Student workspace: resources, timetable, revision planning and study assistant",
        version=settings.app_version,
        lifespan=lifespan,
        # Docs are only served for local development
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(CompletionError, server_error_handler)
    app.add_exception_handler(SQLAlchemyError, server_error_handler)

    # Reject cross-origin state-changing requests before any route runs
    app.add_middleware(OriginCheckMiddleware)

    # Security headers - MUST be outermost (added last in Starlette LIFO order)
    # so that 403 responses from OriginCheck carry them too.
    app.add_middleware(SecurityHeadersMiddleware)

    # Include routers
    app.include_router(health_router)  # Health at root level
    app.include_router(api_router)  # API at /api

    return app


# Application instance
app = create_app()
