"""Athena Flow API Router - aggregates all API routes."""

from fastapi import APIRouter

from app.api import auth, chat, dashboard, onboarding, resources, schedule

# Main API router - all routes will be prefixed with /api
api_router = APIRouter(prefix="/api")

# Include routers
api_router.include_router(auth.router)
api_router.include_router(dashboard.router)
api_router.include_router(resources.router)
api_router.include_router(schedule.router)
api_router.include_router(chat.router)
api_router.include_router(onboarding.router)
