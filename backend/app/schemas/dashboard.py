"""Pydantic schemas for the dashboard API."""

from uuid import UUID

from app.schemas.auth import UserResponse
from app.schemas.common import CamelModel
from app.schemas.resource import ResourceResponse


class SkillResponse(CamelModel):
    id: UUID
    name: str
    score: int


class DashboardStats(CamelModel):
    total_resources: int
    completed_revisions: int
    total_revisions: int
    completion_rate: int


class DashboardResponse(CamelModel):
    """Everything the dashboard page shows in one response."""

    user: UserResponse
    skills: list[SkillResponse]
    recent_resources: list[ResourceResponse]
    stats: DashboardStats
