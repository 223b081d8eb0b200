"""Pydantic schemas for the resource library API."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.schemas.common import CamelModel


class ResourceCreate(CamelModel):
    """Request to add a resource. Limits are enforced after sanitizing."""

    title: str
    type: str
    content: str
    subject: str
    tags: list[str] = Field(default_factory=list)


class ResourceResponse(CamelModel):
    """A stored resource."""

    id: UUID
    title: str
    type: str
    content: str
    subject: str
    tags: list[str]
    created_at: datetime
    updated_at: datetime


class ResourceListResponse(CamelModel):
    """List of resources."""

    items: list[ResourceResponse]
    total: int
