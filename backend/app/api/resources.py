"""Resource library API endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import bad_request, get_current_session
from app.core import get_db
from app.models.resource import RESOURCE_TYPES
from app.schemas.resource import ResourceCreate, ResourceListResponse, ResourceResponse
from app.services.auth import SessionClaims
from app.services.resource import ResourceService
from app.services.sanitizer import sanitize_fields, sanitize_text, sanitize_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resources", tags=["resources"])

MAX_TITLE_LENGTH = 200
MAX_SUBJECT_LENGTH = 100
MAX_CONTENT_LENGTH = 10000


def get_resource_service(db: AsyncSession = Depends(get_db)) -> ResourceService:
    """Dependency to get resource service."""
    return ResourceService(db)


@router.get("", response_model=ResourceListResponse)
async def list_resources(
    subject: str | None = Query(None, description="Only resources for this subject"),
    session: SessionClaims = Depends(get_current_session),
    service: ResourceService = Depends(get_resource_service),
) -> ResourceListResponse:
    """List the caller's resources, newest first."""
    resources = await service.list_for_user(session.user_id, subject=subject)
    return ResourceListResponse(
        items=[ResourceResponse.model_validate(r) for r in resources],
        total=len(resources),
    )


@router.post("", response_model=ResourceResponse, status_code=status.HTTP_201_CREATED)
async def create_resource(
    data: ResourceCreate,
    session: SessionClaims = Depends(get_current_session),
    service: ResourceService = Depends(get_resource_service),
) -> ResourceResponse:
    """Add a resource.

    Text fields are sanitized before validation. Links (url, pdf) must be
    http(s) or mailto URLs; notes are sanitized as text.
    """
    fields = sanitize_fields({"title": data.title, "subject": data.subject, "tags": data.tags})
    title, subject = fields["title"], fields["subject"]
    tags = [t for t in fields["tags"] if t]

    if data.type not in RESOURCE_TYPES or not title or not subject or not data.content.strip():
        raise bad_request()
    if len(title) > MAX_TITLE_LENGTH or len(subject) > MAX_SUBJECT_LENGTH:
        raise bad_request()
    if len(data.content) > MAX_CONTENT_LENGTH:
        raise bad_request("Content too long")

    if data.type in ("url", "pdf"):
        content = sanitize_url(data.content)
        if not content:
            raise bad_request("Invalid URL")
    else:
        content = sanitize_text(data.content)
        if not content:
            raise bad_request()

    resource = await service.create(
        user_id=session.user_id,
        title=title,
        type=data.type,
        content=content,
        subject=subject,
        tags=tags,
    )
    return ResourceResponse.model_validate(resource)


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resource(
    resource_id: UUID,
    session: SessionClaims = Depends(get_current_session),
    service: ResourceService = Depends(get_resource_service),
) -> None:
    """Delete one of the caller's resources."""
    deleted = await service.delete(session.user_id, resource_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Resource not found",
        )
    return None
