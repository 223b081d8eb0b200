"""Timetable API endpoints: blocks and AI-planned revision slots."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import bad_request, get_current_session
from app.core import get_db
from app.schemas.schedule import (
    RevisionSlotListResponse,
    RevisionSlotResponse,
    ScheduleBlockCreate,
    ScheduleBlockResponse,
    ScheduleResponse,
)
from app.services.auth import SessionClaims
from app.services.llm import CompletionClient, get_completion_client
from app.services.profile import ProfileService
from app.services.sanitizer import sanitize_text
from app.services.schedule import ScheduleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedule", tags=["schedule"])

MAX_TITLE_LENGTH = 200


def get_schedule_service(db: AsyncSession = Depends(get_db)) -> ScheduleService:
    """Dependency to get schedule service."""
    return ScheduleService(db)


@router.get("", response_model=ScheduleResponse)
async def get_schedule(
    session: SessionClaims = Depends(get_current_session),
    service: ScheduleService = Depends(get_schedule_service),
) -> ScheduleResponse:
    """Get the caller's timetable blocks and revision slots."""
    blocks = await service.list_blocks(session.user_id)
    slots = await service.list_revision_slots(session.user_id)
    return ScheduleResponse(
        blocks=[ScheduleBlockResponse.model_validate(b) for b in blocks],
        revision_slots=[RevisionSlotResponse.model_validate(s) for s in slots],
    )


@router.post("/blocks", response_model=ScheduleBlockResponse, status_code=status.HTTP_201_CREATED)
async def create_block(
    data: ScheduleBlockCreate,
    session: SessionClaims = Depends(get_current_session),
    service: ScheduleService = Depends(get_schedule_service),
) -> ScheduleBlockResponse:
    """Add a block to the timetable."""
    title = sanitize_text(data.title)
    block_type = sanitize_text(data.type) or "course"
    color = sanitize_text(data.color) or None
    if not title or len(title) > MAX_TITLE_LENGTH or len(block_type) > 50:
        raise bad_request()
    if color is not None and len(color) > 32:
        raise bad_request()

    block = await service.create_block(
        user_id=session.user_id,
        title=title,
        day_of_week=data.day_of_week,
        start_time=data.start_time,
        end_time=data.end_time,
        type=block_type,
        color=color,
    )
    return ScheduleBlockResponse.model_validate(block)


@router.delete("/blocks/{block_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_block(
    block_id: UUID,
    session: SessionClaims = Depends(get_current_session),
    service: ScheduleService = Depends(get_schedule_service),
) -> None:
    """Delete one of the caller's timetable blocks."""
    deleted = await service.delete_block(session.user_id, block_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Schedule block not found",
        )
    return None


@router.post("/revision/generate", response_model=RevisionSlotListResponse)
async def generate_revision_slots(
    session: SessionClaims = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
    service: ScheduleService = Depends(get_schedule_service),
    completion_client: CompletionClient = Depends(get_completion_client),
) -> RevisionSlotListResponse:
    """Replace the caller's revision slots with a freshly generated plan.

    Subjects come from the skills recorded during onboarding. An unusable
    answer from the completion service leaves the user with no slots.
    """
    skills = await ProfileService(db).list_skills(session.user_id)
    if not skills:
        raise bad_request("No subjects found. Complete onboarding first.")

    blocks = await service.list_blocks(session.user_id)
    suggestions = await completion_client.generate_revision_slots(
        blocks, [skill.name for skill in skills]
    )
    slots = await service.replace_revision_slots(session.user_id, suggestions)
    return RevisionSlotListResponse(
        items=[RevisionSlotResponse.model_validate(s) for s in slots],
        total=len(slots),
    )


@router.patch("/revision/{slot_id}", response_model=RevisionSlotResponse)
async def toggle_revision_slot(
    slot_id: UUID,
    session: SessionClaims = Depends(get_current_session),
    service: ScheduleService = Depends(get_schedule_service),
) -> RevisionSlotResponse:
    """Toggle a revision slot between done and not done."""
    slot = await service.toggle_revision_slot(session.user_id, slot_id)
    if slot is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Revision slot not found",
        )
    return RevisionSlotResponse.model_validate(slot)
