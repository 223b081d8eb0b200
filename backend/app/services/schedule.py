"""Schedule service - timetable blocks and AI-generated revision slots."""

import logging
from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.schedule import RevisionSlot, ScheduleBlock
from app.services.llm import RevisionSlotSuggestion

logger = logging.getLogger(__name__)


class ScheduleService:
    """Service for a user's weekly timetable."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_blocks(self, user_id: UUID, limit: int | None = None) -> list[ScheduleBlock]:
        """Blocks ordered by day of week, then start time."""
        query = (
            select(ScheduleBlock)
            .where(ScheduleBlock.user_id == user_id)
            .order_by(ScheduleBlock.day_of_week.asc(), ScheduleBlock.start_time.asc())
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_revision_slots(self, user_id: UUID) -> list[RevisionSlot]:
        """Revision slots ordered by day of week, then start time."""
        result = await self.db.execute(
            select(RevisionSlot)
            .where(RevisionSlot.user_id == user_id)
            .order_by(RevisionSlot.day_of_week.asc(), RevisionSlot.start_time.asc())
        )
        return list(result.scalars().all())

    async def create_block(
        self,
        user_id: UUID,
        title: str,
        day_of_week: int,
        start_time: str,
        end_time: str,
        type: str = "course",
        color: str | None = None,
    ) -> ScheduleBlock:
        block = ScheduleBlock(
            user_id=user_id,
            title=title,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
            type=type,
            color=color,
        )
        self.db.add(block)
        await self.db.flush()
        await self.db.refresh(block)
        return block

    async def delete_block(self, user_id: UUID, block_id: UUID) -> bool:
        """Delete a block; False if it does not exist or belongs to someone else."""
        result = await self.db.execute(
            select(ScheduleBlock).where(
                ScheduleBlock.id == block_id, ScheduleBlock.user_id == user_id
            )
        )
        block = result.scalar_one_or_none()
        if not block:
            return False

        await self.db.delete(block)
        await self.db.flush()
        return True

    async def replace_revision_slots(
        self,
        user_id: UUID,
        suggestions: Sequence[RevisionSlotSuggestion],
    ) -> list[RevisionSlot]:
        """Replace every revision slot of the user with new suggestions."""
        await self.db.execute(delete(RevisionSlot).where(RevisionSlot.user_id == user_id))

        slots = [
            RevisionSlot(
                user_id=user_id,
                subject=s.subject,
                method=s.method,
                day_of_week=s.day_of_week,
                start_time=s.start_time,
                end_time=s.end_time,
            )
            for s in suggestions
        ]
        self.db.add_all(slots)
        await self.db.flush()
        logger.info(f"Replaced revision slots for user {user_id}: {len(slots)} slots")
        return slots

    async def toggle_revision_slot(self, user_id: UUID, slot_id: UUID) -> RevisionSlot | None:
        """Flip a slot's completed flag; None if missing or not owned."""
        result = await self.db.execute(
            select(RevisionSlot).where(RevisionSlot.id == slot_id, RevisionSlot.user_id == user_id)
        )
        slot = result.scalar_one_or_none()
        if not slot:
            return None

        slot.completed = not slot.completed
        await self.db.flush()
        await self.db.refresh(slot)
        return slot
