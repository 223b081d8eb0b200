"""Profile service - onboarding, skills and dashboard statistics."""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.schedule import RevisionSlot
from app.models.skill import DiagnosticResult, Skill
from app.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagnosticOutcome:
    subject: str
    score: int
    total: int
    weak_areas: list[str]


def percentage(part: int, whole: int) -> int:
    """Whole percentage with halves rounded up (12.5 -> 13)."""
    return math.floor(part / whole * 100 + 0.5)


@dataclass(frozen=True)
class RevisionStats:
    completed: int
    total: int

    @property
    def completion_rate(self) -> int:
        """Completed share as a whole percentage (0 when nothing is planned)."""
        if self.total == 0:
            return 0
        return percentage(self.completed, self.total)


class ProfileService:
    """Service for the student profile and derived skill scores."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: UUID) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def list_skills(self, user_id: UUID) -> list[Skill]:
        result = await self.db.execute(
            select(Skill).where(Skill.user_id == user_id).order_by(Skill.name.asc())
        )
        return list(result.scalars().all())

    async def revision_stats(self, user_id: UUID) -> RevisionStats:
        result = await self.db.execute(
            select(RevisionSlot.completed).where(RevisionSlot.user_id == user_id)
        )
        flags = list(result.scalars().all())
        return RevisionStats(completed=sum(1 for f in flags if f), total=len(flags))

    async def complete_onboarding(
        self,
        user: User,
        level: str | None,
        objectives: list[str],
        results: Sequence[DiagnosticOutcome],
    ) -> None:
        """Save the profile, record diagnostic results and upsert skill scores.

        Inputs must already be sanitized and validated (total > 0).
        """
        user.level = level
        user.objectives = list(objectives)
        user.onboarding_complete = True

        for outcome in results:
            self.db.add(
                DiagnosticResult(
                    user_id=user.id,
                    subject=outcome.subject,
                    score=outcome.score,
                    total=outcome.total,
                    weak_areas=list(outcome.weak_areas),
                )
            )
            await self._upsert_skill(user.id, outcome.subject, percentage(outcome.score, outcome.total))

        await self.db.flush()
        logger.info(f"Onboarding completed for user {user.id} ({len(results)} diagnostics)")

    async def _upsert_skill(self, user_id: UUID, name: str, score: int) -> Skill:
        result = await self.db.execute(
            select(Skill).where(Skill.user_id == user_id, Skill.name == name)
        )
        skill = result.scalar_one_or_none()
        if skill is None:
            skill = Skill(user_id=user_id, name=name, score=score)
            self.db.add(skill)
        else:
            skill.score = score
        # Flush so a repeated subject in the same request finds this row
        await self.db.flush()
        return skill
