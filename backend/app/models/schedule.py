"""Weekly timetable models: fixed schedule blocks and AI revision slots."""

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class ScheduleBlock(BaseModel):
    """A recurring weekly block (course, work, ...) entered by the student.

    day_of_week runs 0-6 starting on Monday; times are "HH:MM" strings so
    they sort lexicographically.
    """

    __tablename__ = "schedule_blocks"

    user_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    type: Mapped[str] = mapped_column(String(50), default="course", nullable=False)
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)


class RevisionSlot(BaseModel):
    """A revision session suggested by the completion collaborator."""

    __tablename__ = "revision_slots"

    user_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subject: Mapped[str] = mapped_column(String(100), nullable=False)
    method: Mapped[str] = mapped_column(String(50), nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
