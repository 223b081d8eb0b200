"""Pydantic schemas for the timetable API."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, model_validator

from app.schemas.common import CamelModel

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class ScheduleBlockCreate(CamelModel):
    """Request to add a timetable block."""

    title: str
    day_of_week: int = Field(..., ge=0, le=6)
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    type: str = "course"
    color: str | None = None

    @model_validator(mode="after")
    def check_time_order(self) -> "ScheduleBlockCreate":
        # Zero-padded HH:MM strings compare in clock order
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class ScheduleBlockResponse(CamelModel):
    id: UUID
    title: str
    day_of_week: int
    start_time: str
    end_time: str
    type: str
    color: str | None
    created_at: datetime


class RevisionSlotResponse(CamelModel):
    id: UUID
    subject: str
    method: str
    day_of_week: int
    start_time: str
    end_time: str
    completed: bool


class ScheduleResponse(CamelModel):
    """The whole weekly timetable."""

    blocks: list[ScheduleBlockResponse]
    revision_slots: list[RevisionSlotResponse]


class RevisionSlotListResponse(CamelModel):
    items: list[RevisionSlotResponse]
    total: int
