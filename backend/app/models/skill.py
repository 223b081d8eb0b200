"""Skill scores and the diagnostic results they are derived from."""

from uuid import UUID

from sqlalchemy import JSON, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class Skill(BaseModel):
    """Per-subject score (0-100) shown on the dashboard."""

    __tablename__ = "skills"

    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_skills_user_name"),)

    user_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class DiagnosticResult(BaseModel):
    """Outcome of one onboarding diagnostic quiz."""

    __tablename__ = "diagnostic_results"

    user_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subject: Mapped[str] = mapped_column(String(100), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    total: Mapped[int] = mapped_column(Integer, nullable=False)
    weak_areas: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
