"""Resource model - entries of a student's resource library."""

from uuid import UUID

from sqlalchemy import JSON, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel

RESOURCE_TYPES = ("url", "pdf", "note")


class Resource(BaseModel):
    """A link, PDF link or free-text note filed under a subject.

    For url/pdf resources content holds the sanitized URL; for notes it holds
    the sanitized text.
    """

    __tablename__ = "resources"

    __table_args__ = (Index("ix_resources_user_subject", "user_id", "subject"),)

    user_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    subject: Mapped[str] = mapped_column(String(100), nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    def __repr__(self) -> str:
        return f"<Resource {self.title!r} ({self.type})>"
