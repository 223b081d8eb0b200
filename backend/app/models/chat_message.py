"""ChatMessage model - the assistant transcript."""

from uuid import UUID

from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class ChatMessage(BaseModel):
    """One turn of the chat transcript.

    User turns are stored as typed (not run through the text sanitizer);
    clients must escape content when rendering it as HTML.
    """

    __tablename__ = "chat_messages"

    user_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
