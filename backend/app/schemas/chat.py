"""Pydantic schemas for the assistant chat API."""

from datetime import datetime
from uuid import UUID

from app.schemas.common import CamelModel


class ChatRequest(CamelModel):
    """A new message for the assistant. Length is checked after trimming."""

    message: str = ""


class ChatMessageResponse(CamelModel):
    id: UUID
    role: str
    content: str
    created_at: datetime


class ChatHistoryResponse(CamelModel):
    messages: list[ChatMessageResponse]


class ChatExchangeResponse(CamelModel):
    """The stored user message and the assistant's stored reply."""

    user_message: ChatMessageResponse
    ai_message: ChatMessageResponse
