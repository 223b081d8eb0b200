"""Assistant chat API endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import bad_request, enforce_rate_limit, get_current_session
from app.core import get_db
from app.schemas.chat import (
    ChatExchangeResponse,
    ChatHistoryResponse,
    ChatMessageResponse,
    ChatRequest,
)
from app.services.auth import SessionClaims
from app.services.chat import ChatService
from app.services.llm import CompletionClient, get_completion_client
from app.services.rate_limiter import CHAT_QUOTA

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

MAX_MESSAGE_LENGTH = 2000


def get_chat_service(
    db: AsyncSession = Depends(get_db),
    completion_client: CompletionClient = Depends(get_completion_client),
) -> ChatService:
    """Dependency to get chat service."""
    return ChatService(db, completion_client)


@router.get("", response_model=ChatHistoryResponse)
async def get_history(
    session: SessionClaims = Depends(get_current_session),
    service: ChatService = Depends(get_chat_service),
) -> ChatHistoryResponse:
    """Get the caller's transcript, oldest first."""
    messages = await service.history(session.user_id)
    return ChatHistoryResponse(messages=[ChatMessageResponse.model_validate(m) for m in messages])


@router.post("", response_model=ChatExchangeResponse)
async def send_message(
    data: ChatRequest,
    session: SessionClaims = Depends(get_current_session),
    service: ChatService = Depends(get_chat_service),
) -> ChatExchangeResponse:
    """Send a message to the assistant and get its reply.

    The message is stored as typed; clients escape it when rendering.
    """
    enforce_rate_limit(CHAT_QUOTA, str(session.user_id))

    message = data.message.strip()
    if not message or len(message) > MAX_MESSAGE_LENGTH:
        raise bad_request(f"Invalid message (max {MAX_MESSAGE_LENGTH} characters)")

    user_message, ai_message = await service.send(session.user_id, message)
    return ChatExchangeResponse(
        user_message=ChatMessageResponse.model_validate(user_message),
        ai_message=ChatMessageResponse.model_validate(ai_message),
    )


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(
    session: SessionClaims = Depends(get_current_session),
    service: ChatService = Depends(get_chat_service),
) -> None:
    """Delete the caller's whole transcript."""
    await service.clear(session.user_id)
    return None
