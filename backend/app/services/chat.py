"""Chat service - transcript storage and prompt context for the assistant."""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.chat_message import ChatMessage
from app.models.resource import Resource
from app.models.schedule import ScheduleBlock
from app.services.llm import DAY_NAMES, ChatTurn, CompletionClient
from app.services.resource import ResourceService
from app.services.schedule import ScheduleService

logger = logging.getLogger(__name__)

HISTORY_PAGE_SIZE = 50
# Earlier turns sent along with a new message (about five exchanges)
CONTEXT_HISTORY_SIZE = 9
CONTEXT_BLOCK_LIMIT = 30
CONTEXT_RESOURCE_LIMIT = 5
RESOURCE_EXCERPT_LENGTH = 150


def build_context_message(
    blocks: list[ScheduleBlock],
    resources: list[Resource],
) -> ChatTurn | None:
    """Summarise the student's timetable and recent resources as a system turn."""
    parts: list[str] = []

    if blocks:
        lines = "\n".join(
            f"  - {DAY_NAMES[b.day_of_week] if 0 <= b.day_of_week < 7 else f'Day {b.day_of_week}'} "
            f"{b.start_time}-{b.end_time}: {b.title}"
            for b in blocks
        )
        parts.append(f"Timetable:\n{lines}")

    if resources:
        lines = "\n".join(
            f"  - [{r.subject}] {r.title}: {r.content[:RESOURCE_EXCERPT_LENGTH]}" for r in resources
        )
        parts.append(f"Recent resources:\n{lines}")

    if not parts:
        return None
    return ChatTurn(role="system", content="Student context:\n\n" + "\n\n".join(parts))


class ChatService:
    """Service for a user's assistant conversation."""

    def __init__(self, db: AsyncSession, completion_client: CompletionClient):
        self.db = db
        self.completion_client = completion_client

    async def history(self, user_id: UUID, limit: int = HISTORY_PAGE_SIZE) -> list[ChatMessage]:
        """The most recent limit messages, oldest first."""
        result = await self.db.execute(
            select(ChatMessage)
            .where(ChatMessage.user_id == user_id)
            .order_by(ChatMessage.created_at.desc())
            .limit(limit)
        )
        return list(reversed(result.scalars().all()))

    async def send(self, user_id: UUID, message: str) -> tuple[ChatMessage, ChatMessage]:
        """Store the user's message, ask the assistant and store its reply.

        The message is stored as given (trimmed by the caller, not sanitized).

        Raises:
            CompletionError: the assistant could not be reached
        """
        user_message = ChatMessage(user_id=user_id, role="user", content=message)
        self.db.add(user_message)
        await self.db.flush()

        result = await self.db.execute(
            select(ChatMessage)
            .where(ChatMessage.user_id == user_id, ChatMessage.id != user_message.id)
            .order_by(ChatMessage.created_at.desc())
            .limit(CONTEXT_HISTORY_SIZE)
        )
        previous = list(reversed(result.scalars().all()))

        blocks = await ScheduleService(self.db).list_blocks(user_id, limit=CONTEXT_BLOCK_LIMIT)
        resources = await ResourceService(self.db).recent(user_id, limit=CONTEXT_RESOURCE_LIMIT)

        turns: list[ChatTurn] = []
        context = build_context_message(blocks, resources)
        if context is not None:
            turns.append(context)
        turns.extend(ChatTurn(role=m.role, content=m.content) for m in previous)
        turns.append(ChatTurn(role="user", content=message))

        logger.debug(
            f"Chat request for user {user_id}: {len(turns)} turns "
            f"({len(blocks)} blocks, {len(resources)} resources in context)"
        )
        reply = await self.completion_client.chat(turns)

        ai_message = ChatMessage(user_id=user_id, role="assistant", content=reply)
        self.db.add(ai_message)
        await self.db.flush()
        await self.db.refresh(user_message)
        await self.db.refresh(ai_message)
        return user_message, ai_message

    async def clear(self, user_id: UUID) -> None:
        await self.db.execute(delete(ChatMessage).where(ChatMessage.user_id == user_id))
        await self.db.flush()
