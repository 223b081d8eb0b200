"""Completion client - talks to the Groq chat-completions API.

Free-text chat replies are returned as-is. Structured outputs (revision
slots, diagnostic questions) are parsed and validated; anything that does
not parse into the expected shape degrades to an empty list.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import threading
from collections.abc import Sequence
from typing import Any, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from app.core import settings

logger = logging.getLogger(__name__)

Role = Literal["system", "user", "assistant"]

ASSISTANT_SYSTEM_PROMPT = (
    "You are Athena, an AI assistant that helps students. "
    "You help with organisation, revision, understanding course material and study methods. "
    "Answer concisely and encouragingly. "
    "Use evidence-based techniques such as active recall, spaced repetition and the Pomodoro method."
)

FALLBACK_REPLY = "Sorry, I could not generate a reply."

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


class CompletionError(Exception):
    """The completion service is unavailable or returned an error."""

    pass


class ChatTurn(BaseModel):
    """A role-tagged message handed to the completion service."""

    role: Role
    content: str


class RevisionSlotSuggestion(BaseModel):
    """One revision session as produced by the planner prompt."""

    model_config = ConfigDict(populate_by_name=True)

    subject: str = Field(..., min_length=1, max_length=100)
    method: str = Field(..., min_length=1, max_length=50)
    day_of_week: int = Field(..., ge=0, le=6, alias="dayOfWeek")
    start_time: str = Field(..., pattern=r"^\d{2}:\d{2}$", alias="startTime")
    end_time: str = Field(..., pattern=r"^\d{2}:\d{2}$", alias="endTime")


class DiagnosticQuestion(BaseModel):
    """A multiple-choice diagnostic question."""

    model_config = ConfigDict(populate_by_name=True)

    question: str
    options: list[str] = Field(..., min_length=2)
    correct_answer: int = Field(..., ge=0, alias="correctAnswer")
    explanation: str = ""


_slots_adapter = TypeAdapter(list[RevisionSlotSuggestion])
_questions_adapter = TypeAdapter(list[DiagnosticQuestion])


def extract_json_array(text: str) -> list[Any] | None:
    """Return the first [...] span of text parsed as JSON, or None."""
    match = _JSON_ARRAY_RE.search(text)
    if not match:
        return None
    try:
        value = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, list) else None


class CompletionClient:
    """Client for the chat-completions collaborator.

    One shared httpx.AsyncClient is created lazily and reused across
    requests. Calls are not retried; a failure surfaces as CompletionError.
    """

    _instance: CompletionClient | None = None
    _instance_lock: threading.Lock = threading.Lock()

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.groq_api_key
        self.base_url = (base_url or settings.groq_base_url).rstrip("/")
        self.model = model or settings.groq_model
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @classmethod
    def get_instance(cls) -> CompletionClient:
        """Get or create singleton instance (thread-safe)."""
        if cls._instance is None:
            with cls._instance_lock:
                # Double-check locking pattern
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    async def _get_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None or self._client.is_closed:
                self._client = httpx.AsyncClient(timeout=settings.http_timeout)
            return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def complete(
        self,
        messages: Sequence[ChatTurn],
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> str:
        """Send messages and return the first choice's text ("" if empty).

        Raises:
            CompletionError: missing API key, transport failure, non-2xx
                status or an unexpected response body.
        """
        if not self.api_key:
            raise CompletionError("GROQ_API_KEY is not set")

        client = await self._get_client()
        try:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "model": self.model,
                    "messages": [m.model_dump() for m in messages],
                    "temperature": temperature,
                    "max_tokens": max_tokens,
                },
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise CompletionError(
                f"Completion API returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise CompletionError(f"Completion API request failed: {e}") from e
        except ValueError as e:
            raise CompletionError("Completion API returned invalid JSON") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return ""
        return content or ""

    async def chat(self, messages: Sequence[ChatTurn]) -> str:
        """Answer a conversation as the study assistant."""
        turns = [ChatTurn(role="system", content=ASSISTANT_SYSTEM_PROMPT), *messages]
        reply = await self.complete(turns, temperature=0.7, max_tokens=1024)
        return reply or FALLBACK_REPLY

    async def generate_revision_slots(
        self,
        blocks: Sequence[Any],
        subjects: Sequence[str],
    ) -> list[RevisionSlotSuggestion]:
        """Ask for revision sessions that fit around the existing timetable.

        Args:
            blocks: Objects with title, day_of_week, start_time and end_time
            subjects: Subjects to plan revision for

        Returns:
            Validated suggestions, or [] if the collaborator fails or answers
            with anything other than the expected JSON array.
        """
        timetable = "\n".join(
            f"- {b.title}: day {b.day_of_week}, {b.start_time}-{b.end_time}" for b in blocks
        )
        prompt = (
            "Analyse this timetable and propose optimised revision sessions.\n\n"
            f"Current timetable:\n{timetable or '- (empty)'}\n\n"
            f"Subjects to revise: {', '.join(subjects)}\n\n"
            "Answer in JSON using this format:\n"
            '[{"subject": "...", "method": "pomodoro|active-recall|spaced-repetition", '
            '"dayOfWeek": 0-6, "startTime": "HH:MM", "endTime": "HH:MM"}]\n\n'
            "Rules:\n"
            "- Do not overlap existing blocks\n"
            "- Sessions of 25-50 minutes with breaks\n"
            "- Vary the methods\n"
            "- Spread subjects evenly\n"
            "- Prefer mornings for difficult subjects\n\n"
            "Reply ONLY with the JSON, no surrounding text."
        )
        try:
            text = await self.complete(
                [ChatTurn(role="user", content=prompt)], temperature=0.3, max_tokens=2048
            )
        except CompletionError as e:
            logger.error(f"Revision slot generation failed: {e}")
            return []
        return self._parse(text, _slots_adapter, "revision slots")

    async def generate_diagnostic_questions(self, subject: str) -> list[DiagnosticQuestion]:
        """Ask for five multiple-choice questions assessing a subject."""
        prompt = (
            f'Generate 5 multiple-choice diagnostic questions to assess a student\'s level in "{subject}".\n\n'
            "JSON format:\n"
            '[{"question": "...", "options": ["A", "B", "C", "D"], "correctAnswer": 0, "explanation": "..."}]\n\n'
            "Questions should cover different difficulty levels.\n"
            "Reply ONLY with the JSON."
        )
        try:
            text = await self.complete(
                [ChatTurn(role="user", content=prompt)], temperature=0.5, max_tokens=2048
            )
        except CompletionError as e:
            logger.error(f"Diagnostic question generation failed: {e}")
            return []
        return self._parse(text, _questions_adapter, "diagnostic questions")

    @staticmethod
    def _parse(text: str, adapter: TypeAdapter, label: str) -> list:
        items = extract_json_array(text)
        if items is None:
            logger.warning(f"Completion for {label} contained no JSON array")
            return []
        try:
            return adapter.validate_python(items)
        except ValidationError as e:
            logger.warning(f"Completion for {label} did not match the expected shape: {e}")
            return []


def get_completion_client() -> CompletionClient:
    """Get the completion client singleton."""
    return CompletionClient.get_instance()
