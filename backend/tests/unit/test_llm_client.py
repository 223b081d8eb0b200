"""Unit tests for the completion client."""

import json

import httpx
import pytest

from app.services.llm import (
    ASSISTANT_SYSTEM_PROMPT,
    FALLBACK_REPLY,
    ChatTurn,
    CompletionClient,
    CompletionError,
    extract_json_array,
)


def _completion(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _client_with(handler, api_key: str | None = "test-key") -> CompletionClient:
    client = CompletionClient(api_key=api_key, base_url="https://llm.test/v1", model="test-model")
    client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client


class TestExtractJsonArray:
    def test_array_inside_prose(self):
        assert extract_json_array('Here you go:\n[{"a": 1}]\nEnjoy!') == [{"a": 1}]

    def test_no_array(self):
        assert extract_json_array("no json here") is None

    def test_invalid_json(self):
        assert extract_json_array("[not json]") is None


class TestComplete:
    """Tests for CompletionClient.complete()."""

    @pytest.mark.asyncio
    async def test_posts_messages_with_key_and_model(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=_completion("Hello"))

        client = _client_with(handler)
        reply = await client.complete([ChatTurn(role="user", content="Hi")], temperature=0.2, max_tokens=10)

        assert reply == "Hello"
        assert captured["url"] == "https://llm.test/v1/chat/completions"
        assert captured["auth"] == "Bearer test-key"
        assert captured["body"] == {
            "model": "test-model",
            "messages": [{"role": "user", "content": "Hi"}],
            "temperature": 0.2,
            "max_tokens": 10,
        }
        await client.close()

    @pytest.mark.asyncio
    async def test_missing_api_key_raises(self):
        client = CompletionClient(api_key="", base_url="https://llm.test/v1")
        with pytest.raises(CompletionError):
            await client.complete([ChatTurn(role="user", content="Hi")])

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        client = _client_with(lambda request: httpx.Response(503, json={"error": "busy"}))
        with pytest.raises(CompletionError, match="503"):
            await client.complete([ChatTurn(role="user", content="Hi")])

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client_with(handler)
        with pytest.raises(CompletionError):
            await client.complete([ChatTurn(role="user", content="Hi")])

    @pytest.mark.asyncio
    async def test_invalid_json_body_raises(self):
        client = _client_with(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
        with pytest.raises(CompletionError):
            await client.complete([ChatTurn(role="user", content="Hi")])

    @pytest.mark.asyncio
    async def test_unexpected_shape_returns_empty(self):
        client = _client_with(lambda request: httpx.Response(200, json={"choices": []}))
        assert await client.complete([ChatTurn(role="user", content="Hi")]) == ""


class TestChat:
    @pytest.mark.asyncio
    async def test_prepends_system_prompt(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["messages"] = json.loads(request.content)["messages"]
            return httpx.Response(200, json=_completion("Use active recall."))

        client = _client_with(handler)
        reply = await client.chat([ChatTurn(role="user", content="How do I revise?")])

        assert reply == "Use active recall."
        assert seen["messages"][0] == {"role": "system", "content": ASSISTANT_SYSTEM_PROMPT}
        assert seen["messages"][-1] == {"role": "user", "content": "How do I revise?"}

    @pytest.mark.asyncio
    async def test_empty_completion_falls_back(self):
        client = _client_with(lambda request: httpx.Response(200, json=_completion("")))
        assert await client.chat([ChatTurn(role="user", content="Hi")]) == FALLBACK_REPLY


class TestStructuredOutputs:
    """Tests for revision slot and diagnostic question generation."""

    @pytest.mark.asyncio
    async def test_revision_slots_parsed(self):
        content = (
            "Sure!\n"
            '[{"subject": "Maths", "method": "pomodoro", "dayOfWeek": 2, '
            '"startTime": "09:00", "endTime": "09:50"}]'
        )
        client = _client_with(lambda request: httpx.Response(200, json=_completion(content)))

        slots = await client.generate_revision_slots([], ["Maths"])

        assert len(slots) == 1
        assert slots[0].subject == "Maths"
        assert slots[0].day_of_week == 2
        assert slots[0].start_time == "09:00"

    @pytest.mark.asyncio
    async def test_revision_slots_bad_shape_degrades_to_empty(self):
        content = '[{"subject": "Maths", "dayOfWeek": 9}]'
        client = _client_with(lambda request: httpx.Response(200, json=_completion(content)))

        assert await client.generate_revision_slots([], ["Maths"]) == []

    @pytest.mark.asyncio
    async def test_revision_slots_service_error_degrades_to_empty(self):
        client = _client_with(lambda request: httpx.Response(500))

        assert await client.generate_revision_slots([], ["Maths"]) == []

    @pytest.mark.asyncio
    async def test_diagnostic_questions_parsed(self):
        content = json.dumps(
            [
                {
                    "question": "2 + 2?",
                    "options": ["3", "4", "5", "22"],
                    "correctAnswer": 1,
                    "explanation": "Basic addition.",
                }
            ]
        )
        client = _client_with(lambda request: httpx.Response(200, json=_completion(content)))

        questions = await client.generate_diagnostic_questions("Maths")

        assert len(questions) == 1
        assert questions[0].correct_answer == 1
        assert questions[0].model_dump(by_alias=True)["correctAnswer"] == 1

    @pytest.mark.asyncio
    async def test_diagnostic_questions_without_array_degrade_to_empty(self):
        client = _client_with(lambda request: httpx.Response(200, json=_completion("I cannot.")))

        assert await client.generate_diagnostic_questions("Maths") == []


class TestSingleton:
    def test_get_instance_returns_same_client(self):
        assert CompletionClient.get_instance() is CompletionClient.get_instance()
