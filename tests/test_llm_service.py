"""Tests for LLM service."""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from shopping_agent.ai.llm_service import LLMError, LLMService, parse_agent_reply
from shopping_agent.ai.prompts import AgentTask, build_system_prompt
from shopping_agent.config import settings


def make_response(content, prompt_tokens=100, completion_tokens=50):
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    response.usage = MagicMock(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens)
    return response


def make_service(create):
    service = LLMService()
    client = MagicMock()
    client.chat.completions.create = create
    service._client = client
    return service


class TestParseAgentReply:

    def test_plain_json(self):
        reply = parse_agent_reply('{"response": "Searching!", "needsWebTask": true, "task": {"type": "shopping"}}')

        assert reply["needsWebTask"] is True
        assert reply["task"] == {"type": "shopping"}

    def test_json_fence(self):
        text = 'Sure!\n```json\n{"response": "Hi", "needsWebTask": false}\n```'

        assert parse_agent_reply(text) == {"response": "Hi", "needsWebTask": False}

    def test_plain_fence(self):
        text = '```\n{"response": "Hi", "needsWebTask": false}\n```'

        assert parse_agent_reply(text)["response"] == "Hi"

    def test_invalid_json_becomes_chat_reply(self):
        text = "Namaste! Main aapki kya madad kar sakta hoon?"

        assert parse_agent_reply(text) == {"response": text, "needsWebTask": False}

    def test_non_object_json(self):
        assert parse_agent_reply("[1, 2, 3]") == {"response": "[1, 2, 3]", "needsWebTask": False}

    def test_empty_reply(self):
        assert parse_agent_reply("") == {"response": "", "needsWebTask": False}


class TestPrompt:

    def test_prompt_lists_platforms(self):
        prompt = build_system_prompt()

        for name in ("amazon", "flipkart", "meesho", "myntra", "ajio", "croma"):
            assert name in prompt.lower()
        assert '"needsWebTask"' in prompt

    def test_agent_task_accepts_extra_fields(self):
        task = AgentTask.model_validate({"type": "shopping", "query": "shoes", "platform": None, "extra": 1})

        assert task.type == "shopping"
        assert task.platform is None
        assert task.data is None


class TestLLMService:

    def test_build_messages_order(self):
        service = LLMService()
        history = [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello"},
        ]

        messages = service.build_messages("laptop dikhao", history)

        assert messages[0]["role"] == "system"
        assert messages[1:3] == history
        assert messages[-1] == {"role": "user", "content": "laptop dikhao"}

    @pytest.mark.asyncio
    async def test_call_agent_requests_json_object(self):
        content = json.dumps({"response": "Dhundh raha hoon!", "needsWebTask": True})
        create = AsyncMock(return_value=make_response(content))
        service = make_service(create)

        result = await service.call_agent("show me shoes", use_cache=False)

        assert result == content
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == settings.llm_model
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["temperature"] == settings.llm_temperature
        assert kwargs["max_tokens"] == settings.llm_max_tokens
        assert kwargs["messages"][-1] == {"role": "user", "content": "show me shoes"}
        assert service.get_stats()["call_count"] == 1

    @pytest.mark.asyncio
    async def test_call_agent_tracks_cost(self, monkeypatch):
        monkeypatch.setattr(settings, "track_llm_costs", True)
        service = make_service(AsyncMock(return_value=make_response("{}", 1_000_000, 0)))

        await service.call_agent("hello", use_cache=False)

        assert service.get_stats()["daily_cost"] > 0

    @pytest.mark.asyncio
    async def test_call_agent_wraps_api_errors(self):
        service = make_service(AsyncMock(side_effect=Exception("rate limited")))

        with pytest.raises(LLMError, match="AI failed: rate limited"):
            await service.call_agent("hello", use_cache=False)

    @pytest.mark.asyncio
    async def test_missing_api_key(self, monkeypatch):
        monkeypatch.setattr(settings, "openrouter_api_key", "")
        service = LLMService()

        with pytest.raises(LLMError, match="API key not configured"):
            await service.call_agent("hello", use_cache=False)

    @pytest.mark.asyncio
    async def test_cost_limit_blocks_calls(self, monkeypatch):
        monkeypatch.setattr(settings, "track_llm_costs", True)
        create = AsyncMock(return_value=make_response("{}"))
        service = make_service(create)
        service._daily_cost = settings.llm_cost_limit_per_day

        with pytest.raises(LLMError, match="cost limit"):
            await service.call_agent("hello", use_cache=False)
        create.assert_not_awaited()

    def test_reset_daily_stats(self):
        service = LLMService()
        service._daily_cost = 1.5
        service._call_count = 7

        service.reset_daily_stats()

        stats = service.get_stats()
        assert stats["call_count"] == 0
        assert stats["daily_cost"] == 0.0
