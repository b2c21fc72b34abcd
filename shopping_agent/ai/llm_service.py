"""LLM service for intent classification through an OpenAI-compatible API."""

import hashlib
import json
import logging
import re
from typing import Any, Dict, List, Optional

import redis.asyncio as redis
from openai import AsyncOpenAI

from shopping_agent.ai.prompts import build_system_prompt
from shopping_agent.config import settings
from shopping_agent import metrics

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json\s*\n(.*?)\n\s*```", re.DOTALL)
_FENCED_ANY = re.compile(r"```\s*\n(.*?)\n\s*```", re.DOTALL)


class LLMError(RuntimeError):
    """Raised when the model could not be reached or refused the request."""


def parse_agent_reply(text: str) -> Dict[str, Any]:
    """
    Parse the model's JSON reply.

    Markdown code fences are stripped first. Anything that is not a JSON
    object is treated as a plain chat answer.

    Args:
        text: Raw model output

    Returns:
        Reply dictionary, always containing "response" or the model's own keys
    """
    json_text = text or ""
    if "```json" in json_text:
        match = _FENCED_JSON.search(json_text)
        if match:
            json_text = match.group(1)
    elif "```" in json_text:
        match = _FENCED_ANY.search(json_text)
        if match:
            json_text = match.group(1)

    try:
        parsed = json.loads(json_text)
    except (TypeError, ValueError):
        parsed = None

    if not isinstance(parsed, dict):
        return {"response": text, "needsWebTask": False}
    return parsed


class LLMService:
    """
    Service for the chat agent's model calls.

    Features:
    - OpenRouter via the OpenAI SDK
    - JSON-object response mode
    - Conversation history passthrough
    - Optional Redis reply cache
    - Cost tracking with a daily limit
    """

    def __init__(self):
        self._client: Optional[AsyncOpenAI] = None
        self._redis: Optional[redis.Redis] = None
        self._daily_cost: float = 0.0
        self._call_count: int = 0

    async def _get_client(self) -> AsyncOpenAI:
        """Get or create the API client."""
        if self._client is None:
            if not settings.openrouter_api_key:
                raise LLMError("AI failed: API key not configured")
            self._client = AsyncOpenAI(
                api_key=settings.openrouter_api_key,
                base_url=settings.llm_base_url,
                timeout=settings.llm_timeout_seconds,
                default_headers={
                    "HTTP-Referer": settings.llm_referer,
                    "X-Title": settings.llm_app_title,
                },
            )
        return self._client

    async def _get_redis(self) -> Optional[redis.Redis]:
        """Get or create Redis connection for caching."""
        if not settings.llm_cache_enabled:
            return None

        if self._redis is None:
            try:
                self._redis = await redis.from_url(
                    settings.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
            except Exception as e:
                logger.warning(f"Failed to connect to Redis for LLM cache: {e}")
                return None
        return self._redis

    @staticmethod
    def _get_cache_key(messages: List[Dict[str, str]], model: str) -> str:
        combined = json.dumps({"model": model, "messages": messages}, sort_keys=True)
        key_hash = hashlib.sha256(combined.encode("utf-8")).hexdigest()
        return f"llm_cache:{key_hash}"

    def _check_cost_limit(self) -> bool:
        """Check if daily cost limit is exceeded."""
        if not settings.track_llm_costs:
            return True

        if self._daily_cost >= settings.llm_cost_limit_per_day:
            logger.warning(
                f"Daily LLM cost limit reached: ${self._daily_cost:.2f} >= ${settings.llm_cost_limit_per_day:.2f}"
            )
            return False
        return True

    @staticmethod
    def _estimate_cost(model: str, prompt_tokens: int, completion_tokens: int) -> float:
        """
        Estimate cost for an LLM call.

        Pricing (approximate, per 1M tokens):
        - gpt-4o-mini: $0.15 input, $0.60 output
        - gpt-4o: $2.50 input, $10.00 output
        """
        if "mini" in model.lower():
            return (prompt_tokens * 0.15 + completion_tokens * 0.60) / 1_000_000
        return (prompt_tokens * 2.50 + completion_tokens * 10.00) / 1_000_000

    def build_messages(
        self,
        user_message: str,
        history: Optional[List[Dict[str, str]]] = None,
    ) -> List[Dict[str, str]]:
        """System prompt, then prior turns, then the new user message."""
        messages = [{"role": "system", "content": build_system_prompt()}]
        for turn in history or []:
            messages.append({"role": turn["role"], "content": turn["content"]})
        messages.append({"role": "user", "content": user_message})
        return messages

    async def call_agent(
        self,
        user_message: str,
        history: Optional[List[Dict[str, str]]] = None,
        use_cache: bool = True,
    ) -> str:
        """
        Ask the model to classify a chat message.

        Args:
            user_message: The new user message
            history: Prior turns as {"role", "content"} dicts
            use_cache: Whether to use the Redis reply cache

        Returns:
            Raw model output (expected to be a JSON object)

        Raises:
            LLMError: On missing key, cost limit or API failure
        """
        model = settings.llm_model
        messages = self.build_messages(user_message, history)

        if not self._check_cost_limit():
            metrics.llm_calls_total.labels(status="cost_limited").inc()
            raise LLMError("AI failed: daily LLM cost limit exceeded")

        cache_key = self._get_cache_key(messages, model)
        if use_cache:
            redis_client = await self._get_redis()
            if redis_client:
                cached = await redis_client.get(cache_key)
                if cached:
                    logger.debug(f"LLM cache hit for message: {user_message[:50]}...")
                    metrics.llm_calls_total.labels(status="cached").inc()
                    return cached

        client = await self._get_client()
        try:
            response = await client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=settings.llm_temperature,
                max_tokens=settings.llm_max_tokens,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            detail = getattr(e, "message", None) or str(e)
            logger.error(f"AI Error: {detail}")
            metrics.llm_calls_total.labels(status="error").inc()
            raise LLMError(f"AI failed: {detail}") from e

        result = response.choices[0].message.content or ""

        if settings.track_llm_costs and response.usage is not None:
            cost = self._estimate_cost(
                model,
                response.usage.prompt_tokens,
                response.usage.completion_tokens,
            )
            self._daily_cost += cost
            logger.debug(f"LLM call cost: ${cost:.4f} (total: ${self._daily_cost:.2f})")

        self._call_count += 1
        metrics.llm_calls_total.labels(status="success").inc()

        if use_cache and result:
            redis_client = await self._get_redis()
            if redis_client:
                await redis_client.setex(cache_key, settings.llm_cache_ttl_seconds, result)

        return result

    def get_stats(self) -> Dict[str, Any]:
        """Call count, daily cost, etc."""
        return {
            "call_count": self._call_count,
            "daily_cost": self._daily_cost,
            "cost_limit": settings.llm_cost_limit_per_day,
            "cache_enabled": settings.llm_cache_enabled,
        }

    def reset_daily_stats(self):
        """Reset daily cost and call count."""
        self._daily_cost = 0.0
        self._call_count = 0
        logger.info("LLM daily stats reset")

    async def close(self):
        """Close connections."""
        if self._redis:
            await self._redis.close()
            self._redis = None
        if self._client:
            await self._client.close()
            self._client = None


# Global LLM service instance
llm_service = LLMService()
