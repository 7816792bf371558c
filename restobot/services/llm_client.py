# restobot/services/llm_client.py
"""LLM client wrapper for OpenAI-compatible chat completions."""

from contextvars import ContextVar
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

# Context variable for restaurant id (works across async operations)
_restaurant_id: ContextVar[Optional[str]] = ContextVar("restaurant_id", default=None)


class LLMClientError(RuntimeError):
    """LLM client error."""

    pass


class LLMClient:
    """Wrapper around chat completions."""

    def __init__(self, api_key: str, model: str = None, base_url: Optional[str] = None):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url or None
        if not self.model:
            raise LLMClientError("Model must be specified")

    def _get_client(self) -> AsyncOpenAI:
        """Create client with headers tagging the restaurant being served."""
        restaurant_id = _restaurant_id.get()
        headers = {"X-Title": f"Restobot / {restaurant_id}" if restaurant_id else "Restobot"}

        return AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            default_headers=headers,
        )

    async def generate(self, messages: List[Dict[str, Any]]):
        """Call LLM with messages."""
        try:
            client = self._get_client()
            return await client.chat.completions.create(model=self.model, messages=messages)
        except Exception as e:
            raise LLMClientError(f"LLM call failed: {e}") from e

    async def complete_text(self, messages: List[Dict[str, Any]]) -> str:
        """Call LLM and return the text of the first choice."""
        response = await self.generate(messages)
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise LLMClientError(f"LLM returned no choices: {e}") from e
        if not content or not content.strip():
            raise LLMClientError("LLM returned an empty completion")
        return content


# Singleton
_llm_client: LLMClient = None


def set_restaurant_context(restaurant_id: str):
    """Set restaurant id in context for request headers."""
    _restaurant_id.set(restaurant_id)


def get_llm_client() -> LLMClient:
    """Get cached LLM client instance."""
    global _llm_client
    if _llm_client is None:
        from restobot.config import get_settings

        settings = get_settings()
        api_key = settings.OPENAI_API_KEY
        if not api_key:
            raise LLMClientError("OPENAI_API_KEY not found in environment variables.")
        _llm_client = LLMClient(
            api_key=api_key,
            model=settings.DEFAULT_MODEL,
            base_url=settings.OPENAI_BASE_URL,
        )
    return _llm_client
