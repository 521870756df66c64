"""LiteLLM provider implementation for multi-provider support."""

from __future__ import annotations

from typing import Any

import litellm
from litellm import acompletion
from loguru import logger

from goalcoach.providers.base import LLMProvider, LLMProviderError
from goalcoach.settings import GoalCoachSettings


class LiteLLMProvider(LLMProvider):
    """
    Text generation through LiteLLM.

    The model string selects the backend (``gpt-4o-mini``,
    ``anthropic/claude-3-7-sonnet-20250219``, ``deepseek/deepseek-chat``, ...),
    so switching providers is a settings change only.
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_base: str | None = None,
        default_model: str = "gpt-4o-mini",
        max_tokens: int = 4000,
        temperature: float = 0.7,
    ):
        super().__init__(api_key, api_base)
        self.default_model = default_model
        self.max_tokens = max_tokens
        self.temperature = temperature

        # Disable LiteLLM logging noise
        litellm.suppress_debug_info = True
        # Drop unsupported parameters for providers (e.g., response_format on some models)
        litellm.drop_params = True

    @classmethod
    def from_settings(cls, settings: GoalCoachSettings) -> LiteLLMProvider:
        return cls(
            api_key=settings.llm_api_key or None,
            api_base=settings.llm_api_base or None,
            default_model=settings.model,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
        )

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        model: str | None = None,
        json_mode: bool = False,
    ) -> str:
        """
        Send one system + user exchange and return the reply text.

        Args:
            system_prompt: Behavioural instructions and context.
            user_prompt: The prompt body (for chat, the flattened history).
            model: Override for the configured default model.
            json_mode: Ask the provider for a JSON object response.

        Raises:
            LLMProviderError: on any provider or transport failure.
        """
        model = model or self.default_model
        messages: list[dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})

        kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        # Pass api_key directly rather than relying on env vars
        if self.api_key:
            kwargs["api_key"] = self.api_key
        # Pass api_base for custom endpoints
        if self.api_base:
            kwargs["api_base"] = self.api_base

        try:
            response = await acompletion(**kwargs)
        except Exception as e:
            logger.error(f"LLM call failed ({model}): {e}")
            raise LLMProviderError(str(e)) from e
        return self._parse_response(response)

    @staticmethod
    def _parse_response(response: Any) -> str:
        choice = response.choices[0]
        return choice.message.content or ""


def friendly_error(exc: Exception) -> str:
    """Map raw provider exceptions to user-facing messages."""
    raw = str(exc).lower()
    if "rate_limit" in raw or "429" in raw:
        return "The coach is getting too many requests right now. Try again in a few seconds."
    if "context_length" in raw or "context window" in raw:
        return "This conversation got too long for the coach. Start a new one and ask again."
    if "timeout" in raw:
        return "The coach took too long to answer. Please try again."
    if "connection" in raw or "connect" in raw:
        return "The coach could not be reached. Please try again shortly."
    if "authentication" in raw or "401" in raw or "403" in raw:
        return "The coach is not configured correctly. Please contact the administrator."
    return "The coach is unavailable at the moment. Please try again later."
