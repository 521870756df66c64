"""Text-generation service interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class LLMProviderError(RuntimeError):
    """The text-generation service failed or was unreachable."""


class LLMProvider(ABC):
    def __init__(self, api_key: str | None = None, api_base: str | None = None) -> None:
        self.api_key = api_key
        self.api_base = api_base

    @abstractmethod
    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        model: str | None = None,
        json_mode: bool = False,
    ) -> str:
        """Return the completion text. Raises ``LLMProviderError`` on failure."""

    def is_available(self) -> bool:
        return bool(self.api_key)
