"""LLM provider abstraction module."""

from goalcoach.providers.base import LLMProvider, LLMProviderError
from goalcoach.providers.litellm_provider import LiteLLMProvider, friendly_error

__all__ = ["LLMProvider", "LLMProviderError", "LiteLLMProvider", "friendly_error"]
