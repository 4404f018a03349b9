"""LLM provider factory."""

from analyst_chat.core.config import settings
from analyst_chat.services.llm.base import BaseLLMProvider


def get_llm_provider(api_key: str) -> BaseLLMProvider:
    """Factory function that returns the configured LLM provider."""
    from analyst_chat.services.llm.gemini import GeminiProvider
    return GeminiProvider(api_key=api_key, model=settings.gemini_model)
