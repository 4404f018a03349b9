"""Deadline-bounded access to the hosted language model."""

import asyncio
import logging
from collections.abc import Callable

from analyst_chat.core.config import settings
from analyst_chat.core.errors import AppError, ConfigurationError, ModelTimeoutError, UpstreamError
from analyst_chat.services.llm import get_llm_provider
from analyst_chat.services.llm.base import BaseLLMProvider, extract_reply_text

logger = logging.getLogger(__name__)


class ModelGateway:
    def __init__(
        self,
        api_key: str,
        timeout_seconds: float = 360.0,
        provider_factory: Callable[[str], BaseLLMProvider] = get_llm_provider,
    ):
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.provider_factory = provider_factory

    def ensure_configured(self) -> None:
        if not self.api_key:
            logger.error("Gemini API key not configured")
            raise ConfigurationError("Gemini API key not configured")

    async def complete(self, prompt: str, timeout: float | None = None) -> str:
        """Return the model's reply text for ``prompt``.

        Raises ConfigurationError before touching the network when no key is
        set, ModelTimeoutError when the deadline passes first and UpstreamError
        for any other provider failure. On timeout the pending call is
        cancelled and its result discarded.
        """
        self.ensure_configured()

        deadline = self.timeout_seconds if timeout is None else timeout
        logger.info(f"Calling model with prompt of {len(prompt)} chars (timeout {deadline}s)")
        try:
            provider = self.provider_factory(self.api_key)
            reply = await asyncio.wait_for(provider.generate(prompt), timeout=deadline)
        except asyncio.TimeoutError as e:
            logger.error(f"Model response timed out after {deadline}s")
            raise ModelTimeoutError(f"Model response timed out after {deadline}s") from e
        except AppError:
            raise
        except Exception as e:
            logger.exception("Model call failed")
            raise UpstreamError(f"Model call failed: {e}") from e

        text = extract_reply_text(reply)
        logger.info(f"Model replied with {len(text)} chars")
        return text


def get_model_gateway() -> ModelGateway:
    return ModelGateway(
        api_key=settings.gemini_api_key,
        timeout_seconds=settings.llm_timeout_seconds,
    )
