"""
LLM client implementation with timeout and optional retry.

Contains:
    - LLMClient: Main client class supporting the openai and mock dialects
    - create_llm_client: Factory function for creating LLM clients

Environment variables:
    LLM_TIMEOUT_S: Request timeout in seconds (default: 60)
    LLM_MAX_RETRIES: Retry attempts after the first call (default: 0)
    LLM_RETRY_BACKOFF_S: Initial retry backoff in seconds (default: 1.0)
"""

import logging
import os
import time
from typing import Any, Dict, List

from promptbench.core.errors import UpstreamError

from .llm_config import LLMConfig
from .providers import _MockModel, _import_openai


logger = logging.getLogger(__name__)

_openai = None


def _get_openai():
    """Get OpenAI provider functions (lazy loaded)."""
    global _openai
    if _openai is None:
        _openai = _import_openai()
    return _openai


class LLMClient:
    """
    Sends role-tagged messages to a completion endpoint and returns raw text.

    Attributes:
        provider: LLMConfig with provider settings
        timeout_s: Request timeout in seconds
        max_retries: Number of retries after the first attempt
        retry_backoff_s: Initial backoff delay between retries
    """

    def __init__(self, provider: LLMConfig):
        """
        Initialize LLM client with provider configuration.

        Raises:
            ValueError: If provider dialect is unknown
        """
        self.provider = provider

        self.timeout_s = float(os.getenv("LLM_TIMEOUT_S", "60"))
        self.max_retries = max(0, int(os.getenv("LLM_MAX_RETRIES", "0")))
        self.retry_backoff_s = float(os.getenv("LLM_RETRY_BACKOFF_S", "1.0"))

        if provider.dialect == "openai":
            openai = _get_openai()
            self.client = openai["create_openai_client"](provider.api_key, provider.base_url)
        elif provider.dialect == "mock":
            self.client = _MockModel()
        else:
            raise ValueError(f"Unknown LLM provider dialect: {provider.dialect}")

    def _with_retry(self, fn):
        """
        Run an LLM call, retrying with exponential backoff when configured.

        Raises:
            UpstreamError: Wrapping the last error once attempts are exhausted
        """
        delay = self.retry_backoff_s
        for attempt in range(self.max_retries + 1):
            try:
                return fn()
            except Exception as e:
                if attempt < self.max_retries:
                    logger.warning(
                        "LLM call failed (attempt %d/%d): %r; retrying in %.2fs",
                        attempt + 1,
                        self.max_retries + 1,
                        e,
                        delay,
                    )
                    time.sleep(max(0.0, delay))
                    delay *= 2
                    continue
                raise UpstreamError(f"LLM completion failed: {e}") from e

    def chat(
        self,
        messages: List[Dict[str, Any]],
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> str:
        """
        Generate a chat completion.

        Args:
            messages: List of {role, content} dicts
            temperature: Sampling temperature, defaults to the provider's
            max_tokens: Maximum output size, defaults to the provider's
            json_mode: Request a JSON object response where supported

        Returns:
            Generated text response
        """
        temperature = self.provider.temperature if temperature is None else temperature
        max_tokens = max_tokens or self.provider.max_tokens

        if self.provider.dialect == "openai":
            openai = _get_openai()

            def _do():
                return openai["openai_chat"](
                    client=self.client,
                    model=self.provider.model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=max_tokens,
                    timeout=self.timeout_s,
                    json_mode=json_mode,
                )
            return self._with_retry(_do)

        if self.provider.dialect == "mock":
            return self._with_retry(lambda: self.client.chat(messages))

        raise ValueError(f"Unknown LLM dialect: {self.provider.dialect}")


def create_llm_client(provider: LLMConfig) -> LLMClient:
    """Factory function to create an LLM client."""
    return LLMClient(provider)
