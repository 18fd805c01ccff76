"""
LLM provider implementations.

- openai: OpenAI (and OpenAI-compatible) chat completions
- mock: deterministic offline stub for development and tests

The OpenAI provider is imported lazily so the mock dialect works without
the SDK being configured.
"""

from .mock import _MockModel


def _import_openai():
    """Lazy import OpenAI provider."""
    from .openai import (
        create_openai_client,
        normalize_messages_for_openai,
        openai_chat,
    )
    return {
        "create_openai_client": create_openai_client,
        "normalize_messages_for_openai": normalize_messages_for_openai,
        "openai_chat": openai_chat,
    }


__all__ = [
    "_MockModel",
    "_import_openai",
]
