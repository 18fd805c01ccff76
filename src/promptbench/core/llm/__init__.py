"""
LLM module - chat completion client used by the simulation pipeline,
the evaluator and the prompt synthesizer.

Example usage:
    from promptbench.core.llm import LLMClient, LLMConfig

    client = LLMClient(LLMConfig(dialect="openai", api_key="sk-...", model="gpt-4o-mini"))
    text = client.chat([{"role": "user", "content": "Hello"}], temperature=0.7)
"""

from .client import LLMClient, create_llm_client
from .llm_config import LLMConfig

__all__ = [
    "LLMClient",
    "create_llm_client",
    "LLMConfig",
]
