"""LLM provider configuration structures."""

from dataclasses import dataclass


@dataclass
class LLMConfig:
    dialect: str
    api_key: str = ""
    model: str = ""
    base_url: str | None = None
    temperature: float = 0.7
    max_tokens: int = 1024
