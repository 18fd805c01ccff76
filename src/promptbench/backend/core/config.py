from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "promptbench"
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = "/api"
    allowed_origins: list[str] = []

    # Document store holding clients, scenarios, runs and prompt suggestions.
    database_url: str = "sqlite+aiosqlite:///./promptbench.db"
    # Whether the store may run filtered + sorted queries server-side.
    store_compound_queries: bool = False

    # Relational source for the one-time migration; migration is disabled when unset.
    migration_source_url: str | None = None

    llm_dialect: str = "openai"
    llm_api_key: SecretStr = SecretStr("")
    llm_model: str = "gpt-4o-mini"
    llm_base_url: str | None = None
    llm_max_tokens: int = 1024
    # Synthesis returns a full system prompt plus rationale in one response.
    synthesis_max_tokens: int = 16000


@lru_cache
def get_settings() -> Settings:
    return Settings()
