from __future__ import annotations

import logging

from promptbench.core.llm import LLMClient, LLMConfig, create_llm_client

from ..store import DocumentStore, SqlDocumentStore, StoreCapabilities
from .config import Settings


logger = logging.getLogger(__name__)


def build_llm_config(settings: Settings) -> LLMConfig:
    return LLMConfig(
        dialect=settings.llm_dialect.lower(),
        api_key=settings.llm_api_key.get_secret_value(),
        model=settings.llm_model,
        base_url=settings.llm_base_url,
        max_tokens=settings.llm_max_tokens,
    )


class AppState:
    """Long-lived resources shared by request handlers.

    The store is opened on startup and closed on shutdown. The LLM client is
    built on first use so the API can serve record endpoints without
    credentials configured.
    """

    def __init__(
        self,
        settings: Settings,
        store: DocumentStore | None = None,
        llm: LLMClient | None = None,
    ):
        self.settings = settings
        self.store = store or SqlDocumentStore(
            settings.database_url,
            capabilities=StoreCapabilities(compound_queries=settings.store_compound_queries),
        )
        self._llm = llm

    @property
    def llm(self) -> LLMClient:
        if self._llm is None:
            config = build_llm_config(self.settings)
            self._llm = create_llm_client(config)
            logger.info("LLM client ready (dialect=%s, model=%s)", config.dialect, config.model)
        return self._llm

    async def startup(self) -> None:
        await self.store.initialize()

    async def shutdown(self) -> None:
        await self.store.close()
