"""
Shared pytest fixtures for backend tests.
"""

import pytest
import pytest_asyncio
from litestar.testing import TestClient

from promptbench.backend.core.config import Settings
from promptbench.backend.core.state import AppState
from promptbench.backend.main import create_app
from promptbench.backend.store import SqlDocumentStore


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'promptbench.db'}"


@pytest_asyncio.fixture
async def store(database_url):
    store = SqlDocumentStore(database_url)
    await store.initialize()
    try:
        yield store
    finally:
        await store.close()


@pytest.fixture
def settings(database_url) -> Settings:
    return Settings(database_url=database_url, llm_dialect="mock", llm_model="mock")


@pytest.fixture
def client(settings, mock_llm):
    """Test client for an app wired to a temporary database and the mock LLM."""
    app = create_app(settings, AppState(settings, llm=mock_llm))
    with TestClient(app) as test_client:
        yield test_client
