"""
Shared pytest fixtures.
"""

import pytest

from promptbench.core.llm import LLMConfig, create_llm_client


@pytest.fixture
def mock_llm():
    """LLM client backed by the deterministic mock provider."""
    return create_llm_client(LLMConfig(dialect="mock", api_key="", model="mock"))
