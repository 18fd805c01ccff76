"""
Tests for LLMClient dialect handling and retries.
"""

import inspect
import json

import pytest

from promptbench.core.errors import UpstreamError
from promptbench.core.llm.client import LLMClient
from promptbench.core.llm.llm_config import LLMConfig


def test_mock_customer_reply_uses_goal():
    client = LLMClient(LLMConfig(dialect="mock"))
    reply = client.chat(
        [
            {"role": "system", "content": "You are simulating a real customer.\n- Goal: cancel my plan"},
            {"role": "user", "content": "Start."},
        ]
    )
    assert "cancel my plan" in reply


def test_mock_evaluator_returns_json():
    client = LLMClient(LLMConfig(dialect="mock"))
    reply = client.chat(
        [
            {"role": "system", "content": "You are a JSON-only response bot."},
            {"role": "user", "content": "Evaluate."},
        ],
        json_mode=True,
    )
    assert json.loads(reply)["score"] == 75


def test_json_mode_defaults_false():
    param = inspect.signature(LLMClient.chat).parameters["json_mode"]
    assert param.default is False


def test_unknown_dialect_rejected():
    with pytest.raises(ValueError, match="Unknown LLM provider dialect"):
        LLMClient(LLMConfig(dialect="carrier-pigeon"))


def test_single_attempt_by_default(monkeypatch):
    monkeypatch.delenv("LLM_MAX_RETRIES", raising=False)
    client = LLMClient(LLMConfig(dialect="mock"))
    calls = []

    def boom(messages):
        calls.append(messages)
        raise RuntimeError("connection reset")

    client.client.chat = boom
    with pytest.raises(UpstreamError, match="connection reset"):
        client.chat([{"role": "user", "content": "hi"}])
    assert len(calls) == 1


def test_retries_when_configured(monkeypatch):
    monkeypatch.setenv("LLM_MAX_RETRIES", "2")
    monkeypatch.setenv("LLM_RETRY_BACKOFF_S", "0")
    client = LLMClient(LLMConfig(dialect="mock"))
    attempts = {"n": 0}

    def flaky(messages):
        attempts["n"] += 1
        if attempts["n"] < 3:
            raise RuntimeError("timeout")
        return "ok"

    client.client.chat = flaky
    assert client.chat([{"role": "user", "content": "hi"}]) == "ok"
    assert attempts["n"] == 3
