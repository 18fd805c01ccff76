from __future__ import annotations


class PromptBenchError(Exception):
    """Base error for promptbench."""


class NotFoundError(PromptBenchError):
    """Referenced client, scenario or run does not exist."""


class ValidationError(PromptBenchError):
    """Missing required input or an unmet precondition."""


class ParseError(PromptBenchError):
    """LLM response did not contain extractable JSON."""


class UpstreamError(PromptBenchError):
    """The LLM call itself failed."""
