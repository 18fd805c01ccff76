"""
JSON extraction from free-form LLM output.

Models asked for "JSON only" still wrap their answer in code fences or
prose. Extraction runs an ordered list of strategies, parses the first
candidate found, and on a parse failure makes one repair attempt.

Contains:
    - ExtractionStrategy: A named pattern that locates a JSON candidate
    - ParseResult: Tagged success/error result
    - parse_json_object: Run the strategies and return a ParseResult
    - extract_json: Same, raising ParseError on failure
    - repair_json: Strip surrounding noise and trailing commas
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Sequence

from .errors import ParseError


PREVIEW_CHARS = 200


@dataclass(frozen=True)
class ExtractionStrategy:
    name: str
    pattern: re.Pattern
    group: int = 0

    def find(self, text: str) -> str | None:
        match = self.pattern.search(text)
        return match.group(self.group) if match else None


FENCED_BLOCK = ExtractionStrategy(
    "fenced_block", re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```"), 1
)
BARE_OBJECT = ExtractionStrategy("bare_object", re.compile(r"\{[\s\S]*\}"))
DELIMITED_BLOCK = ExtractionStrategy(
    "delimited_block", re.compile(r"```[\s\S]*?(\{[\s\S]*?\})[\s\S]*?```"), 1
)

DEFAULT_STRATEGIES: tuple[ExtractionStrategy, ...] = (FENCED_BLOCK, BARE_OBJECT, DELIMITED_BLOCK)


@dataclass(frozen=True)
class ParseResult:
    value: dict | None = None
    error: str | None = None
    strategy: str | None = None
    repaired: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


def preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    text = text or ""
    return text if len(text) <= limit else text[:limit] + "..."


def repair_json(candidate: str) -> str:
    """Drop anything outside the outermost braces and trailing commas."""
    cleaned = candidate.strip()
    cleaned = re.sub(r"^[^{]*", "", cleaned)
    cleaned = re.sub(r"[^}]*$", "", cleaned)
    return re.sub(r",(\s*[}\]])", r"\1", cleaned)


def _loads_object(candidate: str) -> Any:
    value = json.loads(candidate)
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    return value


def parse_json_object(
    text: str,
    strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES,
    repair: bool = True,
) -> ParseResult:
    """
    Locate and parse a JSON object in LLM output.

    Args:
        text: Raw model response
        strategies: Extraction strategies, tried in order until one matches
        repair: Whether to retry once on repaired text after a parse failure

    Returns:
        ParseResult carrying the parsed dict or an error message
    """
    candidate = None
    strategy_name = None
    for strategy in strategies:
        candidate = strategy.find(text or "")
        if candidate is not None:
            strategy_name = strategy.name
            break

    if candidate is None:
        return ParseResult(
            error=f"Response does not contain a JSON object. Response preview: {preview(text)}"
        )

    try:
        return ParseResult(value=_loads_object(candidate), strategy=strategy_name)
    except ValueError as first_error:
        if not repair:
            return ParseResult(
                error=f"Failed to parse JSON response: {first_error}", strategy=strategy_name
            )

    try:
        value = _loads_object(repair_json(candidate))
    except ValueError as retry_error:
        return ParseResult(
            error=f"Failed to parse JSON response even after cleanup: {retry_error}",
            strategy=strategy_name,
        )
    return ParseResult(value=value, strategy=strategy_name, repaired=True)


def extract_json(
    text: str,
    strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES,
    repair: bool = True,
) -> dict:
    """Like parse_json_object but raises ParseError instead of returning it."""
    result = parse_json_object(text, strategies=strategies, repair=repair)
    if not result.ok:
        raise ParseError(result.error)
    return result.value
