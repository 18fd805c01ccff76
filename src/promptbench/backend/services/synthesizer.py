"""
Prompt synthesizer.

Aggregates the latest completed run of every active scenario of a client,
asks the LLM for one improved system prompt of roughly the same length as
the base prompt, and stores it as a new final prompt suggestion.
Suggestions are append-only; every synthesis adds one.

Contains:
    - SynthesisStats: Length comparison returned alongside the suggestion
    - SynthesisOutcome: Persisted suggestion plus stats
    - PromptSynthesizer: The synthesis flow
    - count_words / length_stats / latest_run_per_scenario helpers
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from promptbench.core.errors import NotFoundError, UpstreamError, ValidationError
from promptbench.core.llm import LLMClient
from promptbench.core.parsing import extract_json
from promptbench.core.prompts import (
    FEEDBACK_SEPARATOR,
    SYNTHESIS_TEMPERATURE,
    SYNTHESIZER_SYSTEM_PROMPT,
    build_synthesis_prompt,
    render_feedback_block,
)
from promptbench.core.records import Client, FinalPromptSuggestion, Scenario, SimulationRun

from ..store import (
    CLIENTS,
    FINAL_PROMPT_SUGGESTIONS,
    SCENARIOS,
    SIMULATION_RUNS,
    DocumentStore,
    utcnow,
)


logger = logging.getLogger(__name__)

LENGTH_TOLERANCE = 0.05
MIN_PROMPT_CHARS = 100
DEFAULT_RATIONALE = "Rationale not provided by the model."


class SynthesisStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_word_count: int = Field(alias="originalWordCount")
    synthesized_word_count: int = Field(alias="synthesizedWordCount")
    target_word_count: int = Field(alias="targetWordCount")
    length_match: bool = Field(alias="lengthMatch")
    length_difference: int = Field(alias="lengthDifference")
    quality_note: str = Field(alias="qualityNote")


@dataclass
class SynthesisOutcome:
    suggestion: FinalPromptSuggestion
    stats: SynthesisStats

    def to_response(self) -> dict:
        return {**self.suggestion.model_dump(), "stats": self.stats.model_dump(by_alias=True)}


def count_words(text: str) -> int:
    return len(text.split())


def length_stats(base_word_count: int, synthesized_word_count: int) -> SynthesisStats:
    """
    Compare a synthesized prompt's length with the ±5% band around the base.

    ``length_difference`` is how far the count falls outside the band
    (negative when short, zero inside it).
    """
    tolerance = math.floor(base_word_count * LENGTH_TOLERANCE)
    low = base_word_count - tolerance
    high = base_word_count + tolerance
    if synthesized_word_count > high:
        difference = synthesized_word_count - high
    elif synthesized_word_count < low:
        difference = synthesized_word_count - low
    else:
        difference = 0
    length_match = difference == 0
    return SynthesisStats(
        original_word_count=base_word_count,
        synthesized_word_count=synthesized_word_count,
        target_word_count=base_word_count,
        length_match=length_match,
        length_difference=difference,
        quality_note="Length matches target" if length_match else "Length slightly outside target range",
    )


def latest_run_per_scenario(runs: Iterable[SimulationRun]) -> list[SimulationRun]:
    """Keep the first run seen for each scenario; callers pass runs newest first."""
    latest: dict[str, SimulationRun] = {}
    for run in runs:
        latest.setdefault(run.scenario_id, run)
    return list(latest.values())


class PromptSynthesizer:
    def __init__(self, store: DocumentStore, llm: LLMClient, max_tokens: int = 16000):
        self.store = store
        self.llm = llm
        self.max_tokens = max_tokens

    async def synthesize(self, client_id: str) -> SynthesisOutcome:
        """
        Build and persist a new final prompt suggestion for a client.

        Preconditions are checked in order: client exists, base prompt is
        set, at least one active scenario, at least one completed run among
        those scenarios.

        Raises:
            NotFoundError: If the client does not exist
            ValidationError: If a precondition fails or the model output is unusable
            UpstreamError: If the LLM call fails or returns nothing
            ParseError: If no JSON can be extracted from the response
        """
        client_doc = await self.store.get(CLIENTS, client_id)
        if client_doc is None:
            raise NotFoundError("Client not found")
        client = Client.model_validate(client_doc)

        if not client.base_system_prompt.strip():
            raise ValidationError(
                "Client base system prompt is empty. Set a base system prompt before "
                "generating the final prompt."
            )

        # Activity is read through the record model so a missing flag counts as active.
        scenario_docs = await self.store.query(SCENARIOS, {"client_id": client_id}, order_by=None)
        scenarios = {
            s.id: s for s in (Scenario.model_validate(d) for d in scenario_docs) if s.is_active
        }
        if not scenarios:
            raise ValidationError("No active scenarios found for this client")

        run_docs = await self.store.query(
            SIMULATION_RUNS,
            {"client_id": client_id, "status": "completed"},
            order_by="created_at",
            descending=True,
        )
        runs = [
            SimulationRun.model_validate(d) for d in run_docs if d.get("scenario_id") in scenarios
        ]
        if not runs:
            raise ValidationError("No completed simulation runs found for this client")

        latest_runs = latest_run_per_scenario(runs)
        feedback_summary = FEEDBACK_SEPARATOR.join(
            render_feedback_block(run, scenarios.get(run.scenario_id)) for run in latest_runs
        )

        base_word_count = count_words(client.base_system_prompt)
        messages = [
            {"role": "system", "content": SYNTHESIZER_SYSTEM_PROMPT},
            {"role": "user", "content": build_synthesis_prompt(client, feedback_summary, base_word_count)},
        ]
        try:
            response = await asyncio.to_thread(
                self.llm.chat,
                messages,
                temperature=SYNTHESIS_TEMPERATURE,
                max_tokens=self.max_tokens,
                json_mode=True,
            )
        except UpstreamError as e:
            raise UpstreamError(f"Failed to call LLM: {e}") from e

        if not response or not response.strip():
            raise UpstreamError("Received empty response from the LLM")

        result = extract_json(response)
        combined_prompt = result.get("combinedPrompt") or result.get("combined_prompt")
        if not combined_prompt:
            raise ValidationError('LLM response is missing the required "combinedPrompt" field')
        if not isinstance(combined_prompt, str):
            raise ValidationError(
                f'"combinedPrompt" must be a string, got {type(combined_prompt).__name__}'
            )
        rationale = result.get("rationale") or DEFAULT_RATIONALE

        stats = length_stats(base_word_count, count_words(combined_prompt))
        if not stats.length_match:
            logger.warning(
                "Synthesized prompt for client %s has %d words, outside the target of %d ±%d%%",
                client_id,
                stats.synthesized_word_count,
                base_word_count,
                int(LENGTH_TOLERANCE * 100),
            )

        if len(combined_prompt) < MIN_PROMPT_CHARS:
            raise ValidationError("Synthesized prompt is too short or empty.")

        doc = await self.store.add(
            FINAL_PROMPT_SUGGESTIONS,
            {
                "client_id": client_id,
                "source_simulation_run_ids": [run.id for run in latest_runs],
                "combined_prompt": combined_prompt,
                "rationale": rationale,
                "created_at": utcnow(),
            },
        )
        logger.info("Stored prompt suggestion %s for client %s", doc["id"], client_id)
        return SynthesisOutcome(suggestion=FinalPromptSuggestion.model_validate(doc), stats=stats)
