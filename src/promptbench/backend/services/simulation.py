"""
Simulation pipeline.

For each requested scenario a fresh run record is created, an LLM-played
customer and an LLM-played agent alternate for ``message_count`` turns,
the transcript is persisted after every turn, and the finished transcript
is scored by the evaluator.

Any failure while conversing or evaluating is contained to its scenario:
the run is still moved to ``completed`` with a fixed fallback evaluation
and the error text in ``detailed_feedback``. A run therefore never stays
``running`` once the pipeline returns.

Contains:
    - SimulationResult: Per-scenario outcome returned to the caller
    - SimulationPipeline: Runs scenarios sequentially for one client
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field

from promptbench.core.errors import NotFoundError
from promptbench.core.llm import LLMClient
from promptbench.core.prompts import (
    AGENT_TEMPERATURE,
    CUSTOMER_TEMPERATURE,
    build_agent_prompt,
    build_customer_prompt,
    build_customer_turn_instruction,
    format_transcript,
)
from promptbench.core.records import (
    Client,
    ConversationMessage,
    Evaluation,
    Scenario,
    SimulationRun,
)

from ..store import CLIENTS, SCENARIOS, SIMULATION_RUNS, DocumentStore, utcnow
from .evaluator import Evaluator


logger = logging.getLogger(__name__)

DEGRADED_SCORE = 50
DEGRADED_SUMMARY = "Simulation completed with partial data due to a processing error."
DEGRADED_SUGGESTIONS = [
    "Review the base system prompt for clarity and completeness",
    "Ensure all required client information is properly configured",
]


class SimulationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    run_id: str = Field(alias="runId")
    scenario_id: str = Field(alias="scenarioId")
    status: str
    score: int | float


def degraded_evaluation(error: BaseException, conversation: Sequence) -> Evaluation:
    partial = (
        "A partial conversation was generated."
        if conversation
        else "No conversation was generated."
    )
    return Evaluation(
        score=DEGRADED_SCORE,
        evaluation_summary=DEGRADED_SUMMARY,
        detailed_feedback=f"The simulation was run but encountered an error: {error}. {partial}",
        prompt_improvement_suggestions=list(DEGRADED_SUGGESTIONS),
    )


class SimulationPipeline:
    def __init__(
        self,
        store: DocumentStore,
        llm: LLMClient,
        evaluator: Evaluator | None = None,
    ):
        self.store = store
        self.llm = llm
        self.evaluator = evaluator or Evaluator(llm)

    async def run(self, client_id: str, scenario_ids: Sequence[str]) -> list[SimulationResult]:
        """
        Simulate every resolvable scenario for a client, one after another.

        Scenario ids that do not belong to the client, are inactive, or do
        not exist are skipped without a result entry.

        Raises:
            NotFoundError: If the client does not exist or no scenario id resolves
        """
        client_doc = await self.store.get(CLIENTS, client_id)
        if client_doc is None:
            raise NotFoundError("Client not found")
        client = Client.model_validate(client_doc)

        scenarios = await self._resolve_scenarios(client_id, scenario_ids)
        if not scenarios:
            raise NotFoundError("No scenarios found for the provided IDs")

        results = []
        for scenario in scenarios:
            results.append(await self.run_scenario(client, scenario))
        return results

    async def _resolve_scenarios(self, client_id: str, scenario_ids: Sequence[str]) -> list[Scenario]:
        records = await self.store.query(SCENARIOS, {"client_id": client_id}, order_by=None)
        by_id = {r["id"]: Scenario.model_validate(r) for r in records}
        resolved = []
        seen = set()
        for scenario_id in scenario_ids:
            scenario = by_id.get(scenario_id)
            if scenario is None or scenario_id in seen:
                continue
            seen.add(scenario_id)
            if not scenario.is_active:
                logger.info("Skipping inactive scenario %s", scenario_id)
                continue
            resolved.append(scenario)
        return resolved

    async def run_scenario(self, client: Client, scenario: Scenario) -> SimulationResult:
        run_id = str(uuid.uuid4())
        run = SimulationRun(
            id=run_id,
            client_id=client.id,
            scenario_id=scenario.id,
            status="running",
        )
        await self.store.set(SIMULATION_RUNS, run_id, {**run.to_document(), "created_at": utcnow()})
        logger.info("Simulating scenario %s for client %s (run %s)", scenario.id, client.id, run_id)

        try:
            conversation = await self._converse(run_id, client, scenario)
            evaluation = await self.evaluator.evaluate(client, scenario, conversation)
        except Exception as e:
            logger.exception("Simulation of scenario %s failed; completing run %s degraded", scenario.id, run_id)
            return await self._complete_degraded(run_id, client, scenario, e)

        await self._complete(run_id, conversation, evaluation)
        return SimulationResult(
            run_id=run_id,
            scenario_id=scenario.id,
            status="completed",
            score=evaluation.score,
        )

    async def _converse(
        self, run_id: str, client: Client, scenario: Scenario
    ) -> list[ConversationMessage]:
        conversation: list[ConversationMessage] = []
        customer_prompt = build_customer_prompt(scenario)
        agent_prompt = build_agent_prompt(client)
        total_turns = scenario.message_count

        for turn in range(1, total_turns + 1):
            customer_messages = [
                {"role": "system", "content": customer_prompt},
                {"role": "user", "content": build_customer_turn_instruction(turn, total_turns, conversation)},
            ]
            customer_text = await asyncio.to_thread(
                self.llm.chat, customer_messages, temperature=CUSTOMER_TEMPERATURE
            )
            conversation.append(ConversationMessage(role="customer", content=customer_text, turn=turn))

            agent_messages = [
                {"role": "system", "content": agent_prompt},
                {"role": "user", "content": format_transcript(conversation)},
            ]
            agent_text = await asyncio.to_thread(
                self.llm.chat, agent_messages, temperature=AGENT_TEMPERATURE
            )
            conversation.append(ConversationMessage(role="agent", content=agent_text, turn=turn))

            await self.store.update(
                SIMULATION_RUNS,
                run_id,
                {"conversation": [m.model_dump() for m in conversation]},
            )
            logger.debug("Run %s: persisted turn %d/%d", run_id, turn, total_turns)

        return conversation

    async def _complete(
        self,
        run_id: str,
        conversation: Sequence[ConversationMessage],
        evaluation: Evaluation,
    ) -> None:
        await self.store.update(
            SIMULATION_RUNS,
            run_id,
            {
                "status": "completed",
                "conversation": [m.model_dump() for m in conversation],
                "score": evaluation.score,
                "evaluation_summary": evaluation.evaluation_summary,
                "detailed_feedback": evaluation.detailed_feedback,
                "prompt_improvement_suggestions": evaluation.prompt_improvement_suggestions,
            },
        )

    async def _complete_degraded(
        self, run_id: str, client: Client, scenario: Scenario, error: BaseException
    ) -> SimulationResult:
        existing = await self.store.get(SIMULATION_RUNS, run_id)
        conversation = SimulationRun.model_validate(existing).conversation if existing else []
        evaluation = degraded_evaluation(error, conversation)
        if existing is None:
            await self.store.set(
                SIMULATION_RUNS,
                run_id,
                {"client_id": client.id, "scenario_id": scenario.id, "created_at": utcnow()},
            )
        await self._complete(run_id, conversation, evaluation)
        return SimulationResult(
            run_id=run_id,
            scenario_id=scenario.id,
            status="completed",
            score=evaluation.score,
        )
