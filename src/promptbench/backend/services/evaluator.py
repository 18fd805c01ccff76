"""LLM judge that scores one finished transcript."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from pydantic import ValidationError as PydanticValidationError

from promptbench.core.errors import ParseError
from promptbench.core.llm import LLMClient
from promptbench.core.parsing import BARE_OBJECT, extract_json
from promptbench.core.prompts import (
    EVALUATION_TEMPERATURE,
    EVALUATOR_SYSTEM_PROMPT,
    build_evaluation_prompt,
)
from promptbench.core.records import Client, ConversationMessage, Evaluation, Scenario


logger = logging.getLogger(__name__)


class Evaluator:
    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def evaluate(
        self,
        client: Client,
        scenario: Scenario,
        conversation: Sequence[ConversationMessage],
    ) -> Evaluation:
        """
        Score a transcript against the client profile and scenario.

        Raises:
            UpstreamError: If the LLM call fails
            ParseError: If the response has no parsable JSON object or the
                object lacks a usable score
        """
        messages = [
            {"role": "system", "content": EVALUATOR_SYSTEM_PROMPT},
            {"role": "user", "content": build_evaluation_prompt(client, scenario, conversation)},
        ]
        response = await asyncio.to_thread(
            self.llm.chat, messages, temperature=EVALUATION_TEMPERATURE, json_mode=True
        )
        data = extract_json(response, strategies=(BARE_OBJECT,), repair=False)
        try:
            evaluation = Evaluation.model_validate(data)
        except PydanticValidationError as e:
            raise ParseError(f"Failed to parse evaluation response: {e}") from e
        logger.debug("Evaluated scenario %s: score=%s", scenario.id, evaluation.score)
        return evaluation
