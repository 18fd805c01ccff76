"""
Typed record models for the four document collections.

Every record read from the store is validated into one of these models, so
defaulting of missing or null fields happens here rather than in handlers.
Timestamps are carried as ISO-8601 strings, the form the store returns.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _none_to_empty(value):
    return "" if value is None else value


def _none_to_list(value):
    return [] if value is None or not isinstance(value, list) else value


Text = Annotated[str, BeforeValidator(_none_to_empty)]
TextList = Annotated[list[str], BeforeValidator(_none_to_list)]

RunStatus = Literal["pending", "running", "completed"]
MessageRole = Literal["customer", "agent"]

DEFAULT_SCENARIO_TYPE = "general"
DEFAULT_MESSAGE_COUNT = 8
MIN_MESSAGE_COUNT = 2
MAX_MESSAGE_COUNT = 20


class Record(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = ""

    def to_document(self) -> dict:
        """Body to write to the store; the id lives outside the body."""
        return self.model_dump(exclude={"id"})


class Client(Record):
    name: Text = ""
    industry: Text = ""
    description: Text = ""
    tone_of_voice: Text = ""
    products_or_services: Text = ""
    policies: Text = ""
    extra_context: Text = ""
    base_system_prompt: Text = ""
    created_at: str | None = None
    updated_at: str | None = None


class Scenario(Record):
    client_id: Text = ""
    name: Text = ""
    type: Annotated[str, BeforeValidator(lambda v: v or DEFAULT_SCENARIO_TYPE)] = DEFAULT_SCENARIO_TYPE
    description: Text = ""
    customer_persona: Text = ""
    goal: Text = ""
    message_count: Annotated[int, BeforeValidator(lambda v: v or DEFAULT_MESSAGE_COUNT)] = DEFAULT_MESSAGE_COUNT
    is_active: Annotated[bool, BeforeValidator(lambda v: True if v is None else v)] = True
    created_at: str | None = None


class ConversationMessage(BaseModel):
    role: MessageRole
    content: Text = ""
    turn: int


class SimulationRun(Record):
    client_id: Text = ""
    scenario_id: Text = ""
    status: RunStatus = "pending"
    conversation: Annotated[list[ConversationMessage], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )
    score: Annotated[int | float, BeforeValidator(lambda v: 0 if v is None else v)] = 0
    evaluation_summary: Text = ""
    detailed_feedback: Text = ""
    prompt_improvement_suggestions: TextList = Field(default_factory=list)
    created_at: str | None = None


class FinalPromptSuggestion(Record):
    client_id: Text = ""
    source_simulation_run_ids: TextList = Field(default_factory=list)
    combined_prompt: Text = ""
    rationale: Text = ""
    created_at: str | None = None


class Evaluation(BaseModel):
    """Structured verdict returned by the LLM judge."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    score: int | float
    evaluation_summary: Text = Field("", alias="evaluationSummary")
    detailed_feedback: Text = Field("", alias="detailedFeedback")
    prompt_improvement_suggestions: TextList = Field(
        default_factory=list, alias="promptImprovementSuggestions"
    )
