"""
Request bodies for the HTTP API.

Record endpoints take snake_case bodies; the action endpoints
(simulate, synthesize-prompt, migrate) take camelCase keys.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from promptbench.core.records import (
    DEFAULT_MESSAGE_COUNT,
    DEFAULT_SCENARIO_TYPE,
    MAX_MESSAGE_COUNT,
    MIN_MESSAGE_COUNT,
)


class ClientCreate(BaseModel):
    name: str = Field(..., min_length=1)
    industry: str = ""
    description: str = ""
    tone_of_voice: str = ""
    products_or_services: str = ""
    policies: str = ""
    extra_context: str = ""
    base_system_prompt: str = ""


class ClientUpdate(ClientCreate):
    """Full overwrite of a client's editable fields."""


class ScenarioCreate(BaseModel):
    client_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    type: str = DEFAULT_SCENARIO_TYPE
    description: str = ""
    customer_persona: str = ""
    goal: str = ""
    message_count: int = Field(DEFAULT_MESSAGE_COUNT, ge=MIN_MESSAGE_COUNT, le=MAX_MESSAGE_COUNT)
    is_active: bool = True


class ScenarioUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = None
    description: Optional[str] = None
    customer_persona: Optional[str] = None
    goal: Optional[str] = None
    message_count: Optional[int] = Field(None, ge=MIN_MESSAGE_COUNT, le=MAX_MESSAGE_COUNT)
    is_active: Optional[bool] = None


class SimulateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_id: str = Field(..., alias="clientId", min_length=1)
    scenario_ids: list[str] = Field(..., alias="scenarioIds", min_length=1)


class SynthesizeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_id: str = Field(..., alias="clientId", min_length=1)


class MigrateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    collection_name: Optional[str] = Field(None, alias="collectionName")
