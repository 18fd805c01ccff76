"""Scenario routes.

Scenarios are created under an existing client; listing can be narrowed to
one client with ``?client_id=``.
"""

from typing import Optional

from litestar import Router, delete, get, post, put
from litestar.exceptions import NotFoundException

from ...core.state import AppState
from ...schemas import ScenarioCreate, ScenarioUpdate
from ...store import CLIENTS, SCENARIOS, utcnow


@get()
async def list_scenarios(bench: AppState, client_id: Optional[str] = None) -> list[dict]:
    return await bench.store.query(SCENARIOS, {"client_id": client_id})


@post()
async def create_scenario(data: ScenarioCreate, bench: AppState) -> dict:
    if await bench.store.get(CLIENTS, data.client_id) is None:
        raise NotFoundException("Client not found")
    return await bench.store.add(SCENARIOS, {**data.model_dump(), "created_at": utcnow()})


@get("/{scenario_id:str}")
async def get_scenario(scenario_id: str, bench: AppState) -> dict:
    scenario = await bench.store.get(SCENARIOS, scenario_id)
    if scenario is None:
        raise NotFoundException("Scenario not found")
    return scenario


@put("/{scenario_id:str}")
async def update_scenario(scenario_id: str, data: ScenarioUpdate, bench: AppState) -> dict:
    """Overwrite the fields present in the body; client_id and created_at are kept."""
    if await bench.store.get(SCENARIOS, scenario_id) is None:
        raise NotFoundException("Scenario not found")
    return await bench.store.update(SCENARIOS, scenario_id, data.model_dump(exclude_unset=True, exclude_none=True))


@delete("/{scenario_id:str}", status_code=200)
async def delete_scenario(scenario_id: str, bench: AppState) -> dict:
    await bench.store.delete(SCENARIOS, scenario_id)
    return {"success": True}


router = Router(
    path="/scenarios",
    route_handlers=[list_scenarios, create_scenario, get_scenario, update_scenario, delete_scenario],
)
