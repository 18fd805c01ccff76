"""Simulation run routes (read-only; runs are written by the pipeline)."""

from typing import Optional

from litestar import Router, get
from litestar.exceptions import NotFoundException

from ...core.state import AppState
from ...store import SIMULATION_RUNS


@get()
async def list_simulation_runs(
    bench: AppState,
    client_id: Optional[str] = None,
    scenario_id: Optional[str] = None,
) -> list[dict]:
    return await bench.store.query(
        SIMULATION_RUNS, {"client_id": client_id, "scenario_id": scenario_id}
    )


@get("/{run_id:str}")
async def get_simulation_run(run_id: str, bench: AppState) -> dict:
    """Re-read one run; observers poll this for status and transcript length."""
    run = await bench.store.get(SIMULATION_RUNS, run_id)
    if run is None:
        raise NotFoundException("Simulation run not found")
    return run


router = Router(path="/simulation-runs", route_handlers=[list_simulation_runs, get_simulation_run])
