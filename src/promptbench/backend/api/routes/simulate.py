from litestar import Router, post

from ...schemas import SimulateRequest
from ...services.simulation import SimulationPipeline


@post(status_code=200)
async def simulate(data: SimulateRequest, pipeline: SimulationPipeline) -> dict:
    """Run the requested scenarios for a client and return one result per executed scenario."""
    results = await pipeline.run(data.client_id, data.scenario_ids)
    return {"results": [r.model_dump(by_alias=True) for r in results]}


router = Router(path="/simulate", route_handlers=[simulate])
