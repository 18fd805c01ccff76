from litestar import Router

from . import (
    clients,
    final_prompts,
    migrate,
    scenarios,
    simulate,
    simulation_runs,
    synthesize,
)

router = Router(
    path="",
    route_handlers=[
        clients.router,
        scenarios.router,
        simulation_runs.router,
        simulate.router,
        final_prompts.router,
        synthesize.router,
        migrate.router,
    ],
)
