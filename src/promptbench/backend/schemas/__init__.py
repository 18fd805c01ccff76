from .requests import (
    ClientCreate,
    ClientUpdate,
    MigrateRequest,
    ScenarioCreate,
    ScenarioUpdate,
    SimulateRequest,
    SynthesizeRequest,
)

__all__ = [
    "ClientCreate",
    "ClientUpdate",
    "MigrateRequest",
    "ScenarioCreate",
    "ScenarioUpdate",
    "SimulateRequest",
    "SynthesizeRequest",
]
