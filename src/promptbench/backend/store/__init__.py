from .base import (
    CLIENTS,
    COLLECTIONS,
    FINAL_PROMPT_SUGGESTIONS,
    SCENARIOS,
    SIMULATION_RUNS,
    DocumentStore,
    StoreCapabilities,
    utcnow,
)
from .sql import SqlDocumentStore

__all__ = [
    "CLIENTS",
    "COLLECTIONS",
    "FINAL_PROMPT_SUGGESTIONS",
    "SCENARIOS",
    "SIMULATION_RUNS",
    "DocumentStore",
    "StoreCapabilities",
    "SqlDocumentStore",
    "utcnow",
]
