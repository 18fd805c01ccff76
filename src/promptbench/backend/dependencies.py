from __future__ import annotations

from litestar.di import Provide

from .core.state import AppState
from .services.simulation import SimulationPipeline
from .services.synthesizer import PromptSynthesizer


def build_dependencies(state: AppState) -> dict[str, Provide]:
    def provide_state() -> AppState:
        return state

    def provide_pipeline() -> SimulationPipeline:
        return SimulationPipeline(state.store, state.llm)

    def provide_synthesizer() -> PromptSynthesizer:
        return PromptSynthesizer(state.store, state.llm, max_tokens=state.settings.synthesis_max_tokens)

    return {
        "bench": Provide(provide_state, sync_to_thread=False),
        "pipeline": Provide(provide_pipeline, sync_to_thread=False),
        "synthesizer": Provide(provide_synthesizer, sync_to_thread=False),
    }
