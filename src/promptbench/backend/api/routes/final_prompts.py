from typing import Optional

from litestar import Router, get

from ...core.state import AppState
from ...store import FINAL_PROMPT_SUGGESTIONS


@get()
async def list_final_prompts(bench: AppState, client_id: Optional[str] = None) -> list[dict]:
    return await bench.store.query(FINAL_PROMPT_SUGGESTIONS, {"client_id": client_id})


router = Router(path="/final-prompts", route_handlers=[list_final_prompts])
