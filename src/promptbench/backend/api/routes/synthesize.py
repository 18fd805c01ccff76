from litestar import Router, post

from ...schemas import SynthesizeRequest
from ...services.synthesizer import PromptSynthesizer


@post(status_code=200)
async def synthesize_prompt(data: SynthesizeRequest, synthesizer: PromptSynthesizer) -> dict:
    """Synthesize and store a new prompt suggestion; returns it with length stats."""
    outcome = await synthesizer.synthesize(data.client_id)
    return outcome.to_response()


router = Router(path="/synthesize-prompt", route_handlers=[synthesize_prompt])
