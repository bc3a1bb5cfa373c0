"""Presentation generation endpoint.

Failures raise PipelineError, which the app-level handler turns into an
ErrorResponse with a status code per category (see src/api/errors.py).
"""

from fastapi import APIRouter, Depends

from src.api.deps import get_generator
from src.pipeline.generation import PresentationGenerator
from src.schemas import PresentationResponse, PresentationSubmit
from src.utils.logging import log, get_logger

MODULE = "presentations"
logger = get_logger()

router = APIRouter()


@router.post("/generate-presentation", response_model=PresentationResponse, response_model_by_alias=True)
async def generate_presentation(
    body: PresentationSubmit,
    generator: PresentationGenerator = Depends(get_generator),
):
    """Generate a presentation from narration text."""
    log.info(logger, MODULE, "request_start", "Presentation requested",
             transcript_length=len(body.transcript))
    document = await generator.generate(
        body.transcript,
        temperature=body.temperature,
        max_output_tokens=body.max_output_tokens,
    )
    return PresentationResponse.from_document(document)
