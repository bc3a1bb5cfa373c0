"""Presentation generation pipeline.

Flat pipeline, one model call:
  1. Guard the input (too short → InvalidInput, no network call)
  2. Build the prompt
  3. Invoke the model (retries transient transport failures only)
  4. Extract the JSON object from the raw text
  5. Validate it into a PresentationDocument
  6. Stamp it with the generation time

Extraction and validation failures are NOT retried here. The model's answer
to an identical request is close enough to deterministic that repeating it
byte-for-byte is not worth the latency; a caller that wants another go calls
generate() again.

Every failure leaves as a PipelineError (see llm/errors.py).
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from src.config import GenerationConfig
from src.llm.client import GeminiClient, ModelResponseError, text_part
from src.llm.errors import ErrorCategory, PipelineError, classify_error
from src.llm.invoker import TransportError
from src.llm.parser import JSONExtractionError, extract_presentation
from src.llm.validators import DocumentValidationError, validate_presentation
from src.prompts.presentation import build_presentation_prompt
from src.schemas.llm_outputs import GenerationRequest, PresentationDocument
from src.utils.logging import log, get_logger

MODULE = "generation"
logger = get_logger()

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PresentationGenerator:
    """Turns narration text into a validated PresentationDocument."""

    def __init__(
        self,
        client: GeminiClient,
        config: Optional[GenerationConfig] = None,
        clock: Clock = utc_now,
    ):
        self.client = client
        self.config = config or GenerationConfig()
        self.clock = clock

    def build_request(
        self,
        source_text: str,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> GenerationRequest:
        """Check the caller's text and freeze it into a GenerationRequest.

        Raises:
            PipelineError: InvalidInput if the text is empty or too short
        """
        text = (source_text or "").strip()
        if len(text) < self.config.min_source_length:
            raise PipelineError(
                ErrorCategory.INVALID_INPUT,
                f"Source text is too short or empty ({len(text)} chars, "
                f"need at least {self.config.min_source_length})",
                layer="input",
            )
        return GenerationRequest(
            source_text=text,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )

    async def generate(
        self,
        source_text: str,
        *,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> PresentationDocument:
        """Generate a presentation from `source_text`.

        Raises:
            PipelineError: With the category of whichever stage failed
        """
        try:
            request = self.build_request(source_text, temperature, max_output_tokens)
        except PipelineError as e:
            log.warning(logger, MODULE, "generate_rejected", "Source text rejected",
                        category=e.category.value, source_length=len(source_text or ""))
            raise

        if not self.client.is_available():
            log.error(logger, MODULE, "generate_failed", "Gemini API key not configured",
                      category=ErrorCategory.AUTHENTICATION_FAILURE.value)
            raise PipelineError(
                ErrorCategory.AUTHENTICATION_FAILURE,
                "Gemini API key not configured",
                layer="configuration",
            )

        log.info(logger, MODULE, "generate_start", "Generating presentation",
                 source_length=len(request.source_text))

        try:
            raw = await self.client.generate_content(
                [text_part(build_presentation_prompt(request.source_text, self.config.min_sections))],
                policy=self.config.retry,
                timeout_ms=self.config.timeout_ms,
                temperature=(
                    request.temperature if request.temperature is not None
                    else self.config.temperature
                ),
                max_output_tokens=request.max_output_tokens or self.config.max_output_tokens,
                activity_name="generate_presentation",
            )
            candidate = extract_presentation(raw)
            document = validate_presentation(candidate, min_sections=self.config.min_sections)
        except (TransportError, ModelResponseError, JSONExtractionError, DocumentValidationError) as e:
            error = classify_error(e)
            log.error(logger, MODULE, "generate_failed", "Presentation generation failed",
                      error=str(e), error_type=type(e).__name__,
                      category=error.category.value, layer=error.layer)
            raise error from e
        except Exception as e:
            error = classify_error(e)
            log.error(logger, MODULE, "generate_failed", "Unexpected error during generation",
                      error=str(e), error_type=type(e).__name__,
                      category=error.category.value, layer=error.layer)
            raise error from e

        document = document.model_copy(update={"generated_at": self.clock()})
        log.info(logger, MODULE, "generate_done", "Presentation generated",
                 title=document.title[:80], sections=len(document.structure),
                 language=document.language)
        return document
