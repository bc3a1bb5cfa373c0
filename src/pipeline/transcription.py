"""Audio transcription pipeline.

Same transport machinery as generation, with a shorter timeout. The model
is told to answer with the bare transcript, or with NO_SPEECH_SENTINEL when
it cannot make anything out. Both the sentinel and an empty answer become a
ValidationFailure: an empty transcript is never returned, so callers cannot
mistake a failed call for silence.
"""

from typing import Optional

from src.config import TranscriptionConfig
from src.llm.client import (
    EmptyResponseError,
    GeminiClient,
    ModelResponseError,
    audio_part,
    text_part,
)
from src.llm.errors import ErrorCategory, PipelineError, classify_error
from src.llm.invoker import TransportError
from src.prompts.presentation import NO_SPEECH_SENTINEL, TRANSCRIPTION_INSTRUCTION
from src.schemas.llm_outputs import TranscriptionResult
from src.utils.logging import log, get_logger

MODULE = "transcription"
logger = get_logger()


class AudioTranscriber:
    """Turns recorded audio into text."""

    def __init__(self, client: GeminiClient, config: Optional[TranscriptionConfig] = None):
        self.client = client
        self.config = config or TranscriptionConfig()

    async def transcribe(self, audio: bytes, *, mime_type: str = "audio/wav") -> TranscriptionResult:
        """Transcribe `audio`.

        Raises:
            PipelineError: InvalidInput for empty audio, ValidationFailure when
                no speech was recognised, or the category of the failed stage
        """
        if not audio:
            log.warning(logger, MODULE, "transcribe_rejected", "No audio data provided")
            raise PipelineError(ErrorCategory.INVALID_INPUT, "No audio data provided",
                                layer="input", user_message="No audio data provided.")

        if not self.client.is_available():
            log.error(logger, MODULE, "transcribe_failed", "Gemini API key not configured",
                      category=ErrorCategory.AUTHENTICATION_FAILURE.value)
            raise PipelineError(
                ErrorCategory.AUTHENTICATION_FAILURE,
                "Gemini API key not configured",
                layer="configuration",
            )

        log.info(logger, MODULE, "transcribe_start", "Transcribing audio",
                 audio_bytes=len(audio), mime_type=mime_type)

        try:
            raw = await self.client.generate_content(
                [text_part(TRANSCRIPTION_INSTRUCTION), audio_part(audio, mime_type)],
                policy=self.config.retry,
                timeout_ms=self.config.timeout_ms,
                temperature=0.0,
                max_output_tokens=self.config.max_output_tokens,
                top_k=10,
                activity_name="transcribe_audio",
            )
        except EmptyResponseError as e:
            # A blank candidate is the model saying nothing, same as the sentinel
            raise self._unclear(str(e)) from e
        except (TransportError, ModelResponseError) as e:
            raise self._failed(e) from e
        except Exception as e:
            raise self._failed(e, unexpected=True) from e

        text = raw.strip()
        if not text or text == NO_SPEECH_SENTINEL:
            raise self._unclear("Model reported no intelligible speech" if text else "Empty transcript")

        log.info(logger, MODULE, "transcribe_done", "Transcription successful",
                 text_length=len(text))
        return TranscriptionResult(text=text)

    def _unclear(self, reason: str) -> PipelineError:
        log.warning(logger, MODULE, "transcribe_failed", "Audio unclear or empty",
                    reason=reason, category=ErrorCategory.VALIDATION_FAILURE.value)
        return PipelineError(
            ErrorCategory.VALIDATION_FAILURE,
            f"Audio transcription failed - content unclear or empty ({reason})",
            layer="validator",
            user_message="Audio unclear or empty. Please record again, speaking clearly.",
        )

    def _failed(self, exc: Exception, unexpected: bool = False) -> PipelineError:
        error = classify_error(exc)
        msg = "Unexpected error during transcription" if unexpected else "Audio transcription failed"
        log.error(logger, MODULE, "transcribe_failed", msg,
                  error=str(exc), error_type=type(exc).__name__,
                  category=error.category.value, layer=error.layer)
        return error
