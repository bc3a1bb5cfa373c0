"""Audio transcription endpoint."""

import time

from fastapi import APIRouter, Depends

from src.api.deps import get_transcriber
from src.pipeline.transcription import AudioTranscriber
from src.schemas import TranscriptionResponse, TranscriptionSubmit
from src.utils.logging import log, get_logger

MODULE = "transcriptions"
logger = get_logger()

router = APIRouter()


@router.post("/transcribe-audio", response_model=TranscriptionResponse, response_model_by_alias=True)
async def transcribe_audio(
    body: TranscriptionSubmit,
    transcriber: AudioTranscriber = Depends(get_transcriber),
):
    """Transcribe base64-encoded audio."""
    audio = body.audio_bytes()
    log.info(logger, MODULE, "request_start", "Transcription requested",
             audio_bytes=len(audio), mime_type=body.mime_type)

    t0 = time.monotonic()
    result = await transcriber.transcribe(audio, mime_type=body.mime_type)
    return TranscriptionResponse(
        text=result.text,
        processing_time=int((time.monotonic() - t0) * 1000),
    )
