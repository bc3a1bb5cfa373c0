"""Request-scoped access to the pipelines built in the app lifespan."""

from fastapi import Request

from src.pipeline.generation import PresentationGenerator
from src.pipeline.transcription import AudioTranscriber


def get_generator(request: Request) -> PresentationGenerator:
    return request.app.state.generator


def get_transcriber(request: Request) -> AudioTranscriber:
    return request.app.state.transcriber
