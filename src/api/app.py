"""FastAPI application for Pitchcraft.

Logging: Uses structured JSON logging.
Set LOG_FORMAT=pretty for development-friendly output.
"""

from contextlib import asynccontextmanager

# Configure structured logging BEFORE importing anything else
from src.utils.logging import configure_logging, get_logger, log  # noqa: E402

configure_logging()

MODULE = "api"
logger = get_logger()

import httpx  # noqa: E402
from fastapi import FastAPI, Request  # noqa: E402
from fastapi.exceptions import RequestValidationError  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402

from src.api.errors import error_response  # noqa: E402
from src.api.routes.health import router as health_router  # noqa: E402
from src.api.routes.presentations import router as presentations_router  # noqa: E402
from src.api.routes.transcriptions import router as transcriptions_router  # noqa: E402
from src.config import GenerationConfig, TranscriptionConfig, get_settings  # noqa: E402
from src.llm.client import build_client  # noqa: E402
from src.llm.errors import ErrorCategory, PipelineError  # noqa: E402
from src.pipeline.generation import PresentationGenerator  # noqa: E402
from src.pipeline.transcription import AudioTranscriber  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown."""
    settings = get_settings()
    http = httpx.AsyncClient()
    client = build_client(
        http,
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
    )
    if not client.is_available():
        log.warning(logger, MODULE, "api_key_missing",
                    "GEMINI_API_KEY not set, model calls will be rejected")

    app.state.generator = PresentationGenerator(client, GenerationConfig.from_settings(settings))
    app.state.transcriber = AudioTranscriber(client, TranscriptionConfig.from_settings(settings))
    log.info(logger, MODULE, "startup_done", "Pipelines ready", model=client.model)

    yield

    await http.aclose()
    log.info(logger, MODULE, "shutdown", "Application shutdown complete")


app = FastAPI(
    title="Pitchcraft",
    description="Narration to presentation API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = errors[0].get("msg", "Invalid request body") if errors else "Invalid request body"
    log.warning(logger, MODULE, "request_invalid", "Request body rejected",
                path=request.url.path, detail=detail)
    return error_response(PipelineError(
        ErrorCategory.INVALID_INPUT, detail, layer="input",
        user_message=f"Invalid request: {detail}",
    ))


app.include_router(health_router)
app.include_router(presentations_router, tags=["presentations"])
app.include_router(transcriptions_router, tags=["transcriptions"])
