"""PipelineError → HTTP response mapping."""

from datetime import datetime, timezone

from fastapi.responses import JSONResponse

from src.llm.errors import ErrorCategory, PipelineError
from src.schemas.api import ErrorResponse

STATUS_CODES: dict[ErrorCategory, int] = {
    ErrorCategory.INVALID_INPUT: 400,
    ErrorCategory.VALIDATION_FAILURE: 422,
    ErrorCategory.QUOTA_EXCEEDED: 429,
    ErrorCategory.TIMEOUT: 504,
    ErrorCategory.AUTHENTICATION_FAILURE: 502,
    ErrorCategory.NETWORK_FAILURE: 502,
    ErrorCategory.MALFORMED_RESPONSE: 502,
    ErrorCategory.UPSTREAM_SERVER_ERROR: 502,
}


def error_response(exc: PipelineError) -> JSONResponse:
    body = ErrorResponse(
        error=exc.user_message,
        category=exc.category.value,
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(
        status_code=STATUS_CODES[exc.category],
        content=body.model_dump(mode="json"),
    )
