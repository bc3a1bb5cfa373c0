"""Pydantic schemas for structured data validation.

This package contains:
- api.py: Request/response schemas for the REST API
- llm_outputs.py: Schemas for validated model outputs

Model output only becomes one of these types after passing the validator
gate in src/llm/validators.py.
"""

from src.schemas.llm_outputs import (
    # Pipeline outputs
    Section,
    PresentationDocument,
    TranscriptionResult,
    # Pipeline inputs
    GenerationRequest,
)

from src.schemas.api import (
    PresentationSubmit,
    PresentationResponse,
    TranscriptionSubmit,
    TranscriptionResponse,
    ErrorResponse,
)

__all__ = [
    # Model outputs
    "Section",
    "PresentationDocument",
    "TranscriptionResult",
    "GenerationRequest",
    # API
    "PresentationSubmit",
    "PresentationResponse",
    "TranscriptionSubmit",
    "TranscriptionResponse",
    "ErrorResponse",
]
