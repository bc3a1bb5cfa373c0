"""Pydantic schemas for model outputs.

These schemas define the EXACT structure accepted from each model call.
Model output is parsed into a generic dict first (see llm/parser.py) and
only becomes one of these types after llm/validators.py has checked it.

All models are frozen: once the pipeline hands a document back, nothing
downstream mutates it.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# PRESENTATION
# =============================================================================

class Section(BaseModel):
    """One heading + body pair of a presentation."""

    model_config = ConfigDict(frozen=True)

    section: str = Field(..., min_length=1, description="Section heading")
    content: str = Field(..., min_length=1, description="Section body")


class PresentationDocument(BaseModel):
    """A validated presentation.

    `one_liner` travels as `oneLiner` on the wire, matching what the model is
    asked to produce.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(..., min_length=1)
    one_liner: str = Field(..., min_length=1, alias="oneLiner")
    language: Optional[str] = Field(None, description="Detected language code, e.g. 'en'")
    structure: list[Section] = Field(..., min_length=1)
    generated_at: Optional[datetime] = Field(None, alias="generatedAt")


# =============================================================================
# TRANSCRIPTION
# =============================================================================

class TranscriptionResult(BaseModel):
    """Text recognised in an audio clip. Never empty."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1)


# =============================================================================
# REQUESTS
# =============================================================================

class GenerationRequest(BaseModel):
    """Immutable input to one generation call."""

    model_config = ConfigDict(frozen=True)

    source_text: str
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_output_tokens: Optional[int] = Field(None, gt=0)
