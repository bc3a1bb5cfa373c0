"""Pydantic schemas for API requests/responses.

Field names follow the camelCase the web client already speaks
(`oneLiner`, `generatedAt`, `processingTime`).
"""

import base64
import binascii
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.schemas.llm_outputs import PresentationDocument, Section


class PresentationSubmit(BaseModel):
    """Request body for generating a presentation."""
    transcript: str = Field(..., description="Narration text to turn into a presentation")
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_output_tokens: Optional[int] = Field(None, gt=0, alias="maxOutputTokens")

    model_config = ConfigDict(populate_by_name=True)


class PresentationResponse(BaseModel):
    """Successful generation."""
    title: str
    one_liner: str = Field(..., alias="oneLiner")
    language: Optional[str] = None
    structure: list[Section]
    success: bool = True
    generated_at: datetime = Field(..., alias="generatedAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_document(cls, document: PresentationDocument) -> "PresentationResponse":
        return cls(
            title=document.title,
            one_liner=document.one_liner,
            language=document.language,
            structure=list(document.structure),
            generated_at=document.generated_at,
        )


class TranscriptionSubmit(BaseModel):
    """Request body for transcribing audio. `audio` is base64-encoded."""
    audio: str = Field(..., description="Base64-encoded audio bytes")
    mime_type: str = Field("audio/wav", alias="mimeType")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("audio")
    @classmethod
    def audio_is_base64(cls, v: str) -> str:
        try:
            base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("audio must be base64-encoded")
        return v

    def audio_bytes(self) -> bytes:
        return base64.b64decode(self.audio)


class TranscriptionResponse(BaseModel):
    """Successful transcription."""
    text: str
    success: bool = True
    processing_time: int = Field(..., alias="processingTime", description="Milliseconds spent")

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    """Any pipeline failure."""
    error: str
    category: str
    success: bool = False
    timestamp: datetime
