"""
NoteAssist Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract between frontend and backend.
How:   FastAPI uses these models to validate request bodies, serialize responses,
       and generate the OpenAPI documentation.

Wire format is camelCase (ownerId, updatedAt, fixedContent) to match the
editor frontend; Python code uses the snake_case field names. FastAPI
serializes responses by alias, and requests accept either spelling.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from noteassist.models.note import TITLE_MAX_LENGTH


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Note Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(CamelModel):
    """
    Body of POST /notes.

    Only title is required. The owner is never part of the body; it comes
    from the identity header.
    """
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH, description="Note title (1-200 chars)")
    content: str = Field(default="", description="Rich-text content")
    tags: List[str] = Field(default_factory=list, description="Ordered tag list")


class NoteUpdate(CamelModel):
    """
    Body of PATCH /notes/{id}.

    Any subset of fields may be sent. Omitted fields keep their stored
    values; an empty body only refreshes updatedAt. A field may be omitted
    but not sent as null.
    """
    title: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    content: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("title", "content", "tags", mode="before")
    @classmethod
    def reject_null(cls, v):
        # Defaults are not validated, so this only sees explicit nulls
        if v is None:
            raise ValueError("must not be null; omit the field to keep its value")
        return v

    def changes(self) -> dict:
        """Fields the client actually supplied."""
        return self.model_dump(exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════════
# Note Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(CamelModel):
    """Full representation of a stored note."""
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    owner_id: str = Field(description="Identity of the note's owner")
    title: str
    content: str
    tags: List[str]
    created_at: datetime = Field(description="When the note was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last modification time (UTC ISO 8601)")


class NoteEnvelope(BaseModel):
    """Single-note wrapper returned by get, create and update."""
    note: NoteResponse


class NoteListResponse(BaseModel):
    """All of the caller's notes, oldest-updated first. Not paginated."""
    notes: List[NoteResponse]


class MessageResponse(BaseModel):
    message: str


# ══════════════════════════════════════════════════════════════════════════
# AI Assist Models
# ══════════════════════════════════════════════════════════════════════════


class SummarizeRequest(CamelModel):
    content: str = Field(min_length=1, description="Text to summarize")


class SummarizeResponse(CamelModel):
    summary: str


class FixGrammarRequest(CamelModel):
    content: str = Field(min_length=1, description="Text to correct")


class Correction(CamelModel):
    """One change the model made, with its explanation."""
    original: str
    corrected: str
    reason: str = ""


class FixGrammarResponse(CamelModel):
    fixed_content: str
    corrections: List[Correction] = Field(default_factory=list)


class AutoTagRequest(CamelModel):
    """
    Body of POST /notes/ai/auto-tag.

    Either field may be empty, but not both (checked by AssistService).
    """
    title: str = ""
    content: str = ""


class AutoTagResponse(CamelModel):
    tags: List[str] = Field(default_factory=list)


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Request body failed validation",
            "details": {"fields": [{"field": "title", "message": "..."}]},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    ai_provider: str = Field(description="AI provider status: available, unavailable, not_configured")
    uptime_seconds: float = Field(description="Seconds since service started")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        valid = {"healthy", "degraded", "unhealthy"}
        if v not in valid:
            raise ValueError(f"Invalid status '{v}'. Must be one of: {valid}")
        return v
