"""
NeuroNotes Backend: Note Request/Response Schemas
===================================================

What:  Pydantic models defining the notes API contract.
How:   FastAPI uses these models to validate request bodies, serialize
       responses, and generate the OpenAPI document. The headless client in
       `neuronotes.client` reuses NoteResponse as its local note type.

Schemas are separate from the SQLAlchemy model so the API contract can
evolve independently of the table.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from neuronotes.tags import normalize_tags


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """Full representation of a note, as returned by every notes endpoint."""

    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    user_id: uuid.UUID = Field(description="Owner of the note")
    title: str = Field(description="Note title")
    content: str = Field(default="", description="Markdown body")
    tags: List[str] = Field(default_factory=list, description="Lowercase, unique tags")
    favorite: bool = Field(default=False, description="Favorite flag")
    created_at: datetime = Field(description="Creation timestamp (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last modification timestamp (UTC ISO 8601)")

    model_config = {"from_attributes": True}


class NoteListResponse(BaseModel):
    """All notes of the current user, newest first."""

    notes: List[NoteResponse] = Field(description="Notes ordered by created_at DESC")
    total_count: int = Field(description="Number of notes returned")


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /api/notes. Every field is optional: the dashboard's
    "New Note" action sends an empty body and gets the defaults.
    """

    title: Optional[str] = Field(default=None, max_length=500)
    content: str = Field(default="")
    tags: List[str] = Field(default_factory=list)
    favorite: bool = Field(default=False)

    model_config = {"extra": "forbid"}

    @field_validator("tags")
    @classmethod
    def normalize(cls, v: List[str]) -> List[str]:
        return normalize_tags(v)


class NoteUpdate(BaseModel):
    """
    Body of PATCH /api/notes/{id}: a partial patch.

    Only fields present in the body are applied. Explicit nulls are
    rejected; the columns are NOT NULL.
    """

    title: Optional[str] = Field(default=None, max_length=500)
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    favorite: Optional[bool] = None

    model_config = {"extra": "forbid"}

    @field_validator("tags")
    @classmethod
    def normalize(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return None if v is None else normalize_tags(v)

    @model_validator(mode="after")
    def reject_nulls(self) -> "NoteUpdate":
        nulls = [name for name in self.model_fields_set if getattr(self, name) is None]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(sorted(nulls))}")
        return self

    def changes(self) -> Dict[str, Any]:
        """The fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error format for the notes API.

    Example:
        {
            "error": "not_found",
            "message": "note with ID '...' was not found",
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""

    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    ai_gateway: str = Field(description="AI gateway: configured, not_configured")
    uptime_seconds: float = Field(description="Seconds since service started")
