"""
Portfolio Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract between frontend and backend.
How:   Request schemas (ProjectCreate / ProjectUpdate) are built by the
       Validator only after every rule passed; response schemas serialize ORM
       rows with camelCase aliases (githubUrl, coverImage, createdAt, ...).
Who:   Routes (response_model), ProjectService (typed input).

Schemas are separate from SQLAlchemy models so the API contract can differ
from the table layout (e.g. `github_url` column vs `githubUrl` JSON key).
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ══════════════════════════════════════════════════════════════════════════
# Request Models — populated only after validation succeeds
# ══════════════════════════════════════════════════════════════════════════


class ProjectCreate(BaseModel):
    """
    What:  Validated, normalized payload for a new project.
    Who:   Built by Validator.validate_create(); consumed by ProjectService.

    Defaults mirror the stored defaults, so every field of the record is
    decided here and nothing is left to the database.
    """
    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=2, max_length=120)
    description: str = Field(min_length=10, max_length=3000)
    tech: List[str] = Field(default_factory=list)
    github_url: str = ""
    demo_url: str = ""
    featured: bool = False
    order: int = 0


class ProjectUpdate(BaseModel):
    """
    What:  Partial update payload.
    How:   Only fields present AND well-typed in the request are set;
           `model_fields_set` tells the service which columns to overwrite.
    """
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(default=None, min_length=2, max_length=120)
    description: Optional[str] = Field(default=None, min_length=10, max_length=3000)
    tech: Optional[List[str]] = None
    github_url: Optional[str] = None
    demo_url: Optional[str] = None
    featured: Optional[bool] = None
    order: Optional[int] = None

    def changes(self) -> dict:
        """Return only the fields the caller actually sent."""
        return self.model_dump(include=self.model_fields_set)


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class ProjectResponse(BaseModel):
    """
    What:  Full representation of a stored project.
    Who:   Returned by every /api/projects endpoint except DELETE.

    Example:
        {
            "id": "8f2c...",
            "title": "Portfolio",
            "description": "Personal site with a small admin API",
            "tech": ["FastAPI", "PostgreSQL"],
            "githubUrl": "https://github.com/me/portfolio",
            "demoUrl": "",
            "featured": true,
            "order": 0,
            "coverImage": "data:image/png;base64,iVBORw0KGgo...",
            "createdAt": "2026-10-18T09:30:00Z",
            "updatedAt": "2026-10-18T09:30:00Z"
        }
    """
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: uuid.UUID = Field(description="Unique project identifier (UUID)")
    title: str
    description: str
    tech: List[str] = Field(default_factory=list)
    github_url: str = ""
    demo_url: str = ""
    featured: bool = False
    order: int = 0
    cover_image: Optional[str] = Field(
        default=None,
        description="Embedded cover image (data:<mime>;base64,<payload>) or null",
    )
    created_at: datetime = Field(description="Creation timestamp (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last update timestamp (UTC ISO 8601)")


class DeleteResponse(BaseModel):
    """Confirmation returned by DELETE /api/projects/{id}."""
    ok: bool = True
    id: str


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models — Consistent error format across all endpoints
# ══════════════════════════════════════════════════════════════════════════


class FieldError(BaseModel):
    """One violated rule: which field, and what is wrong with it."""
    field: str
    message: str


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description for display to users
        errors: Every violated field rule (400 responses only)
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    errors: Optional[List[FieldError]] = Field(default=None, description="Field violations")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
