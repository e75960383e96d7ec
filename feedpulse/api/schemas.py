"""Pydantic request/response schemas for the feedpulse API.

Request schemas end with "Request", response schemas end with "Response".
Stored records are returned as :class:`FeedbackRecord` directly, so the
JSON shape of a record is defined in exactly one place.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from feedpulse.models.feedback import FeedbackRecord, Sentiment


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""

    error: str
    message: str | None = None


class CreateFeedbackRequest(BaseModel):
    """A single feedback entry posted by a client.

    ``text`` is optional here so a missing field produces the API's own
    400 error instead of FastAPI's generic validation error.
    """

    text: str | None = None
    sentiment: Sentiment | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class FeedbackListResponse(BaseModel):
    """All stored feedback, oldest first."""

    data: list[FeedbackRecord] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    deleted: int


class IngestTextRequest(BaseModel):
    """Newline-separated feedback rows pasted by a user."""

    text: str = ""


class ClearDataResponse(BaseModel):
    success: bool
    message: str


class HealthResponse(BaseModel):
    """Service and storage status."""

    status: str
    version: str
    store: str
    degraded: bool = False
    records: int = 0
