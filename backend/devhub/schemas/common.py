"""
DevHub Backend — Shared Pydantic Schemas
==========================================

What:  Base record model plus the response shapes shared by every route.
Why:   All three collections speak camelCase on the wire and in the store,
       while Python code uses snake_case attributes.
How:   `RecordModel` sets a camelCase alias generator; FastAPI serializes
       response models by alias, and `to_document()` produces the stored form.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise to an aware UTC datetime; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def iso_utc(value: Optional[datetime]) -> Optional[str]:
    """
    Fixed-width ISO 8601 in UTC, microseconds always present.

    Stored timestamps are compared as strings, so every one must have the
    same shape.
    """
    if value is None:
        return None
    return as_utc(value).isoformat(timespec="microseconds")


def empty_if_none(value: Optional[List[str]]) -> List[str]:
    return [] if value is None else value


class RecordModel(BaseModel):
    """
    Base for stored records.

    `id` is assigned by the store. It is accepted on input only so clients can
    send back what they read; the repositories never write it into the body.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: Optional[str] = Field(default=None, description="Store-assigned identifier")

    def to_document(self) -> Dict[str, Any]:
        """Stored form: camelCase keys, JSON-safe values, no id."""
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})

    @classmethod
    def from_document(cls, document_id: str, data: Dict[str, Any]):
        return cls.model_validate({**data, "id": document_id})


class CreatedResponse(BaseModel):
    """Body of every 201 response: the new record's id."""

    id: str = Field(description="Identifier assigned by the document store")


class SignedUrlResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    url: str = Field(description="Time-limited download URL")
    expires_in_minutes: int = Field(description="Minutes until the URL stops working")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "title is required",
            "details": {"field": "title"},
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Document store: connected, disconnected")
    storage: str = Field(description="Blob store: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
