"""
Code snippet schema.

`createdAt` / `updatedAt` are stamped by the repository; any values a client
sends on create are overwritten. `blobLocator` is set when the snippet was
created through the upload endpoint and points at the original file.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_serializer, field_validator

from devhub.schemas.common import RecordModel, as_utc, empty_if_none, iso_utc


class CodeSnippet(RecordModel):
    title: Optional[str] = Field(default=None, description="Snippet title")
    code: Optional[str] = Field(default=None, description="Source code")
    language: Optional[str] = Field(default=None, description="e.g. python, java, javascript")
    tags: List[str] = Field(default_factory=list, description="Ordered tags")
    created_at: Optional[datetime] = Field(default=None, description="Server-set creation time (UTC)")
    updated_at: Optional[datetime] = Field(default=None, description="Server-set modification time (UTC)")
    category: Optional[str] = Field(default=None, description="e.g. algorithms, utilities, patterns")
    blob_locator: Optional[str] = Field(default=None, description="blob://bucket/key of the uploaded file")
    is_public: bool = Field(default=False, description="Shown on the public portfolio")
    description: Optional[str] = None
    author: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def tags_never_null(cls, v):
        return empty_if_none(v)

    @field_validator("is_public", mode="before")
    @classmethod
    def is_public_defaults_false(cls, v):
        return False if v is None else v

    @field_validator("created_at", "updated_at")
    @classmethod
    def timestamps_in_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        # Stored as ISO strings; one offset keeps them ordered as text
        return as_utc(v)

    @field_serializer("created_at", "updated_at", when_used="json")
    def serialize_timestamp(self, v: Optional[datetime]) -> Optional[str]:
        return iso_utc(v)
