"""
Learning note schema: a journal entry with its reference material.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_serializer, field_validator

from devhub.schemas.common import RecordModel, as_utc, empty_if_none, iso_utc


class LearningNote(RecordModel):
    title: Optional[str] = Field(default=None, description="Note title")
    content: Optional[str] = Field(default=None, description="Note body")
    tags: List[str] = Field(default_factory=list)
    date: Optional[datetime] = Field(default=None, description="When the learning happened")
    resources: List[str] = Field(default_factory=list, description="URLs or references")
    category: Optional[str] = Field(default=None, description="e.g. GCP, Kubernetes, Java")
    difficulty_level: Optional[int] = Field(default=None, description="1 (easy) to 5 (hard)")

    @field_validator("tags", "resources", mode="before")
    @classmethod
    def lists_never_null(cls, v):
        return empty_if_none(v)

    @field_validator("date")
    @classmethod
    def date_in_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @field_serializer("date", when_used="json")
    def serialize_date(self, v: Optional[datetime]) -> Optional[str]:
        return iso_utc(v)
