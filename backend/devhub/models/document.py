"""
DevHub Backend — Stored Document SQLAlchemy Model
===================================================

What:  ORM model for the `documents` table that backs every collection.
Why:   The repositories speak "collection + document id + JSON fields";
       one generic table keeps that contract without a table per entity.
How:   Composite primary key (collection, id); the record body lives in a
       JSON column exactly as the API sends it (camelCase keys).

Table Design Rationale:
    - collection: "portfolio", "snippets", "learningNotes"
    - id: store-assigned (uuid4 hex), unique within its collection
    - data: the record fields; JSONB on PostgreSQL, JSON elsewhere
    - created_at / updated_at: row bookkeeping, never exposed through the API
"""

from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import JSON, DateTime, String, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from devhub.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoredDocument(Base):
    """One document of one collection."""

    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="Collection the document belongs to",
    )

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="Store-assigned document id, unique within its collection",
    )

    data: Mapped[Dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
        comment="Record fields as sent over the API",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<StoredDocument(collection='{self.collection}', id='{self.id}')>"
