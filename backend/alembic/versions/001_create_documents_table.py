"""Create documents table

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the `documents` table holding every collection's records.
How:   Composite primary key (collection, id); record body in a JSONB column.

Rollback: downgrade() drops the table (all records are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "documents",
        sa.Column(
            "collection",
            sa.String(64),
            nullable=False,
            comment="Collection the document belongs to",
        ),
        sa.Column(
            "id",
            sa.String(64),
            nullable=False,
            comment="Store-assigned document id, unique within its collection",
        ),
        sa.Column(
            "data",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
            comment="Record fields as sent over the API",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("collection", "id", name="pk_documents"),
    )

    # List endpoints read one collection in insertion order
    op.create_index(
        "idx_documents_collection_created_at",
        "documents",
        ["collection", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("idx_documents_collection_created_at", table_name="documents")
    op.drop_table("documents")
