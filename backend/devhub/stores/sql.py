"""
DevHub Backend — SQL Document Store
=====================================

What:  DocumentStore implementation on async SQLAlchemy.
Why:   Gives the repositories document-database semantics on top of the
       PostgreSQL instance the deployment already runs.
How:   Every collection lives in the `documents` table (see models/document.py).
       Each operation opens its own session and transaction, so one call is one
       unit of work. Equality filters are pushed into SQL through typed JSON
       accessors; array-contains and ordering are applied to the loaded rows
       with the helpers from stores/base.py.

Error handling:
    Any SQLAlchemyError is logged with the collection/operation and re-raised
    as StoreUnavailableError. Nothing is retried.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from devhub.exceptions import StoreUnavailableError
from devhub.models.document import StoredDocument
from devhub.stores.base import (
    EQUALS,
    DocumentSnapshot,
    DocumentStore,
    FieldFilter,
    apply_filters,
    sort_snapshots,
)

logger = logging.getLogger(__name__)


def _json_equals(column, name: str, value: Any):
    """
    Build `data[name] == value` with the accessor matching the value's type.

    bool is checked before int because bool subclasses int.
    """
    element = column[name]
    if isinstance(value, bool):
        return element.as_boolean() == value
    if isinstance(value, int):
        return element.as_integer() == value
    if isinstance(value, float):
        return element.as_float() == value
    if isinstance(value, str):
        return element.as_string() == value
    raise ValueError(f"Cannot filter on '{name}' with a value of type {type(value).__name__}")


class SqlDocumentStore(DocumentStore):
    """
    Document store over one SQL table.

    Args:
        session_factory: async_sessionmaker bound to the application engine.
        engine: the same engine, kept for ping() and dispose().
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: Optional[AsyncEngine] = None,
    ):
        self._session_factory = session_factory
        self._engine = engine

    def _failure(self, operation: str, collection: str, exc: Exception, **context) -> StoreUnavailableError:
        logger.error(
            "Document store %s failed on '%s': %s",
            operation,
            collection,
            str(exc),
        )
        return StoreUnavailableError(
            context={
                "store": "documents",
                "operation": operation,
                "collection": collection,
                "error_type": type(exc).__name__,
                **context,
            },
        )

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        document_id = uuid.uuid4().hex
        try:
            async with self._session_factory() as session, session.begin():
                session.add(
                    StoredDocument(collection=collection, id=document_id, data=dict(data))
                )
        except SQLAlchemyError as e:
            raise self._failure("add", collection, e) from e
        return document_id

    async def set(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        try:
            async with self._session_factory() as session, session.begin():
                row = await session.get(StoredDocument, (collection, document_id))
                if row is None:
                    session.add(
                        StoredDocument(collection=collection, id=document_id, data=dict(data))
                    )
                else:
                    # Reassign (not mutate) so the JSON column is flagged dirty
                    row.data = dict(data)
        except SQLAlchemyError as e:
            raise self._failure("set", collection, e, document_id=document_id) from e

    async def get(self, collection: str, document_id: str) -> Optional[DocumentSnapshot]:
        try:
            async with self._session_factory() as session:
                row = await session.get(StoredDocument, (collection, document_id))
        except SQLAlchemyError as e:
            raise self._failure("get", collection, e, document_id=document_id) from e

        if row is None:
            return None
        return DocumentSnapshot(id=row.id, data=dict(row.data or {}))

    async def delete(self, collection: str, document_id: str) -> None:
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    delete(StoredDocument).where(
                        StoredDocument.collection == collection,
                        StoredDocument.id == document_id,
                    )
                )
        except SQLAlchemyError as e:
            raise self._failure("delete", collection, e, document_id=document_id) from e

    async def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[DocumentSnapshot]:
        stmt = select(StoredDocument).where(StoredDocument.collection == collection)
        remaining: List[FieldFilter] = []
        for f in filters:
            if f.op == EQUALS:
                stmt = stmt.where(_json_equals(StoredDocument.data, f.field, f.value))
            else:
                remaining.append(f)
        # Insertion order keeps ties stable across calls
        stmt = stmt.order_by(StoredDocument.created_at, StoredDocument.id)

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise self._failure("query", collection, e) from e

        snapshots = [DocumentSnapshot(id=row.id, data=dict(row.data or {})) for row in rows]
        return sort_snapshots(apply_filters(snapshots, remaining), order_by, descending)

    async def ping(self) -> None:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise self._failure("ping", "-", e) from e

    async def create_tables(self) -> None:
        """Create the documents table directly (tests and throwaway databases)."""
        if self._engine is None:
            raise RuntimeError("create_tables() needs the engine")
        async with self._engine.begin() as conn:
            await conn.run_sync(StoredDocument.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
