"""
DevHub Backend — Record Repositories
======================================

What:  Typed data access for the three collections (portfolio links, code
       snippets, learning notes).
Why:   Route handlers should deal in records, not in store documents,
       filters and sort fields.
How:   CollectionRepository holds the shared list/filter/get/create/update/delete
       logic; each subclass names its collection, record type, sort field and
       validation. The DocumentStore handle is passed into the constructor.

Contract (every collection):
    list()                          all records, collection's sort order
    filter_by_equality(f, v)        same order, only records with f == v
    filter_by_array_contains(f, v)  same order, only records whose list f holds v
    get_by_id(id)                   Found(record) | ABSENT
    create(record)                  validates, writes under a new id, returns the id
    update(id, record)              validates, full replace at id ("set", not patch)
    delete(id)                      idempotent

Concurrency:
    Every call is a single document read or write. There is no version check:
    two updates to the same id race and the last write wins, silently.
    Snippet updates keep whatever createdAt the caller sent (no re-fetch), so a
    client that omits it clears it.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Generic, List, Optional, Type, TypeVar

from devhub.schemas.common import RecordModel
from devhub.schemas.learning_note import LearningNote
from devhub.schemas.portfolio import PortfolioLink
from devhub.schemas.snippet import CodeSnippet
from devhub.services.lookup import ABSENT, Found, Lookup
from devhub.services.validation import (
    validate_learning_note,
    validate_portfolio_link,
    validate_snippet,
)
from devhub.stores.base import (
    ARRAY_CONTAINS,
    EQUALS,
    DocumentSnapshot,
    DocumentStore,
    FieldFilter,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=RecordModel)


class CollectionRepository(Generic[R]):
    """
    Shared repository behaviour for one collection.

    Subclasses set:
        collection:   store collection name
        record_type:  pydantic record model
        order_by:     stored (camelCase) field defining list order
        descending:   sort direction
        resource:     human-readable name for logs and 404 messages
        validator:    raises ValidationError for bad records
    """

    collection: str
    record_type: Type[R]
    order_by: str
    descending: bool = False
    resource: str = "record"
    validator: Optional[Callable[[Any], None]] = None

    def __init__(self, store: DocumentStore):
        self._store = store

    def _to_record(self, snapshot: DocumentSnapshot) -> R:
        return self.record_type.from_document(snapshot.id, snapshot.data)

    def _validate(self, record: R) -> None:
        if self.validator is not None:
            self.validator(record)

    def _prepare_create(self, record: R) -> R:
        """Hook: adjust a record before it is first written."""
        return record

    def _prepare_update(self, record: R) -> R:
        """Hook: adjust a record before it replaces a stored one."""
        return record

    async def _query(self, *filters: FieldFilter) -> List[R]:
        snapshots = await self._store.query(
            self.collection,
            filters=filters,
            order_by=self.order_by,
            descending=self.descending,
        )
        return [self._to_record(s) for s in snapshots]

    async def list(self) -> List[R]:
        logger.info("Fetching all %s records", self.resource)
        records = await self._query()
        logger.info("Retrieved %d %s records", len(records), self.resource)
        return records

    async def filter_by_equality(self, field: str, value: Any) -> List[R]:
        logger.info("Fetching %s records where %s == %r", self.resource, field, value)
        records = await self._query(FieldFilter(field, EQUALS, value))
        logger.info("Retrieved %d %s records for %s=%r", len(records), self.resource, field, value)
        return records

    async def filter_by_array_contains(self, field: str, value: Any) -> List[R]:
        logger.info("Fetching %s records where %s contains %r", self.resource, field, value)
        records = await self._query(FieldFilter(field, ARRAY_CONTAINS, value))
        logger.info("Retrieved %d %s records with %s containing %r", len(records), self.resource, field, value)
        return records

    async def get_by_id(self, record_id: str) -> Lookup[R]:
        logger.info("Fetching %s with ID: %s", self.resource, record_id)
        snapshot = await self._store.get(self.collection, record_id)
        if snapshot is None:
            logger.warning("%s not found: %s", self.resource, record_id)
            return ABSENT
        return Found(self._to_record(snapshot))

    async def create(self, record: R) -> str:
        self._validate(record)
        record = self._prepare_create(record)
        logger.info("Creating new %s: %s", self.resource, getattr(record, "title", ""))
        record_id = await self._store.add(self.collection, record.to_document())
        logger.info("Created %s with ID: %s", self.resource, record_id)
        return record_id

    async def update(self, record_id: str, record: R) -> R:
        """Full replace at `record_id`. Returns the record as stored."""
        self._validate(record)
        record = self._prepare_update(record)
        logger.info("Updating %s with ID: %s", self.resource, record_id)
        await self._store.set(self.collection, record_id, record.to_document())
        logger.info("Updated %s: %s", self.resource, record_id)
        return record.model_copy(update={"id": record_id})

    async def delete(self, record_id: str) -> None:
        logger.info("Deleting %s with ID: %s", self.resource, record_id)
        await self._store.delete(self.collection, record_id)
        logger.info("Deleted %s: %s", self.resource, record_id)


class PortfolioRepository(CollectionRepository[PortfolioLink]):
    collection = "portfolio"
    record_type = PortfolioLink
    order_by = "order"
    descending = False
    resource = "portfolio link"
    validator = staticmethod(validate_portfolio_link)

    async def by_category(self, category: str) -> List[PortfolioLink]:
        return await self.filter_by_equality("category", category)


class SnippetRepository(CollectionRepository[CodeSnippet]):
    collection = "snippets"
    record_type = CodeSnippet
    order_by = "createdAt"
    descending = True
    resource = "code snippet"
    validator = staticmethod(validate_snippet)

    def _prepare_create(self, record: CodeSnippet) -> CodeSnippet:
        now = datetime.now(timezone.utc)
        return record.model_copy(update={"created_at": now, "updated_at": now})

    def _prepare_update(self, record: CodeSnippet) -> CodeSnippet:
        return record.model_copy(update={"updated_at": datetime.now(timezone.utc)})

    async def public(self) -> List[CodeSnippet]:
        return await self.filter_by_equality("isPublic", True)

    async def by_language(self, language: str) -> List[CodeSnippet]:
        return await self.filter_by_equality("language", language)

    async def by_tag(self, tag: str) -> List[CodeSnippet]:
        return await self.filter_by_array_contains("tags", tag)


class LearningNoteRepository(CollectionRepository[LearningNote]):
    collection = "learningNotes"
    record_type = LearningNote
    order_by = "date"
    descending = True
    resource = "learning note"
    validator = staticmethod(validate_learning_note)

    async def by_category(self, category: str) -> List[LearningNote]:
        return await self.filter_by_equality("category", category)

    async def by_tag(self, tag: str) -> List[LearningNote]:
        return await self.filter_by_array_contains("tags", tag)
