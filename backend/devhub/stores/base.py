"""
DevHub Backend — Document Store Interface
===========================================

What:  Abstract contract for the document database the repositories talk to.
Why:   Repositories only need "collection + id" addressing, auto-id add, upsert,
       point get, delete and a filtered/ordered query. Keeping that behind an
       interface lets the SQL implementation, or an in-memory one in tests,
       sit underneath without the repositories noticing.
How:   Concrete stores subclass DocumentStore. Every method is one round trip;
       failures surface as StoreUnavailableError.

Query semantics shared by all implementations:
    - filters are ANDed
    - "==" compares the stored value with the filter value
    - "array_contains" requires a list-valued field containing the value
    - ordering is by a single field; documents missing that field sort last
      in both directions; ties keep store order
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

EQUALS = "=="
ARRAY_CONTAINS = "array_contains"


@dataclass(frozen=True)
class FieldFilter:
    """A single `field <op> value` condition."""

    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in (EQUALS, ARRAY_CONTAINS):
            raise ValueError(f"Unsupported filter operator '{self.op}'")

    def matches(self, data: Dict[str, Any]) -> bool:
        current = data.get(self.field)
        if self.op == EQUALS:
            return current == self.value
        return isinstance(current, list) and self.value in current


@dataclass
class DocumentSnapshot:
    """A document as read from the store: its id plus a copy of its fields."""

    id: str
    data: Dict[str, Any] = field(default_factory=dict)


def apply_filters(
    snapshots: Iterable[DocumentSnapshot], filters: Sequence[FieldFilter]
) -> List[DocumentSnapshot]:
    return [s for s in snapshots if all(f.matches(s.data) for f in filters)]


def sort_snapshots(
    snapshots: Iterable[DocumentSnapshot],
    order_by: Optional[str],
    descending: bool = False,
) -> List[DocumentSnapshot]:
    """Stable sort on one field, missing values last."""
    items = list(snapshots)
    if not order_by:
        return items

    present = [s for s in items if s.data.get(order_by) is not None]
    missing = [s for s in items if s.data.get(order_by) is None]
    present.sort(key=lambda s: s.data[order_by], reverse=descending)
    return present + missing


class DocumentStore(ABC):
    """
    Contract for a collection/document database.

    Implementations:
        - SqlDocumentStore: one SQLAlchemy table holding every collection
        - InMemoryDocumentStore (tests/conftest.py): dict-backed fake
    """

    @abstractmethod
    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Insert a new document under a store-assigned id and return the id."""

    @abstractmethod
    async def set(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        """Write `data` as the whole document at `document_id`, creating it if absent."""

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> Optional[DocumentSnapshot]:
        """Return the document, or None when no document has that id."""

    @abstractmethod
    async def delete(self, collection: str, document_id: str) -> None:
        """Remove the document. Deleting a missing id is not an error."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[DocumentSnapshot]:
        """Return matching documents ordered by `order_by`."""

    async def ping(self) -> None:
        """Cheap connectivity probe used by the health check."""
