"""
Point-lookup results.

A lookup either finds a record (`Found`) or finds nothing (`ABSENT`).
Store failures are not a lookup result: they raise StoreUnavailableError,
so "not there" and "could not ask" never share a code path.

    result = await repo.get_by_id(link_id)
    if isinstance(result, Found):
        return result.record
    raise NotFoundError(resource="portfolio link", resource_id=link_id)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    record: T


class _Absent:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()

Lookup = Union[Found[T], _Absent]
