"""
Store clients: the document database and the blob store the services sit on.
"""

from devhub.stores.base import (
    ARRAY_CONTAINS,
    EQUALS,
    DocumentSnapshot,
    DocumentStore,
    FieldFilter,
)
from devhub.stores.blob import BlobStore, LocalBlobStore
from devhub.stores.sql import SqlDocumentStore

__all__ = [
    "ARRAY_CONTAINS",
    "EQUALS",
    "DocumentSnapshot",
    "DocumentStore",
    "FieldFilter",
    "BlobStore",
    "LocalBlobStore",
    "SqlDocumentStore",
]
