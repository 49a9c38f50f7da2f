"""
DevHub Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the whole suite.
How:   Environment overrides are applied before anything from devhub is
       imported, so the module-level settings and app never point at a real
       database or storage directory.

Fixtures:
    ├── document_store: InMemoryDocumentStore (dict-backed DocumentStore)
    ├── blob_store:     LocalBlobStore rooted in tmp_path
    ├── app:            create_app() wired to the two fakes above
    ├── test_client:    HTTPX AsyncClient over ASGITransport
    └── failing_store:  DocumentStore whose every call raises StoreUnavailableError
"""

import os
import tempfile
import uuid
from copy import deepcopy
from typing import Any, Dict, List, Optional, Sequence

# Override settings BEFORE any devhub import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./devhub_test.db"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="devhub_test_")
os.environ["URL_SIGNING_SECRET"] = "test-signing-secret"
os.environ["PUBLIC_BASE_URL"] = "http://test"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from devhub.exceptions import StoreUnavailableError
from devhub.main import create_app
from devhub.stores.base import (
    DocumentSnapshot,
    DocumentStore,
    FieldFilter,
    apply_filters,
    sort_snapshots,
)
from devhub.stores.blob import LocalBlobStore

TEST_BUCKET = "devhub-storage"
TEST_SECRET = "test-signing-secret"


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed document store with the same query semantics as the SQL one."""

    def __init__(self):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self.collections.setdefault(name, {})

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        document_id = uuid.uuid4().hex
        self._collection(collection)[document_id] = deepcopy(data)
        return document_id

    async def set(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        self._collection(collection)[document_id] = deepcopy(data)

    async def get(self, collection: str, document_id: str) -> Optional[DocumentSnapshot]:
        data = self._collection(collection).get(document_id)
        if data is None:
            return None
        return DocumentSnapshot(id=document_id, data=deepcopy(data))

    async def delete(self, collection: str, document_id: str) -> None:
        self._collection(collection).pop(document_id, None)

    async def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[DocumentSnapshot]:
        snapshots = [
            DocumentSnapshot(id=doc_id, data=deepcopy(data))
            for doc_id, data in self._collection(collection).items()
        ]
        return sort_snapshots(apply_filters(snapshots, filters), order_by, descending)


class FailingDocumentStore(DocumentStore):
    """Every call fails the way an unreachable database does."""

    def _fail(self, operation: str):
        raise StoreUnavailableError(
            context={"store": "documents", "operation": operation, "error_type": "OperationalError"}
        )

    async def add(self, collection, data):
        self._fail("add")

    async def set(self, collection, document_id, data):
        self._fail("set")

    async def get(self, collection, document_id):
        self._fail("get")

    async def delete(self, collection, document_id):
        self._fail("delete")

    async def query(self, collection, filters=(), order_by=None, descending=False):
        self._fail("query")

    async def ping(self):
        self._fail("ping")


@pytest.fixture
def document_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def failing_store() -> FailingDocumentStore:
    return FailingDocumentStore()


@pytest.fixture
def blob_store(tmp_path) -> LocalBlobStore:
    return LocalBlobStore(
        root=str(tmp_path / "storage"),
        signing_secret=TEST_SECRET,
        public_base_url="http://test",
    )


@pytest.fixture
def app(document_store, blob_store):
    return create_app(document_store=document_store, blob_store=blob_store)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def failing_client(failing_store, blob_store):
    app = create_app(document_store=failing_store, blob_store=blob_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def fib_snippet() -> Dict[str, Any]:
    return {
        "title": "Fib",
        "code": "def f(n): ...",
        "language": "python",
        "tags": ["algo"],
        "isPublic": True,
    }
