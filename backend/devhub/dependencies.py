"""
DevHub Backend — Route Dependencies
=====================================

What:  FastAPI dependencies that hand route handlers their repositories and
       the storage service.
Why:   Store clients are created once by create_app() and kept on app.state;
       handlers receive objects built from those handles instead of importing
       module-level singletons.
How:   Each dependency reads the handle from `request.app.state` and wraps it.
       Repositories and StorageService are stateless, so building one per
       request costs nothing.
"""

from fastapi import Request

from devhub.services.repository import (
    LearningNoteRepository,
    PortfolioRepository,
    SnippetRepository,
)
from devhub.services.storage_service import StorageService
from devhub.stores.base import DocumentStore
from devhub.stores.blob import BlobStore


def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def get_portfolio_repository(request: Request) -> PortfolioRepository:
    return PortfolioRepository(get_document_store(request))


def get_snippet_repository(request: Request) -> SnippetRepository:
    return SnippetRepository(get_document_store(request))


def get_learning_note_repository(request: Request) -> LearningNoteRepository:
    return LearningNoteRepository(get_document_store(request))


def get_storage_service(request: Request) -> StorageService:
    return StorageService(get_blob_store(request), request.app.state.storage_bucket)
