"""
DevHub Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the two store client handles (or takes the ones it
       is given), keeps them on app.state, registers middleware, exception
       handlers and routers, and returns the app.
Who:   uvicorn (`uvicorn devhub.main:app`) and the test suite.

Application Architecture:
    ┌───────────────────────────────────────────────────────┐
    │                     FastAPI App                       │
    │                                                       │
    │  Middleware: Request ID → Access Log → GZip → CORS    │
    │                                                       │
    │  Routes:                                              │
    │   /api/portfolio   /api/snippets   /api/learning-notes│
    │   /api/files/{bucket}/{key}        /health            │
    │                                                       │
    │  app.state:                                           │
    │   document_store (SqlDocumentStore)                   │
    │   blob_store     (LocalBlobStore)                     │
    │   storage_bucket                                      │
    └───────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   configure logging, check production settings, log the address
    Shutdown:  dispose the document store's connection pool
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from devhub import __version__
from devhub.config import settings
from devhub.database import create_engine_from_settings, create_session_factory
from devhub.exceptions import (
    AccessDeniedError,
    DevHubError,
    MalformedLocatorError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from devhub.middleware.logging import RequestLoggingMiddleware
from devhub.middleware.request_id import RequestIDMiddleware, request_id_var
from devhub.routes import files, health, learning_notes, portfolio, snippets
from devhub.stores.base import DocumentStore
from devhub.stores.blob import BlobStore, LocalBlobStore
from devhub.stores.sql import SqlDocumentStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the whole application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("DevHub Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving; the warning is repeated on every restart until fixed
        logger.error("Configuration error: %s", str(e))

    logger.info("Blob bucket: %s", app.state.storage_bucket)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("DevHub Backend shutting down...")
    dispose = getattr(app.state.document_store, "dispose", None)
    if dispose is not None:
        await dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def _error_body(error: str, message: str, request: Request, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": _request_id(request)}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and the shared error body.

        ValidationError, RequestValidationError,
        MalformedLocatorError          → 400
        AccessDeniedError              → 403
        NotFoundError                  → 404
        StoreUnavailableError          → 500 (generic message, context logged)
        DevHubError / Exception        → 500

    Store internals (driver errors, file paths, SQL) never reach the client.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", _request_id(request), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, request, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())),
                "message": error.get("msg", ""),
            }
            for error in exc.errors()
        ]
        logger.warning("[%s] Malformed request: %s", _request_id(request), errors)
        return JSONResponse(
            status_code=400,
            content=_error_body(
                "validation_error",
                "The request is malformed",
                request,
                {"errors": errors},
            ),
        )

    @app.exception_handler(MalformedLocatorError)
    async def handle_malformed_locator(request: Request, exc: MalformedLocatorError):
        logger.warning("[%s] Malformed locator: %s", _request_id(request), exc.locator)
        return JSONResponse(
            status_code=400,
            content=_error_body("malformed_locator", exc.message, request),
        )

    @app.exception_handler(AccessDeniedError)
    async def handle_access_denied(request: Request, exc: AccessDeniedError):
        return JSONResponse(
            status_code=403,
            content=_error_body("access_denied", exc.message, request),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message, request),
        )

    @app.exception_handler(StoreUnavailableError)
    async def handle_store_unavailable(request: Request, exc: StoreUnavailableError):
        logger.error(
            "[%s] Store unavailable: %s | Context: %s",
            _request_id(request),
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error",
                "An internal error occurred. Please try again later.",
                request,
            ),
        )

    @app.exception_handler(DevHubError)
    async def handle_devhub_error(request: Request, exc: DevHubError):
        logger.error("[%s] %s | Context: %s", _request_id(request), exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message, request),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            _request_id(request),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
                request,
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def build_document_store() -> SqlDocumentStore:
    engine = create_engine_from_settings()
    return SqlDocumentStore(create_session_factory(engine), engine=engine)


def build_blob_store() -> LocalBlobStore:
    return LocalBlobStore(
        root=settings.storage_root,
        signing_secret=settings.url_signing_secret,
        public_base_url=settings.public_base_url,
    )


def create_app(
    document_store: Optional[DocumentStore] = None,
    blob_store: Optional[BlobStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        document_store: Document store handle; built from settings when omitted.
        blob_store: Blob store handle; built from settings when omitted.
    """
    app = FastAPI(
        title="DevHub API",
        description=(
            "Backend for a personal developer portfolio: portfolio links, code "
            "snippets with optional source files, and learning notes."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.document_store = document_store if document_store is not None else build_document_store()
    app.state.blob_store = blob_store if blob_store is not None else build_blob_store()
    app.state.storage_bucket = settings.storage_bucket

    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(portfolio.router)
    app.include_router(snippets.router)
    app.include_router(learning_notes.router)
    app.include_router(files.router)
    app.include_router(health.router)

    return app


app = create_app()
