"""
DevHub Backend — Application Package Initializer
==================================================

What: Marks the `devhub` directory as a Python package.
Why:  Enables module imports like `from devhub.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is a thin data-access layer over a document store and a blob store:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP verbs → one repository call
    ├─────────────────────────────────────┤
    │  Services (Repositories, Storage)   │  ← validation, ordering, locators
    ├─────────────────────────────────────┤
    │            Schemas (Data)           │  ← Pydantic records (camelCase on the wire)
    ├─────────────────────────────────────┤
    │   Stores (Document DB, Blob Store)  │  ← SQLAlchemy documents table, local blobs
    └─────────────────────────────────────┘

    Store clients are built once by the application factory and handed to the
    repositories explicitly; nothing below the routes reads global state.
"""

__version__ = "1.0.0"
