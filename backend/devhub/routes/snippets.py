"""
DevHub Backend — Code Snippet Route Handlers
==============================================

What:  CRUD, filters, file upload and signed file URLs under /api/snippets.
How:   Most handlers are one SnippetRepository call. Two handlers touch both
       stores:

    POST /api/snippets/upload
        1. Validate form fields and file (before any store call)
        2. Upload the file to the blob store          → locator
        3. Create the snippet with code = file text and blobLocator = locator
       Steps 2 and 3 are not atomic. If step 3 fails the blob stays behind;
       the orphaned locator is logged so it can be cleaned up by hand.

    DELETE /api/snippets/{id}
        1. Look the snippet up
        2. If it owns a blob, delete the blob (failure is logged, not fatal)
        3. Delete the record
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile

from devhub.config import settings
from devhub.dependencies import get_snippet_repository, get_storage_service
from devhub.exceptions import NotFoundError, StoreUnavailableError, ValidationError
from devhub.schemas.common import CreatedResponse, ErrorResponse, SignedUrlResponse
from devhub.schemas.snippet import CodeSnippet
from devhub.services.lookup import Found
from devhub.services.repository import SnippetRepository
from devhub.services.storage_service import StorageService
from devhub.services.validation import validate_snippet

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/snippets", tags=["Snippets"])

ERROR_RESPONSES = {
    400: {"description": "Invalid record or upload", "model": ErrorResponse},
    500: {"description": "Store unavailable", "model": ErrorResponse},
}


@router.get("", response_model=List[CodeSnippet], summary="List snippets, newest first")
async def list_snippets(
    repo: SnippetRepository = Depends(get_snippet_repository),
) -> List[CodeSnippet]:
    return await repo.list()


@router.get("/public", response_model=List[CodeSnippet], summary="List public snippets")
async def list_public_snippets(
    repo: SnippetRepository = Depends(get_snippet_repository),
) -> List[CodeSnippet]:
    return await repo.public()


@router.get(
    "/language/{language}",
    response_model=List[CodeSnippet],
    summary="List snippets in one language",
)
async def list_snippets_by_language(
    language: str,
    repo: SnippetRepository = Depends(get_snippet_repository),
) -> List[CodeSnippet]:
    return await repo.by_language(language)


@router.get("/tag/{tag}", response_model=List[CodeSnippet], summary="List snippets with a tag")
async def list_snippets_by_tag(
    tag: str,
    repo: SnippetRepository = Depends(get_snippet_repository),
) -> List[CodeSnippet]:
    return await repo.by_tag(tag)


@router.get(
    "/{snippet_id}",
    response_model=CodeSnippet,
    responses={404: {"description": "Snippet not found", "model": ErrorResponse}},
    summary="Get a snippet",
)
async def get_snippet(
    snippet_id: str,
    repo: SnippetRepository = Depends(get_snippet_repository),
) -> CodeSnippet:
    result = await repo.get_by_id(snippet_id)
    if isinstance(result, Found):
        return result.record
    raise NotFoundError(resource="code snippet", resource_id=snippet_id)


@router.post(
    "",
    status_code=201,
    response_model=CreatedResponse,
    responses=ERROR_RESPONSES,
    summary="Create a snippet",
)
async def create_snippet(
    snippet: CodeSnippet,
    repo: SnippetRepository = Depends(get_snippet_repository),
) -> CreatedResponse:
    return CreatedResponse(id=await repo.create(snippet))


def _decode_upload(content: bytes, content_length: Optional[int]) -> str:
    """Size and encoding checks for an uploaded source file."""
    max_mb = settings.max_file_size / (1024 * 1024)

    if not content:
        raise ValidationError(message="The uploaded file is empty", field="file")

    if (content_length and content_length > settings.max_file_size) or len(content) > settings.max_file_size:
        raise ValidationError(
            message=f"File size exceeds maximum of {max_mb:.0f}MB.",
            field="file",
            context={"max_size_mb": max_mb, "actual_size": len(content)},
        )

    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        raise ValidationError(
            message="The uploaded file must be UTF-8 encoded text",
            field="file",
        )


@router.post(
    "/upload",
    status_code=201,
    response_model=CreatedResponse,
    responses=ERROR_RESPONSES,
    summary="Create a snippet from an uploaded source file",
    description=(
        "Stores the file in blob storage, copies its text into `code`, and keeps "
        "the file's locator in `blobLocator`."
    ),
)
async def upload_snippet(
    file: UploadFile = File(..., description="Source file"),
    title: Optional[str] = Form(None),
    language: Optional[str] = Form(None),
    tags: Optional[List[str]] = Form(None),
    category: Optional[str] = Form(None),
    is_public: bool = Form(False, alias="isPublic"),
    description: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    repo: SnippetRepository = Depends(get_snippet_repository),
    storage: StorageService = Depends(get_storage_service),
) -> CreatedResponse:
    try:
        content = await file.read()
    finally:
        await file.close()

    filename = file.filename or "snippet.txt"
    logger.info("Received snippet upload: filename=%s, size=%d bytes", filename, len(content))

    snippet = CodeSnippet(
        title=title,
        code=_decode_upload(content, file.size),
        language=language,
        tags=tags or [],
        category=category,
        is_public=is_public,
        description=description,
        author=author,
    )
    validate_snippet(snippet)

    locator = await storage.upload(content, file.content_type, settings.upload_folder, filename)
    snippet = snippet.model_copy(update={"blob_locator": locator})

    try:
        snippet_id = await repo.create(snippet)
    except StoreUnavailableError:
        logger.error("Snippet create failed after upload; orphaned blob: %s", locator)
        raise

    return CreatedResponse(id=snippet_id)


@router.get(
    "/{snippet_id}/file-url",
    response_model=SignedUrlResponse,
    responses={
        400: {"description": "Stored locator is malformed", "model": ErrorResponse},
        404: {"description": "Snippet not found or has no file", "model": ErrorResponse},
    },
    summary="Issue a time-limited download URL for a snippet's file",
)
async def get_snippet_file_url(
    snippet_id: str,
    minutes: int = Query(
        default=settings.signed_url_default_minutes,
        ge=1,
        le=10_080,
        description="How long the URL stays valid (max 7 days)",
    ),
    repo: SnippetRepository = Depends(get_snippet_repository),
    storage: StorageService = Depends(get_storage_service),
) -> SignedUrlResponse:
    result = await repo.get_by_id(snippet_id)
    if not isinstance(result, Found):
        raise NotFoundError(resource="code snippet", resource_id=snippet_id)
    if not result.record.blob_locator:
        raise NotFoundError(resource="snippet file", resource_id=snippet_id)

    url = storage.signed_url(result.record.blob_locator, minutes)
    return SignedUrlResponse(url=url, expires_in_minutes=minutes)


@router.put(
    "/{snippet_id}",
    response_model=CodeSnippet,
    responses=ERROR_RESPONSES,
    summary="Replace a snippet",
    description=(
        "Full replace: fields missing from the body are cleared; updatedAt is re-stamped. "
        "Omitting blobLocator detaches the uploaded file, which then stays in blob storage; "
        "send back the value read from GET to keep it."
    ),
)
async def update_snippet(
    snippet_id: str,
    snippet: CodeSnippet,
    repo: SnippetRepository = Depends(get_snippet_repository),
) -> CodeSnippet:
    return await repo.update(snippet_id, snippet)


@router.delete("/{snippet_id}", status_code=204, summary="Delete a snippet and its file")
async def delete_snippet(
    snippet_id: str,
    repo: SnippetRepository = Depends(get_snippet_repository),
    storage: StorageService = Depends(get_storage_service),
) -> Response:
    result = await repo.get_by_id(snippet_id)
    if isinstance(result, Found) and result.record.blob_locator:
        try:
            await storage.delete(result.record.blob_locator)
        except StoreUnavailableError:
            logger.warning(
                "Could not delete file %s of snippet %s; deleting the record anyway",
                result.record.blob_locator,
                snippet_id,
            )

    await repo.delete(snippet_id)
    return Response(status_code=204)
