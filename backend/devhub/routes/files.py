"""
DevHub Backend — Signed File Download Route
=============================================

What:  Serves blob objects to holders of a valid signed URL.
How:   The URL issued by GET /api/snippets/{id}/file-url points here. The
       signature and expiry are checked first; only then is the object read.

    Bad or expired signature  → 403
    Object missing            → 404
    Otherwise                 → the stored bytes with their stored content type
"""

import logging

from fastapi import APIRouter, Depends, Query, Response

from devhub.dependencies import get_blob_store
from devhub.exceptions import AccessDeniedError, NotFoundError
from devhub.schemas.common import ErrorResponse
from devhub.stores.blob import BlobStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/files", tags=["Files"])


@router.get(
    "/{bucket}/{key:path}",
    responses={
        403: {"description": "Invalid or expired link", "model": ErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
    },
    summary="Download a file through a signed URL",
)
async def download_file(
    bucket: str,
    key: str,
    expires: int = Query(..., description="Unix timestamp after which the link is dead"),
    signature: str = Query(..., description="Hex HMAC-SHA256 of bucket/key:expires"),
    blob_store: BlobStore = Depends(get_blob_store),
) -> Response:
    if not blob_store.verify_signature(bucket, key, expires, signature):
        logger.warning("Rejected file request with invalid signature: %s/%s", bucket, key)
        raise AccessDeniedError(context={"bucket": bucket, "key": key})

    try:
        stored = await blob_store.read(bucket, key)
    except ValueError:
        stored = None

    if stored is None:
        raise NotFoundError(resource="file", resource_id=f"{bucket}/{key}")

    content, content_type = stored
    return Response(content=content, media_type=content_type)
