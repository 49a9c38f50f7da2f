"""
DevHub Backend — Storage Service (Blob Locators)
==================================================

What:  Upload, delete, existence checks and signed URLs for snippet files.
Why:   Records store one string per file, the locator `blob://bucket/key`;
       this service is the only code that builds or takes one apart.
How:   Wraps a BlobStore handle. Object keys are
       `folder/<uuid4>-<original filename>` so concurrent uploads never collide
       while the key still ends with a readable name.

Locator parsing:
    1. The locator must start with `blob://`
    2. The rest is split on the FIRST "/" into bucket and key
    3. Both parts must be non-empty; anything else is malformed

    delete() and exists() answer False for a malformed locator without touching
    the store, because a failed file cleanup must never fail the caller's larger
    operation. signed_url() uses the same parse but raises MalformedLocatorError,
    since there is no sensible URL to hand back.
"""

import logging
import uuid
from pathlib import PurePosixPath
from typing import Optional, Tuple

from devhub.exceptions import MalformedLocatorError, ValidationError
from devhub.stores.blob import DEFAULT_CONTENT_TYPE, BlobStore

logger = logging.getLogger(__name__)

LOCATOR_SCHEME = "blob://"


def build_locator(bucket: str, key: str) -> str:
    return f"{LOCATOR_SCHEME}{bucket}/{key}"


def parse_locator(locator: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Split a locator into (bucket, key).

    Returns None when the locator is malformed.
    """
    if not locator or not locator.startswith(LOCATOR_SCHEME):
        return None
    parts = locator[len(LOCATOR_SCHEME):].split("/", 1)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]


def object_key(folder: str, filename: str) -> str:
    """
    `folder/<uuid4>-<base filename>`.

    Only the base name of the client's filename is kept so it cannot add
    path segments to the key.
    """
    name = PurePosixPath(filename.replace("\\", "/")).name or "upload"
    folder = folder.strip("/")
    unique = f"{uuid.uuid4()}-{name}"
    return f"{folder}/{unique}" if folder else unique


class StorageService:
    """
    Blob operations addressed by locator.

    Args:
        blob_store: BlobStore client handle.
        bucket: Bucket every upload goes to.
    """

    def __init__(self, blob_store: BlobStore, bucket: str):
        self._blob_store = blob_store
        self.bucket = bucket

    @staticmethod
    def detect_content_type(content: bytes, declared: Optional[str]) -> str:
        """
        Keep a specific declared type; otherwise sniff the bytes with libmagic.
        Detection is best-effort: a libmagic failure falls back to the generic type.

        Browsers send `application/octet-stream` for most source files, which
        says nothing, so that counts as "not declared".
        """
        if declared and declared != DEFAULT_CONTENT_TYPE:
            return declared
        import magic

        try:
            return magic.from_buffer(content, mime=True) or DEFAULT_CONTENT_TYPE
        except magic.MagicException as e:
            logger.warning("Content type detection failed, storing as %s: %s", DEFAULT_CONTENT_TYPE, str(e))
            return DEFAULT_CONTENT_TYPE

    async def upload(
        self,
        content: bytes,
        content_type: Optional[str],
        folder: str,
        filename: str,
    ) -> str:
        """Store `content` under a fresh key and return its locator."""
        key = object_key(folder, filename)
        content_type = self.detect_content_type(content, content_type)
        logger.info("Uploading file %s to folder %s", filename, folder)

        try:
            await self._blob_store.put(self.bucket, key, content, content_type)
        except ValueError:
            raise ValidationError(
                message=f"File name '{filename}' cannot be stored",
                field="file",
                context={"key": key},
            )

        locator = build_locator(self.bucket, key)
        logger.info("File uploaded successfully: %s", locator)
        return locator

    async def delete(self, locator: str) -> bool:
        """Delete the blob. False for malformed locators and missing objects."""
        logger.info("Deleting file: %s", locator)
        parsed = parse_locator(locator)
        if parsed is None:
            logger.error("Invalid locator format: %s", locator)
            return False

        bucket, key = parsed
        try:
            deleted = await self._blob_store.delete(bucket, key)
        except ValueError:
            logger.error("Invalid locator key: %s", locator)
            return False

        if deleted:
            logger.info("File deleted successfully: %s", locator)
        else:
            logger.warning("File not found or already deleted: %s", locator)
        return deleted

    async def exists(self, locator: str) -> bool:
        parsed = parse_locator(locator)
        if parsed is None:
            return False
        bucket, key = parsed
        try:
            return await self._blob_store.exists(bucket, key)
        except ValueError:
            return False

    def signed_url(self, locator: str, duration_minutes: int) -> str:
        """
        Time-limited download URL for the blob.

        Raises:
            MalformedLocatorError: locator does not parse
        """
        logger.info("Generating signed URL for: %s", locator)
        parsed = parse_locator(locator)
        if parsed is None:
            raise MalformedLocatorError(locator=locator or "")

        bucket, key = parsed
        url = self._blob_store.sign_url(bucket, key, duration_minutes)
        logger.info("Signed URL generated successfully")
        return url
