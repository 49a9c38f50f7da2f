"""
DevHub Backend — Blob Store
=============================

What:  Bucket/key object storage used for uploaded snippet files.
Why:   The storage adapter only needs put, read, delete, exists and
       time-limited signed URLs; the interface hides where bytes actually live.
How:   BlobStore is the contract. LocalBlobStore keeps objects on disk under
       <root>/<bucket>/<key>, writes with aiofiles so the event loop is never
       blocked, and signs download URLs with HMAC-SHA256.

Directory Structure:
    storage/
    └── devhub-storage/              ← bucket
        └── snippets/                ← folder chosen by the caller
            ├── 6f1c…-fib.py         ← object
            └── 6f1c…-fib.py.ctype   ← sidecar holding the content type

Signed URL format:
    {public_base_url}/api/files/{bucket}/{key}?expires={unix}&signature={hex}
    signature = HMAC-SHA256(secret, "{bucket}/{key}:{expires}")
"""

import hashlib
import hmac
import logging
import os
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import quote, urlencode

import aiofiles

from devhub.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

CONTENT_TYPE_SUFFIX = ".ctype"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class BlobStore(ABC):
    """Interface for bucket/key object storage."""

    @abstractmethod
    async def put(self, bucket: str, key: str, content: bytes, content_type: str) -> None:
        """Write `content` at bucket/key, replacing any existing object."""

    @abstractmethod
    async def read(self, bucket: str, key: str) -> Optional[Tuple[bytes, str]]:
        """Return (content, content_type), or None when the object does not exist."""

    @abstractmethod
    async def delete(self, bucket: str, key: str) -> bool:
        """Delete the object. Returns False when there was nothing to delete."""

    @abstractmethod
    async def exists(self, bucket: str, key: str) -> bool:
        """Whether an object exists at bucket/key."""

    @abstractmethod
    def sign_url(self, bucket: str, key: str, duration_minutes: int) -> str:
        """Issue a URL granting read access to bucket/key for `duration_minutes`."""

    def verify_signature(self, bucket: str, key: str, expires: int, signature: str) -> bool:
        """Check a signed URL's parameters. Stores without local signing accept nothing."""
        return False

    async def ping(self) -> None:
        """Cheap availability probe used by the health check."""


class LocalBlobStore(BlobStore):
    """
    Filesystem-backed blob store.

    Args:
        root: Directory holding one sub-directory per bucket.
        signing_secret: HMAC key for signed URLs.
        public_base_url: Scheme/host prefix for signed URLs.
    """

    def __init__(self, root: str, signing_secret: str, public_base_url: str):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self._secret = signing_secret.encode("utf-8")
        self._public_base_url = public_base_url.rstrip("/")
        logger.info("LocalBlobStore initialized with root=%s", self.root)

    def _path(self, bucket: str, key: str) -> Path:
        """
        Resolve bucket/key to a path, refusing anything outside the root.

        Raises ValueError on traversal attempts (e.g. `../../etc/passwd`) and
        on keys naming a content-type sidecar.
        """
        if key.endswith(CONTENT_TYPE_SUFFIX):
            raise ValueError(f"Object key is reserved for metadata: {bucket}/{key}")
        path = (self.root / bucket / key).resolve()
        if self.root not in path.parents:
            raise ValueError(f"Object path escapes storage root: {bucket}/{key}")
        return path

    @staticmethod
    def _ctype_path(path: Path) -> Path:
        return path.with_name(path.name + CONTENT_TYPE_SUFFIX)

    def _remove_partial(self, path: Path) -> None:
        for leftover in (path, self._ctype_path(path)):
            try:
                leftover.unlink(missing_ok=True)
            except OSError as e:
                logger.warning("Failed to clean up partial blob %s: %s", leftover.name, str(e))

    async def put(self, bucket: str, key: str, content: bytes, content_type: str) -> None:
        path = self._path(bucket, key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
            async with aiofiles.open(self._ctype_path(path), "w", encoding="utf-8") as f:
                await f.write(content_type or DEFAULT_CONTENT_TYPE)
        except OSError as e:
            logger.error("Failed to write blob %s/%s: %s", bucket, key, str(e))
            self._remove_partial(path)
            raise StoreUnavailableError(
                context={"store": "blobs", "operation": "put", "bucket": bucket, "key": key},
            ) from e

        logger.info("Blob stored: %s/%s (%d bytes, %s)", bucket, key, len(content), content_type)

    async def read(self, bucket: str, key: str) -> Optional[Tuple[bytes, str]]:
        path = self._path(bucket, key)
        if not path.is_file():
            return None
        try:
            async with aiofiles.open(path, "rb") as f:
                content = await f.read()
            ctype_path = self._ctype_path(path)
            content_type = DEFAULT_CONTENT_TYPE
            if ctype_path.is_file():
                async with aiofiles.open(ctype_path, "r", encoding="utf-8") as f:
                    content_type = (await f.read()).strip() or DEFAULT_CONTENT_TYPE
        except OSError as e:
            logger.error("Failed to read blob %s/%s: %s", bucket, key, str(e))
            raise StoreUnavailableError(
                context={"store": "blobs", "operation": "read", "bucket": bucket, "key": key},
            ) from e
        return content, content_type

    async def delete(self, bucket: str, key: str) -> bool:
        path = self._path(bucket, key)
        if not path.is_file():
            return False
        try:
            os.remove(path)
            ctype_path = self._ctype_path(path)
            if ctype_path.exists():
                os.remove(ctype_path)
        except OSError as e:
            logger.error("Failed to delete blob %s/%s: %s", bucket, key, str(e))
            raise StoreUnavailableError(
                context={"store": "blobs", "operation": "delete", "bucket": bucket, "key": key},
            ) from e
        return True

    async def exists(self, bucket: str, key: str) -> bool:
        return self._path(bucket, key).is_file()

    def _signature(self, bucket: str, key: str, expires: int) -> str:
        message = f"{bucket}/{key}:{expires}".encode("utf-8")
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    def sign_url(self, bucket: str, key: str, duration_minutes: int) -> str:
        expires = int(time.time()) + duration_minutes * 60
        query = urlencode({"expires": expires, "signature": self._signature(bucket, key, expires)})
        return f"{self._public_base_url}/api/files/{quote(bucket)}/{quote(key)}?{query}"

    def verify_signature(self, bucket: str, key: str, expires: int, signature: str) -> bool:
        if expires < int(time.time()):
            return False
        return hmac.compare_digest(self._signature(bucket, key, expires), signature)

    async def ping(self) -> None:
        if not os.access(self.root, os.W_OK):
            raise StoreUnavailableError(
                context={"store": "blobs", "operation": "ping", "root": str(self.root)},
            )
