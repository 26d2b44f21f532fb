"""
Blob storage for photo/video payloads.

Objects live in one private bucket under
    <adminId>/<galleryId>/<timestamp>-<random>.<ext>
and are read through time-limited signed URLs.

Implementations:
- SupabaseBlobStore - Supabase Storage
- MinioBlobStore - S3-compatible MinIO (infrastructure/minio_storage.py)
- InMemoryBlobStore - process-local dict (local dev and tests)
"""

import asyncio
import secrets
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from core.exceptions import StorageError
from core.logging import get_logger

logger = get_logger(__name__)


class BlobStore(ABC):
    """Storage contract used by the gallery service."""

    def __init__(self, bucket: str):
        self.bucket = bucket

    @abstractmethod
    async def ensure_bucket(self) -> None:
        """Create the private bucket if it does not exist."""

    @abstractmethod
    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        ...

    @abstractmethod
    async def remove(self, keys: List[str]) -> None:
        """Remove many objects in one call. Raises StorageError if any removal failed."""

    @abstractmethod
    async def create_signed_urls(self, keys: List[str], expires_in: int) -> Dict[str, str]:
        """Map each key to a signed read URL valid for expires_in seconds."""

    @abstractmethod
    async def list_keys(self, prefix: str = "") -> List[str]:
        """Every object key under prefix (recursive)."""


class SupabaseBlobStore(BlobStore):
    """
    Supabase Storage bucket.

    storage3 is synchronous; every call runs in a worker thread.
    """

    list_page_size = 1000

    def __init__(self, supabase_client, bucket: str):
        super().__init__(bucket)
        self.client = supabase_client

    @property
    def objects(self):
        return self.client.bucket(self.bucket)

    async def ensure_bucket(self) -> None:
        try:
            buckets = await asyncio.to_thread(self.client.storage.list_buckets)
            if any(b.name == self.bucket for b in buckets or []):
                return
            await asyncio.to_thread(
                self.client.storage.create_bucket, self.bucket, options={"public": False}
            )
            logger.info(f"Created bucket: {self.bucket}")
        except Exception as e:
            logger.error(f"Bucket setup failed for {self.bucket}: {e}")
            raise StorageError(f"Bucket setup failed: {e}", operation="ensure_bucket")

    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        try:
            await asyncio.to_thread(
                self.objects.upload, key, data, {"content-type": content_type}
            )
            logger.info(f"Uploaded to {self.bucket}: {key} ({len(data)} bytes)")
        except Exception as e:
            logger.error(f"Storage upload error for {key}: {e}")
            raise StorageError("Failed to upload photo", operation="upload")

    async def remove(self, keys: List[str]) -> None:
        if not keys:
            return
        try:
            await asyncio.to_thread(self.objects.remove, list(keys))
            logger.info(f"Removed {len(keys)} objects from {self.bucket}")
        except Exception as e:
            raise StorageError(f"Failed to remove {len(keys)} objects: {e}", operation="remove")

    async def create_signed_urls(self, keys: List[str], expires_in: int) -> Dict[str, str]:
        if not keys:
            return {}
        try:
            items = await asyncio.to_thread(self.objects.create_signed_urls, list(keys), expires_in)
        except Exception as e:
            logger.error(f"Signed URL error: {e}")
            raise StorageError("Failed to create signed URLs", operation="create_signed_urls")

        urls = {}
        for item in items or []:
            # storage3 has used both spellings across releases
            url = item.get("signedURL") or item.get("signedUrl")
            if item.get("error") or not url:
                raise StorageError(
                    f"Failed to sign {item.get('path')}: {item.get('error')}",
                    operation="create_signed_urls",
                )
            urls[item["path"]] = url

        missing = [key for key in keys if key not in urls]
        if missing:
            raise StorageError(f"No signed URL for {missing[0]}", operation="create_signed_urls")
        return urls

    async def list_keys(self, prefix: str = "") -> List[str]:
        """Walk folders depth-first; folder entries have no id."""
        keys = []
        pending = [prefix.strip("/")]

        while pending:
            folder = pending.pop()
            offset = 0
            while True:
                try:
                    entries = await asyncio.to_thread(
                        self.objects.list,
                        folder,
                        {"limit": self.list_page_size, "offset": offset},
                    )
                except Exception as e:
                    raise StorageError(f"Failed to list {folder or '/'}: {e}", operation="list")

                for entry in entries or []:
                    path = f"{folder}/{entry['name']}" if folder else entry["name"]
                    if entry.get("id") is None:
                        pending.append(path)
                    else:
                        keys.append(path)

                if len(entries or []) < self.list_page_size:
                    break
                offset += self.list_page_size

        return sorted(keys)


class InMemoryBlobStore(BlobStore):
    """Dict-backed bucket. Signed URLs are opaque memory:// links."""

    def __init__(self, bucket: str = "gallery-photos"):
        super().__init__(bucket)
        self.objects: Dict[str, Tuple[bytes, str]] = {}
        self.bucket_created = False

    def reset(self) -> None:
        self.objects.clear()

    async def ensure_bucket(self) -> None:
        self.bucket_created = True

    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        if key in self.objects:
            raise StorageError("Failed to upload photo: object exists", operation="upload")
        self.objects[key] = (bytes(data), content_type)

    async def remove(self, keys: List[str]) -> None:
        for key in keys:
            self.objects.pop(key, None)

    async def create_signed_urls(self, keys: List[str], expires_in: int) -> Dict[str, str]:
        expires_at = int(time.time()) + expires_in
        urls = {}
        for key in keys:
            if key not in self.objects:
                raise StorageError(f"Object not found: {key}", operation="create_signed_urls")
            urls[key] = f"memory://{self.bucket}/{key}?expires={expires_at}&token={secrets.token_urlsafe(16)}"
        return urls

    async def list_keys(self, prefix: str = "") -> List[str]:
        return sorted(key for key in self.objects if key.startswith(prefix))

    def read(self, key: str) -> Optional[bytes]:
        entry = self.objects.get(key)
        return entry[0] if entry else None
