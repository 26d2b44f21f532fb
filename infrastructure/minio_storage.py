"""
MinIO Storage Service.
S3-compatible blob backend for self-hosted deployments and local development.

Every failure of the MinIO client (S3 errors as well as connection errors
raised by urllib3) leaves this module as StorageError.
"""

import asyncio
import io
from datetime import timedelta
from typing import Dict, List

from minio import Minio
from minio.deleteobjects import DeleteObject

from core.config import Settings
from core.exceptions import StorageError
from core.logging import get_logger
from infrastructure.blob_store import BlobStore

logger = get_logger(__name__)


class MinioBlobStore(BlobStore):
    """MinIO bucket holding gallery photos."""

    def __init__(self, settings: Settings, client: Minio = None):
        super().__init__(settings.photos_bucket)
        self.endpoint = settings.minio_endpoint
        self.client = client or Minio(
            endpoint=self.endpoint,
            access_key=settings.minio_access_key,
            secret_key=settings.minio_secret_key,
            secure=settings.minio_secure
        )

        logger.info(f"MinIO storage initialized: {self.endpoint}/{self.bucket}")

    async def ensure_bucket(self) -> None:
        try:
            exists = await asyncio.to_thread(self.client.bucket_exists, self.bucket)
            if not exists:
                await asyncio.to_thread(self.client.make_bucket, self.bucket)
                logger.info(f"Created bucket: {self.bucket}")
        except Exception as e:
            logger.error(f"MinIO bucket error: {e}")
            raise StorageError(f"Bucket setup failed: {e}", operation="ensure_bucket")

    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        """
        Upload object bytes.

        Args:
            key: Object name inside the bucket
            data: File bytes
            content_type: MIME type
        """
        try:
            await asyncio.to_thread(
                self.client.put_object,
                bucket_name=self.bucket,
                object_name=key,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type
            )
            logger.info(f"Uploaded to {self.bucket}: {key} ({len(data)} bytes)")
        except Exception as e:
            logger.error(f"MinIO upload error: {e}")
            raise StorageError("Failed to upload photo", operation="upload")

    async def remove(self, keys: List[str]) -> None:
        if not keys:
            return

        def _remove():
            # remove_objects is lazy: errors only surface while iterating
            errors = self.client.remove_objects(
                self.bucket, [DeleteObject(key) for key in keys]
            )
            return [f"{error.name}: {error.message}" for error in errors]

        try:
            failed = await asyncio.to_thread(_remove)
        except Exception as e:
            logger.error(f"MinIO remove error: {e}")
            raise StorageError(f"Failed to remove {len(keys)} objects: {e}", operation="remove")

        if failed:
            raise StorageError(
                f"Failed to remove {len(failed)} of {len(keys)} objects: {failed[0]}",
                operation="remove",
            )
        logger.info(f"Removed {len(keys)} objects from {self.bucket}")

    async def create_signed_urls(self, keys: List[str], expires_in: int) -> Dict[str, str]:
        urls = {}
        try:
            for key in keys:
                urls[key] = await asyncio.to_thread(
                    self.client.presigned_get_object,
                    self.bucket,
                    key,
                    expires=timedelta(seconds=expires_in)
                )
        except Exception as e:
            logger.error(f"MinIO presign error: {e}")
            raise StorageError("Failed to create signed URLs", operation="create_signed_urls")
        return urls

    async def list_keys(self, prefix: str = "") -> List[str]:
        def _list():
            return [
                obj.object_name
                for obj in self.client.list_objects(self.bucket, prefix=prefix or None, recursive=True)
            ]

        try:
            return sorted(await asyncio.to_thread(_list))
        except Exception as e:
            logger.error(f"MinIO list error: {e}")
            raise StorageError(f"Failed to list objects: {e}", operation="list")
