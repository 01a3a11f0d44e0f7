"""
Blob store client for a storage REST API.

Objects are written with ``POST {base}/storage/v1/object/{bucket}/{key}``
and the ``x-upsert`` header so a second upload to the same key replaces the
first. Public URLs follow ``{base}/storage/v1/object/public/{bucket}/{key}``.
"""

import asyncio
import logging
from typing import Optional
from urllib.parse import quote

import aiohttp

from ...domain.errors import UploadError
from ...domain.repositories.blob_store import BlobStore
from ..data.config import StorageConfig

logger = logging.getLogger(__name__)


class BucketNotFound(UploadError):
    default_message = "Bucket not found"


class HttpBlobStore(BlobStore):
    """aiohttp client for the hosted object store"""

    def __init__(self, config: StorageConfig, session: Optional[aiohttp.ClientSession] = None):
        self.config = config
        self.session = session
        self._owns_session = session is None

    async def initialize(self):
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout)
            )
            self._owns_session = True
        logger.info(f"Blob store client initialized for {self.config.url}")

    async def close(self):
        if self.session and self._owns_session:
            await self.session.close()
            self.session = None
            logger.info("Blob store client closed")

    def public_url(self, key: str, bucket: Optional[str] = None) -> str:
        bucket = bucket or self.config.bucket
        return f"{self.config.url}/storage/v1/object/public/{bucket}/{quote(key)}"

    async def upload(self, key: str, data: bytes, content_type: str,
                     bucket: Optional[str] = None) -> str:
        """Upload to the configured bucket, falling back once when it is missing"""
        bucket = bucket or self.config.bucket

        try:
            await self._put_object(bucket, key, data, content_type)
        except BucketNotFound:
            fallback = self.config.fallback_bucket
            if not fallback or fallback == bucket:
                raise
            logger.warning(f"Bucket {bucket} not found, uploading {key} to {fallback}")
            bucket = fallback
            await self._put_object(bucket, key, data, content_type)

        url = self.public_url(key, bucket)
        logger.info(f"Uploaded {len(data)} bytes to {bucket}/{key}")
        return url

    async def _put_object(self, bucket: str, key: str, data: bytes, content_type: str):
        if self.session is None:
            await self.initialize()

        upload_url = f"{self.config.url}/storage/v1/object/{bucket}/{quote(key)}"
        headers = {
            "Content-Type": content_type,
            "x-upsert": "true",
        }
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
            headers["apikey"] = self.config.api_key

        try:
            async with self.session.post(upload_url, data=data, headers=headers) as response:
                if response.status in (200, 201):
                    return

                error_text = await response.text()
                if "Bucket not found" in error_text:
                    raise BucketNotFound(f"Upload failed: Bucket not found ({bucket})")
                raise UploadError(f"Upload failed: {response.status} {error_text[:200]}")

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Upload of {bucket}/{key} failed: {e}")
            raise UploadError(f"Upload failed: {e}") from e

    async def health_check(self) -> bool:
        if self.session is None:
            return False
        try:
            async with self.session.get(f"{self.config.url}/storage/v1/bucket") as response:
                return response.status < 500
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Blob store health check failed: {e}")
            return False
