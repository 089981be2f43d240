"""Object Storage — local filesystem and S3-compatible backends behind one interface.

Invariants:
    - Every backend writes under an opaque key (see core/storage_rules.generate_key)
    - Only cloud backends can presign uploads; only the local backend serves reads
    - Local paths are resolved under the configured root and never escape it
    - Backend failures surface as StorageError (core/errors.py)

Design Decisions:
    - ABC + FileInfo dataclass: backends differ in capabilities, so the base class
      supplies the "not offered" defaults and each backend overrides what it supports
    - boto3 is synchronous: calls run in asyncio.to_thread to keep the event loop free
    - R2/B2 are S3 with a custom endpoint (signature v4)
"""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import aiofiles
import aiofiles.os
import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from cresp.config import Settings, get_settings
from cresp.core.domain_types import StorageProvider
from cresp.core.errors import StorageError, StorageUnavailableError
from cresp.core.storage_rules import public_url, safe_relative_path

logger = logging.getLogger(__name__)


@dataclass
class FileInfo:
    """Information about a stored object."""

    key: str
    url: str
    size_bytes: int
    content_type: str


class ObjectStorage(ABC):
    """Abstract base class for storage backends."""

    provider: StorageProvider

    def __init__(self, base_url: str):
        self.base_url = base_url

    @abstractmethod
    async def write(self, key: str, content: bytes, content_type: str) -> FileInfo:
        """Store content under key and return where it can be fetched."""
        ...

    async def presigned_upload_url(
        self, key: str, content_type: str, expires_in: int,
    ) -> str:
        raise StorageUnavailableError(
            "Presigned uploads are only available for cloud storage",
        )

    async def read(self, key: str) -> bytes:
        raise StorageUnavailableError("Local file serving is disabled")

    def url_for(self, key: str) -> str:
        return public_url(self.base_url, key)

    @property
    def is_local(self) -> bool:
        return self.provider == StorageProvider.LOCAL


class LocalStorage(ObjectStorage):
    """Filesystem backend for development. Files land under root/<key>."""

    provider = StorageProvider.LOCAL

    def __init__(self, root: str | Path, base_url: str):
        super().__init__(base_url)
        self.root = Path(root).resolve()

    def _resolve(self, key: str) -> Path:
        relative = safe_relative_path(key)
        if relative is None:
            raise FileNotFoundError(key)
        full = (self.root / relative).resolve()
        if self.root != full and self.root not in full.parents:
            raise FileNotFoundError(key)
        return full

    async def write(self, key: str, content: bytes, content_type: str) -> FileInfo:
        try:
            full = self._resolve(key)
            await aiofiles.os.makedirs(full.parent, exist_ok=True)
            async with aiofiles.open(full, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error(f"Local write failed for {key}: {e}")
            raise StorageError(str(e), "write")
        logger.info(f"File saved locally: {key}")
        return FileInfo(key=key, url=self.url_for(key), size_bytes=len(content), content_type=content_type)

    async def read(self, key: str) -> bytes:
        """Raises FileNotFoundError for missing files and unsafe paths."""
        full = self._resolve(key)
        if not await aiofiles.os.path.isfile(full):
            raise FileNotFoundError(key)
        async with aiofiles.open(full, "rb") as f:
            return await f.read()


class S3Storage(ObjectStorage):
    """S3-compatible backend (AWS S3, Cloudflare R2, Backblaze B2)."""

    def __init__(
        self,
        provider: StorageProvider,
        bucket: str,
        base_url: str,
        region: str = "auto",
        access_key: str | None = None,
        secret_key: str | None = None,
        endpoint_url: str | None = None,
    ):
        super().__init__(base_url)
        self.provider = provider
        self.bucket = bucket

        client_kwargs = {
            "service_name": "s3",
            "region_name": region,
            "config": Config(signature_version="s3v4"),
        }
        if endpoint_url:
            client_kwargs["endpoint_url"] = endpoint_url
        if access_key and secret_key:
            client_kwargs["aws_access_key_id"] = access_key
            client_kwargs["aws_secret_access_key"] = secret_key

        self.client = boto3.client(**client_kwargs)
        logger.info(
            f"S3 storage initialized (bucket={bucket}, endpoint={endpoint_url})",
            extra={"provider": provider.value},
        )

    async def write(self, key: str, content: bytes, content_type: str) -> FileInfo:
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket, Key=key, Body=content, ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 put_object failed for {key}: {e}")
            raise StorageError(str(e), "write")
        return FileInfo(key=key, url=self.url_for(key), size_bytes=len(content), content_type=content_type)

    async def presigned_upload_url(
        self, key: str, content_type: str, expires_in: int,
    ) -> str:
        try:
            return await asyncio.to_thread(
                self.client.generate_presigned_url,
                "put_object",
                Params={"Bucket": self.bucket, "Key": key, "ContentType": content_type},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Presign failed for {key}: {e}")
            raise StorageError(str(e), "presign")


def build_storage(settings: Settings) -> ObjectStorage:
    provider = StorageProvider(settings.storage_provider)
    if provider == StorageProvider.LOCAL:
        return LocalStorage(settings.storage_local_path, settings.storage_base_url)
    return S3Storage(
        provider=provider,
        bucket=settings.storage_bucket,
        base_url=settings.storage_base_url,
        region=settings.storage_region,
        access_key=settings.storage_access_key_id or os.environ.get("AWS_ACCESS_KEY_ID"),
        secret_key=settings.storage_secret_access_key or os.environ.get("AWS_SECRET_ACCESS_KEY"),
        endpoint_url=settings.storage_endpoint,
    )


@lru_cache
def _default_storage() -> ObjectStorage:
    return build_storage(get_settings())


def get_storage() -> ObjectStorage:
    """FastAPI dependency for the configured storage backend."""
    return _default_storage()
