"""Media Service — upload validation, key generation and local file serving.

Invariants:
    - Size and MIME checks run before any bytes reach storage
    - Keys are <kind>s/<user_id>/<epoch_ms>-<random>.<ext>; never derived from
      anything but the extension of the client filename
    - Presigned URLs only from cloud providers; direct upload and serving only local
    - Served paths normalized by core/storage_rules.safe_relative_path (no traversal)
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from cresp.config import Settings
from cresp.core.domain_types import FileKind
from cresp.core.errors import (
    InputValidationError, ResourceNotFoundError, StorageUnavailableError,
)
from cresp.core.storage_rules import (
    check_file, content_type_for, generate_key, random_key_part, safe_relative_path,
)
from cresp.core.time_utils import utcnow
from cresp.infrastructure.storage import ObjectStorage
from cresp.schemas.media import StoredFileOut, UploadUrlOut, UploadUrlRequest
from cresp.services.log_activity import ActivityLogger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServedFile:
    content: bytes
    content_type: str


class MediaService:

    def __init__(self, storage: ObjectStorage, settings: Settings, activity: ActivityLogger | None = None):
        self.storage = storage
        self.settings = settings
        self.activity = activity

    def _max_bytes(self, kind: FileKind) -> int:
        if kind == FileKind.DOCUMENT:
            return self.settings.storage_max_document_bytes
        return self.settings.storage_max_image_bytes

    def validate_file(self, size: int, mime_type: str, kind: FileKind) -> None:
        message = check_file(size, mime_type, kind, self._max_bytes(kind))
        if message:
            raise InputValidationError(message, field="file")

    def new_key(self, user_id: UUID, kind: FileKind, filename: str) -> str:
        epoch_ms = int(utcnow().timestamp() * 1000)
        return generate_key(str(user_id), kind, filename, epoch_ms, random_key_part())

    async def presigned_upload(self, user_id: UUID, body: UploadUrlRequest) -> UploadUrlOut:
        self.validate_file(body.size, body.content_type, body.kind)
        key = self.new_key(user_id, body.kind, body.file_name)
        ttl = self.settings.storage_presign_ttl_seconds
        upload_url = await self.storage.presigned_upload_url(key, body.content_type, ttl)
        return UploadUrlOut(
            upload_url=upload_url, key=key, public_url=self.storage.url_for(key), expires_in=ttl,
        )

    async def upload_local(
        self, user_id: UUID, filename: str, content_type: str, content: bytes, kind: FileKind,
    ) -> StoredFileOut:
        if not self.storage.is_local:
            raise StorageUnavailableError("Direct upload is only available for local storage")
        self.validate_file(len(content), content_type, kind)
        key = self.new_key(user_id, kind, filename)
        info = await self.storage.write(key, content, content_type)
        if self.activity is not None:
            await self.activity.record(
                "media.upload", user_id=user_id, resource_type="media", resource_id=key,
                metadata={"kind": kind.value, "size": info.size_bytes, "mime_type": content_type},
            )
        return StoredFileOut(
            key=info.key, url=info.url, size=info.size_bytes,
            mime_type=info.content_type, file_name=filename,
        )

    async def serve(self, path: str) -> ServedFile:
        if not self.storage.is_local:
            raise StorageUnavailableError("Local file serving is disabled")
        relative = safe_relative_path(path)
        if relative is None:
            raise ResourceNotFoundError("File", path)
        try:
            content = await self.storage.read(relative)
        except FileNotFoundError:
            raise ResourceNotFoundError("File", path)
        return ServedFile(content=content, content_type=content_type_for(relative))
