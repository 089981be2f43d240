"""Media Routes — upload negotiation, local uploads and local file serving.

Invariants:
    - upload-url only works with cloud storage; upload-local and /uploads only with local
    - Served files carry a long immutable Cache-Control (keys are never reused)
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response

from cresp.api.dependencies import get_activity_logger, get_current_user
from cresp.config import Settings, get_settings
from cresp.core.domain_types import FileKind
from cresp.core.storage_rules import UPLOAD_CACHE_CONTROL
from cresp.infrastructure.storage import ObjectStorage, get_storage
from cresp.models.user import User
from cresp.schemas.media import StoredFileOut, UploadUrlOut, UploadUrlRequest
from cresp.services.log_activity import ActivityLogger
from cresp.services.store_media import MediaService

router = APIRouter(prefix="/api/v1", tags=["media"])


def get_media_service(
    storage: ObjectStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> MediaService:
    return MediaService(storage, settings, activity)


@router.post("/media/upload-url", response_model=UploadUrlOut)
async def create_upload_url(
    body: UploadUrlRequest,
    user: User = Depends(get_current_user),
    media: MediaService = Depends(get_media_service),
):
    return await media.presigned_upload(user.id, body)


@router.post("/media/upload-local", response_model=StoredFileOut)
async def upload_local(
    file: UploadFile = File(...),
    kind: FileKind = Form(FileKind.IMAGE),
    user: User = Depends(get_current_user),
    media: MediaService = Depends(get_media_service),
):
    content = await file.read()
    return await media.upload_local(
        user.id,
        file.filename or "upload",
        file.content_type or "application/octet-stream",
        content,
        kind,
    )


@router.get("/uploads/{path:path}")
async def serve_upload(path: str, media: MediaService = Depends(get_media_service)):
    served = await media.serve(path)
    return Response(
        content=served.content,
        media_type=served.content_type,
        headers={"Cache-Control": UPLOAD_CACHE_CONTROL},
    )
