"""Moderation Routes — report categories, post/user reports and the moderator queue.

Invariants:
    - Every report endpoint requires a session; the reporter is always the caller
    - Queue endpoints are gated by the moderation.review action inside the service
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.api.dependencies import get_activity_logger, get_current_user
from cresp.core.domain_types import ModerationStatus
from cresp.infrastructure.database import get_db
from cresp.models.user import User
from cresp.schemas.moderation import (
    CategoryOut, PostReportCreate, QueueEntryOut, QueueResolve, ReportAccepted,
    UserReportCreate,
)
from cresp.services.log_activity import ActivityLogger
from cresp.services.moderate_reports import ModerationService

router = APIRouter(prefix="/api/v1/moderation", tags=["moderation"])


def get_moderation_service(
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> ModerationService:
    return ModerationService(db, activity)


@router.get("/categories", response_model=list[CategoryOut])
async def list_categories(moderation: ModerationService = Depends(get_moderation_service)):
    return await moderation.list_categories()


@router.post("/reports/posts", response_model=ReportAccepted, status_code=status.HTTP_201_CREATED)
async def report_post(
    body: PostReportCreate,
    user: User = Depends(get_current_user),
    moderation: ModerationService = Depends(get_moderation_service),
):
    report = await moderation.report_post(user.id, body)
    return ReportAccepted(report_id=report.id)


@router.post("/reports/users", response_model=ReportAccepted, status_code=status.HTTP_201_CREATED)
async def report_user(
    body: UserReportCreate,
    user: User = Depends(get_current_user),
    moderation: ModerationService = Depends(get_moderation_service),
):
    report = await moderation.report_user(user.id, body)
    return ReportAccepted(report_id=report.id)


@router.get("/queue", response_model=list[QueueEntryOut])
async def list_queue(
    queue_status: ModerationStatus = Query(ModerationStatus.PENDING, alias="status"),
    user: User = Depends(get_current_user),
    moderation: ModerationService = Depends(get_moderation_service),
):
    return await moderation.list_queue(user.id, queue_status)


@router.post("/queue/{entry_id}/resolve", response_model=QueueEntryOut)
async def resolve_entry(
    entry_id: UUID,
    body: QueueResolve,
    user: User = Depends(get_current_user),
    moderation: ModerationService = Depends(get_moderation_service),
):
    return await moderation.resolve_entry(user.id, entry_id, body)
