"""Moderation Service — post/user reports, weighted queue aggregation and review.

Invariants:
    - One report per (post, reporter) and per (reported user, reporter)
    - Queue entry per (post, category) created on first report, accumulated after
    - Queue arithmetic delegated to core/weigh_reports.py
    - Queue review requires the moderation.review action
    - Every report_user outcome, including rejections, is written to the activity log

Design Decisions:
    - Report weight snapshot = reporter trust score at report time
    - Queue ordering computed in Python with queue_sort_key: priority is a
      string enum whose rank is not its alphabetical order
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.core.domain_types import ActivityStatus, ModerationStatus
from cresp.core.errors import (
    CrespError, DuplicateResourceError, InputValidationError, ResourceNotFoundError,
)
from cresp.core.time_utils import utcnow
from cresp.core.weigh_reports import (
    QueueTally, add_report, first_report, priority_for_severity, queue_sort_key, report_weight,
)
from cresp.models.moderation import (
    ModerationCategory, ModerationQueue, ModerationReport, UserReport,
)
from cresp.models.post import Post
from cresp.models.user import User
from cresp.schemas.moderation import PostReportCreate, QueueResolve, UserReportCreate
from cresp.services.check_permissions import AuthorizationService
from cresp.services.log_activity import ActivityLogger

logger = logging.getLogger(__name__)

REVIEW_ACTION = "moderation.review"


class ModerationService:

    def __init__(self, db: AsyncSession, activity: ActivityLogger):
        self.db = db
        self.activity = activity

    async def list_categories(self) -> list[ModerationCategory]:
        result = await self.db.execute(
            select(ModerationCategory)
            .where(ModerationCategory.is_active.is_(True))
            .order_by(ModerationCategory.display_order)
        )
        return list(result.scalars().all())

    async def _active_category(self, key: str) -> ModerationCategory | None:
        result = await self.db.execute(
            select(ModerationCategory)
            .where(ModerationCategory.key == key)
            .where(ModerationCategory.is_active.is_(True))
        )
        return result.scalar_one_or_none()

    async def report_post(self, reporter_id: UUID, body: PostReportCreate) -> ModerationReport:
        post = await self.db.get(Post, body.post_id)
        if post is None or post.deleted_at is not None:
            raise ResourceNotFoundError("Post", str(body.post_id))

        duplicate = await self.db.execute(
            select(ModerationReport.id)
            .where(ModerationReport.post_id == post.id)
            .where(ModerationReport.reporter_id == reporter_id)
        )
        if duplicate.scalar_one_or_none() is not None:
            raise DuplicateResourceError("You have already reported this post")

        category = await self._active_category(body.category)
        if category is None:
            raise InputValidationError("Invalid report category", field="category")

        reporter = await self.db.get(User, reporter_id)
        weight = report_weight(reporter.trust_score if reporter else None)

        result = await self.db.execute(
            select(ModerationQueue)
            .where(ModerationQueue.post_id == post.id)
            .where(ModerationQueue.category_id == category.id)
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            tally = first_report(weight)
            entry = ModerationQueue(
                post_id=post.id,
                post_author_id=post.user_id,
                category_id=category.id,
                priority=priority_for_severity(category.severity).value,
                status=ModerationStatus.PENDING.value,
            )
            self.db.add(entry)
        else:
            tally = add_report(
                QueueTally(entry.report_count, entry.total_weight, entry.average_weight), weight,
            )
        entry.report_count = tally.report_count
        entry.total_weight = tally.total_weight
        entry.average_weight = tally.average_weight
        await self.db.flush()

        report = ModerationReport(
            queue_id=entry.id,
            post_id=post.id,
            reporter_id=reporter_id,
            category_id=category.id,
            details=body.details,
            report_weight=weight,
            reporter_reputation=reporter.total_reputation if reporter else 0,
            reporter_trust_score=weight,
        )
        self.db.add(report)
        await self.db.commit()
        logger.info(
            f"Post reported ({category.key})",
            extra={"user_id": str(reporter_id), "post_id": str(post.id)},
        )
        await self.activity.record(
            "post.report", user_id=reporter_id, resource_type="post", resource_id=str(post.id),
            metadata={"category": category.key, "weight": weight},
        )
        return report

    async def report_user(self, reporter_id: UUID, body: UserReportCreate) -> UserReport:
        try:
            report = await self._file_user_report(reporter_id, body)
        except CrespError as e:
            await self.activity.record(
                "user.report", user_id=reporter_id, resource_type="user",
                resource_id=str(body.user_id), status=ActivityStatus.FAILURE,
                error_message=e.message, metadata={"category": body.category},
            )
            raise
        await self.activity.record(
            "user.report", user_id=reporter_id, resource_type="user",
            resource_id=str(body.user_id), metadata={"category": body.category},
        )
        return report

    async def _file_user_report(self, reporter_id: UUID, body: UserReportCreate) -> UserReport:
        if body.user_id == reporter_id:
            raise InputValidationError("You cannot report your own profile")
        if await self.db.get(User, body.user_id) is None:
            raise ResourceNotFoundError("User", str(body.user_id))
        category = await self._active_category(body.category)
        if category is None:
            raise InputValidationError("Invalid category", field="category")
        reason = (body.reason or "").strip() or None
        if category.requires_proof and reason is None:
            raise InputValidationError(
                "Additional details are required for this report type", field="reason",
            )
        duplicate = await self.db.execute(
            select(UserReport.id)
            .where(UserReport.reported_user_id == body.user_id)
            .where(UserReport.reporter_id == reporter_id)
        )
        if duplicate.scalar_one_or_none() is not None:
            raise DuplicateResourceError("You have already reported this user")

        report = UserReport(
            reported_user_id=body.user_id,
            reporter_id=reporter_id,
            category_id=category.id,
            reason=reason,
        )
        self.db.add(report)
        await self.db.commit()
        return report

    async def list_queue(
        self, moderator_id: UUID, status: ModerationStatus = ModerationStatus.PENDING,
    ) -> list[ModerationQueue]:
        await AuthorizationService(self.db).require_action(moderator_id, REVIEW_ACTION)
        result = await self.db.execute(
            select(ModerationQueue).where(ModerationQueue.status == status.value),
        )
        entries = list(result.scalars().all())
        entries.sort(key=lambda e: queue_sort_key(e.priority, e.total_weight))
        return entries

    async def resolve_entry(
        self, moderator_id: UUID, entry_id: UUID, body: QueueResolve,
    ) -> ModerationQueue:
        await AuthorizationService(self.db).require_action(moderator_id, REVIEW_ACTION)
        entry = await self.db.get(ModerationQueue, entry_id)
        if entry is None:
            raise ResourceNotFoundError("Moderation queue entry", str(entry_id))
        if entry.status != ModerationStatus.PENDING.value:
            raise InputValidationError("Moderation queue entry is already closed")

        entry.status = body.status
        entry.resolved_by_id = moderator_id
        entry.resolution_note = body.note
        entry.resolved_at = utcnow()
        await self.db.commit()
        await self.activity.record(
            REVIEW_ACTION, user_id=moderator_id, resource_type="moderation_queue",
            resource_id=str(entry_id), metadata={"status": body.status},
        )
        return entry
