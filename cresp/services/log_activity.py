"""Activity Logger — append-only audit rows for user and system actions.

Invariants:
    - Logging never fails the caller: SQLAlchemyError is rolled back, logged, swallowed
    - IP anonymized and user agent truncated before persistence
    - record() commits its own row: call it only after the primary operation committed,
      otherwise it would commit half-finished work

Design Decisions:
    - Uses the request's session (no second connection): SQLite in tests and small
      pools in production both stay within one connection per request
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.core.anonymize_request import (
    RequestMetadata, action_category, anonymize_ip, truncate_user_agent,
)
from cresp.core.domain_types import ActivityStatus
from cresp.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


class ActivityLogger:
    """Writes and reads the activity log through one session."""

    def __init__(self, db: AsyncSession, request: RequestMetadata | None = None):
        self.db = db
        self.request = request or RequestMetadata()

    async def record(
        self,
        action: str,
        *,
        user_id: UUID | None = None,
        resource_type: str | None = None,
        resource_id: str | None = None,
        status: ActivityStatus = ActivityStatus.SUCCESS,
        changes_before: dict | None = None,
        changes_after: dict | None = None,
        metadata: dict | None = None,
        error_message: str | None = None,
        duration: int | None = None,
    ) -> None:
        entry = ActivityLog(
            user_id=user_id,
            action=action,
            action_category=action_category(action),
            resource_type=resource_type,
            resource_id=resource_id,
            method=self.request.method,
            endpoint=self.request.endpoint,
            ip_address=anonymize_ip(self.request.ip_address) if self.request.ip_address else None,
            user_agent=truncate_user_agent(self.request.user_agent) if self.request.user_agent else None,
            duration=duration,
            status=status.value,
            changes_before=changes_before,
            changes_after=changes_after,
            extra_metadata=metadata,
            error_message=error_message,
        )
        try:
            self.db.add(entry)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Failed to log activity {action}: {e}",
                extra={"action": action, "user_id": str(user_id) if user_id else None},
            )

    async def history(
        self, user_id: UUID, limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[ActivityLog]:
        result = await self.db.execute(
            select(ActivityLog)
            .where(ActivityLog.user_id == user_id)
            .order_by(ActivityLog.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
