"""Feedback Service — prompt cooldown, impressions, dismissals and submissions.

Invariants:
    - Cooldown decision delegated to core/feedback_cooldown.py
    - submit() stores the feedback and marks the trigger's prompt logs responded in one commit
    - dismiss() only touches logs not yet dismissed
"""

import logging
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.core.feedback_cooldown import CooldownDecision, cooldown_cutoff, decide_prompt
from cresp.core.time_utils import ensure_utc, utcnow
from cresp.models.feedback import FeedbackPromptLog, UserFeedback
from cresp.schemas.feedback import FeedbackSubmit
from cresp.services.log_activity import ActivityLogger

logger = logging.getLogger(__name__)


class FeedbackService:

    def __init__(self, db: AsyncSession, activity: ActivityLogger):
        self.db = db
        self.activity = activity

    async def check_cooldown(self, user_id: UUID, trigger: str) -> CooldownDecision:
        recent = await self.db.execute(
            select(func.max(FeedbackPromptLog.shown_at))
            .where(FeedbackPromptLog.user_id == user_id)
            .where(FeedbackPromptLog.shown_at >= cooldown_cutoff(utcnow()))
        )
        last_shown = recent.scalar_one_or_none()
        dismissals = await self.db.execute(
            select(func.count(FeedbackPromptLog.id))
            .where(FeedbackPromptLog.user_id == user_id)
            .where(FeedbackPromptLog.trigger == trigger)
            .where(FeedbackPromptLog.dismissed.is_(True))
        )
        return decide_prompt(
            ensure_utc(last_shown) if last_shown else None, dismissals.scalar_one(),
        )

    async def log_shown(self, user_id: UUID, trigger: str) -> None:
        self.db.add(FeedbackPromptLog(user_id=user_id, trigger=trigger))
        await self.db.commit()
        await self.activity.record("feedback.prompt_shown", user_id=user_id, metadata={"trigger": trigger})

    async def dismiss(self, user_id: UUID, trigger: str) -> int:
        result = await self.db.execute(
            update(FeedbackPromptLog)
            .where(FeedbackPromptLog.user_id == user_id)
            .where(FeedbackPromptLog.trigger == trigger)
            .where(FeedbackPromptLog.dismissed.is_(False))
            .values(dismissed=True)
        )
        await self.db.commit()
        await self.activity.record("feedback.dismiss", user_id=user_id, metadata={"trigger": trigger})
        return result.rowcount

    async def submit(self, user_id: UUID, body: FeedbackSubmit, user_agent: str | None) -> None:
        self.db.add(UserFeedback(
            user_id=user_id,
            feedback_type=body.feedback_type,
            trigger=body.trigger,
            rating=body.rating,
            comment=body.comment,
            url=body.url,
            user_agent=user_agent[:255] if user_agent else None,
        ))
        await self.db.execute(
            update(FeedbackPromptLog)
            .where(FeedbackPromptLog.user_id == user_id)
            .where(FeedbackPromptLog.trigger == body.trigger)
            .where(FeedbackPromptLog.responded.is_(False))
            .values(responded=True)
        )
        await self.db.commit()
        logger.info("Feedback submitted", extra={"user_id": str(user_id)})
        await self.activity.record(
            "feedback.submit",
            user_id=user_id,
            metadata={
                "trigger": body.trigger,
                "feedback_type": body.feedback_type,
                "rating": body.rating,
                "has_comment": bool(body.comment),
            },
        )
