"""Feedback Routes — prompt cooldown, prompt logging and submission."""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.api.dependencies import get_activity_logger, get_current_user
from cresp.infrastructure.database import get_db
from cresp.models.user import User
from cresp.schemas.auth import MessageResponse
from cresp.schemas.feedback import CooldownOut, FeedbackSubmit, PromptTrigger
from cresp.services.collect_feedback import FeedbackService
from cresp.services.log_activity import ActivityLogger

router = APIRouter(prefix="/api/v1/feedback", tags=["feedback"])


def get_feedback_service(
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> FeedbackService:
    return FeedbackService(db, activity)


@router.get("/check-cooldown", response_model=CooldownOut)
async def check_cooldown(
    trigger: str = Query(..., min_length=1, max_length=50),
    user: User = Depends(get_current_user),
    feedback: FeedbackService = Depends(get_feedback_service),
):
    decision = await feedback.check_cooldown(user.id, trigger)
    return CooldownOut(
        can_show=decision.can_show, reason=decision.reason, last_shown=decision.last_shown,
    )


@router.post("/log-shown", response_model=MessageResponse)
async def log_shown(
    body: PromptTrigger,
    user: User = Depends(get_current_user),
    feedback: FeedbackService = Depends(get_feedback_service),
):
    await feedback.log_shown(user.id, body.trigger)
    return MessageResponse(message="Prompt logged")


@router.post("/dismiss", response_model=MessageResponse)
async def dismiss(
    body: PromptTrigger,
    user: User = Depends(get_current_user),
    feedback: FeedbackService = Depends(get_feedback_service),
):
    await feedback.dismiss(user.id, body.trigger)
    return MessageResponse(message="Prompt dismissed")


@router.post("/submit", response_model=MessageResponse)
async def submit(
    body: FeedbackSubmit,
    request: Request,
    user: User = Depends(get_current_user),
    feedback: FeedbackService = Depends(get_feedback_service),
):
    await feedback.submit(user.id, body, request.headers.get("user-agent"))
    return MessageResponse(message="Thank you for your feedback!")
