"""Onboarding Routes — first-run profile completion.

Invariants:
    - Both complete and skip re-issue the session cookie so the
      onboarding_completed claim is current on the next request
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.api.dependencies import get_activity_logger, get_current_user, set_session_cookie
from cresp.infrastructure.database import get_db
from cresp.infrastructure.security import create_session_token
from cresp.models.user import User
from cresp.schemas.profile import OnboardingComplete, OnboardingResult
from cresp.services.authenticate import session_claims
from cresp.services.complete_onboarding import OnboardingService
from cresp.services.log_activity import ActivityLogger

router = APIRouter(prefix="/api/v1/onboarding", tags=["onboarding"])


def get_onboarding_service(
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> OnboardingService:
    return OnboardingService(db, activity)


@router.post("/complete", response_model=OnboardingResult)
async def complete_onboarding(
    body: OnboardingComplete,
    response: Response,
    user: User = Depends(get_current_user),
    onboarding: OnboardingService = Depends(get_onboarding_service),
):
    updated = await onboarding.complete(user.id, body)
    set_session_cookie(response, create_session_token(session_claims(updated)))
    return OnboardingResult(message="Onboarding completed successfully")


@router.post("/skip", response_model=OnboardingResult)
async def skip_onboarding(
    response: Response,
    user: User = Depends(get_current_user),
    onboarding: OnboardingService = Depends(get_onboarding_service),
):
    updated = await onboarding.skip(user.id)
    set_session_cookie(response, create_session_token(session_claims(updated)))
    return OnboardingResult(message="Onboarding skipped")
