"""Onboarding Service — first-login profile completion or skip.

Invariants:
    - Both paths leave onboarding_completed = True
    - complete() writes profile fields and role assignments in one commit
    - Unknown or inactive role ids reject the whole request (nothing written)
    - Referral milestone PROFILE_COMPLETED only on complete(), never on skip()
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from cresp.core.domain_types import ReferralStatus
from cresp.core.errors import ResourceNotFoundError
from cresp.models.user import User
from cresp.schemas.profile import OnboardingComplete
from cresp.services.log_activity import ActivityLogger
from cresp.services.manage_professional_roles import ProfessionalRoleService
from cresp.services.track_referrals import ReferralService

logger = logging.getLogger(__name__)


class OnboardingService:

    def __init__(self, db: AsyncSession, activity: ActivityLogger):
        self.db = db
        self.activity = activity

    async def _user(self, user_id: UUID) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    async def complete(self, user_id: UUID, body: OnboardingComplete) -> User:
        user = await self._user(user_id)
        await ProfessionalRoleService(self.db, self.activity).assign_roles(
            user_id, body.professional_role_ids,
        )
        user.name = body.name
        user.bio = body.bio
        user.location = body.location
        user.onboarding_completed = True
        await self.db.commit()
        logger.info("Onboarding completed", extra={"user_id": str(user_id)})

        await self.activity.record(
            "onboarding.complete",
            user_id=user_id,
            metadata={
                "professional_role_ids": body.professional_role_ids,
                "has_bio": body.bio is not None,
                "has_location": body.location is not None,
            },
        )
        await ReferralService(self.db).advance_quietly(user_id, ReferralStatus.PROFILE_COMPLETED)
        return user

    async def skip(self, user_id: UUID) -> User:
        user = await self._user(user_id)
        user.onboarding_completed = True
        await self.db.commit()
        await self.activity.record("onboarding.skip", user_id=user_id)
        return user
