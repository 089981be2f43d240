"""Referral Service — codes, click tracking, signup attribution and funnel milestones.

Invariants:
    - One code per user, created lazily on first request
    - Unknown or inactive codes are ignored (track_click, record_signup never raise for them)
    - Self-referral and re-referral ignored: a user is referred at most once
    - Status moves forward only; PROFILE_COMPLETED increments conversions exactly once
    - record_signup and update_milestone flush only: the caller owns the transaction
    - *_quietly variants never raise on database failure (referrals are a side channel)

Design Decisions:
    - Collision retry loop checks the DB before insert (up to MAX_CODE_ATTEMPTS);
      the unique constraint still backs it
    - Counters incremented with UPDATE ... SET col = col + 1: concurrent clicks
      do not lose increments
"""

import logging
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.core.domain_types import ReferralStatus
from cresp.core.errors import ReferralCodeExhaustedError, ResourceNotFoundError
from cresp.core.referral_rules import (
    MAX_CODE_ATTEMPTS, MILESTONE_TIMESTAMP_FIELDS, RECENT_REFERRALS_LIMIT,
    conversion_rate, count_by_status, counts_as_conversion,
    generate_referral_code, is_forward_transition,
)
from cresp.core.anonymize_request import RequestMetadata, anonymize_ip, truncate_user_agent
from cresp.core.time_utils import utcnow
from cresp.models.referral import Referral, ReferralClick, ReferralCode
from cresp.models.user import User
from cresp.schemas.post import AuthorSummary
from cresp.schemas.referral import RecentReferral, ReferralStats, ReferrerInfo

logger = logging.getLogger(__name__)


class ReferralService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _code_row(self, code: str) -> ReferralCode | None:
        result = await self.db.execute(select(ReferralCode).where(ReferralCode.code == code))
        return result.scalar_one_or_none()

    async def get_or_create_code(self, user_id: UUID) -> ReferralCode:
        result = await self.db.execute(
            select(ReferralCode).where(ReferralCode.user_id == user_id),
        )
        existing = result.scalar_one_or_none()
        if existing:
            return existing

        user = await self.db.get(User, user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))

        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_referral_code(user.username)
            if await self._code_row(code) is None:
                row = ReferralCode(user_id=user_id, code=code)
                self.db.add(row)
                await self.db.commit()
                logger.info(f"Referral code created: {code}", extra={"user_id": str(user_id)})
                return row
        raise ReferralCodeExhaustedError(MAX_CODE_ATTEMPTS)

    async def track_click(
        self, code: str, request: RequestMetadata, landing_page: str | None = None,
        referrer: str | None = None,
    ) -> bool:
        """Returns True when a click was recorded."""
        row = await self._code_row(code)
        if row is None or not row.is_active:
            return False
        self.db.add(ReferralClick(
            referral_code_id=row.id,
            ip_address=anonymize_ip(request.ip_address) if request.ip_address else None,
            user_agent=truncate_user_agent(request.user_agent) if request.user_agent else None,
            referrer=referrer[:500] if referrer else None,
            landing_page=landing_page,
        ))
        await self.db.execute(
            update(ReferralCode)
            .where(ReferralCode.id == row.id)
            .values(total_clicks=ReferralCode.total_clicks + 1)
        )
        await self.db.commit()
        return True

    async def track_click_quietly(
        self, code: str, request: RequestMetadata, landing_page: str | None = None,
        referrer: str | None = None,
    ) -> bool:
        try:
            return await self.track_click(code, request, landing_page, referrer)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Referral click tracking failed: {e}", extra={"code": code})
            return False

    async def record_signup(
        self, code: str, new_user_id: UUID, ip_address: str | None = None,
    ) -> Referral | None:
        row = await self._code_row(code)
        if row is None or not row.is_active:
            return None
        if row.user_id == new_user_id:
            return None
        already = await self.db.execute(
            select(Referral.id).where(Referral.referred_id == new_user_id),
        )
        if already.scalar_one_or_none() is not None:
            return None

        referral = Referral(
            referral_code_id=row.id,
            referrer_id=row.user_id,
            referred_id=new_user_id,
            status=ReferralStatus.SIGNED_UP.value,
        )
        self.db.add(referral)
        await self.db.execute(
            update(ReferralCode)
            .where(ReferralCode.id == row.id)
            .values(total_signups=ReferralCode.total_signups + 1)
        )
        if ip_address:
            await self.db.execute(
                update(ReferralClick)
                .where(ReferralClick.referral_code_id == row.id)
                .where(ReferralClick.ip_address == anonymize_ip(ip_address))
                .where(ReferralClick.converted_to_signup.is_(False))
                .values(
                    converted_to_signup=True,
                    converted_user_id=new_user_id,
                    converted_at=utcnow(),
                )
            )
        await self.db.flush()
        logger.info("Referral signup recorded", extra={"user_id": str(new_user_id)})
        return referral

    async def record_signup_quietly(
        self, code: str, new_user_id: UUID, ip_address: str | None = None,
    ) -> None:
        try:
            await self.record_signup(code, new_user_id, ip_address)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Referral signup tracking failed: {e}", extra={"user_id": str(new_user_id)},
            )

    async def update_milestone(self, user_id: UUID, milestone: ReferralStatus) -> bool:
        """Returns True when the referral advanced."""
        result = await self.db.execute(
            select(Referral).where(Referral.referred_id == user_id),
        )
        referral = result.scalar_one_or_none()
        if referral is None or not is_forward_transition(referral.status, milestone):
            return False

        referral.status = milestone.value
        field_name = MILESTONE_TIMESTAMP_FIELDS[milestone]
        if getattr(referral, field_name) is None:
            setattr(referral, field_name, utcnow())
        if counts_as_conversion(milestone):
            await self.db.execute(
                update(ReferralCode)
                .where(ReferralCode.id == referral.referral_code_id)
                .values(total_conversions=ReferralCode.total_conversions + 1)
            )
        await self.db.flush()
        return True

    async def advance_quietly(self, user_id: UUID, milestone: ReferralStatus) -> None:
        """update_milestone + commit, for use after the primary operation committed."""
        try:
            await self.update_milestone(user_id, milestone)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Referral milestone {milestone.value} failed: {e}",
                extra={"user_id": str(user_id)},
            )

    async def stats(self, user_id: UUID) -> ReferralStats:
        result = await self.db.execute(
            select(ReferralCode).where(ReferralCode.user_id == user_id),
        )
        code = result.scalar_one_or_none()
        if code is None:
            return ReferralStats()

        referrals = (await self.db.execute(
            select(Referral)
            .where(Referral.referral_code_id == code.id)
            .order_by(Referral.signed_up_at.desc())
        )).scalars().all()

        return ReferralStats(
            code=code.code,
            total_clicks=code.total_clicks,
            total_signups=code.total_signups,
            total_conversions=code.total_conversions,
            conversion_rate=conversion_rate(code.total_signups, code.total_clicks),
            referrals_by_status=count_by_status([r.status for r in referrals]),
            recent_referrals=[
                RecentReferral(
                    id=r.id,
                    status=r.status,
                    signed_up_at=r.signed_up_at,
                    user=AuthorSummary.model_validate(r.referred),
                )
                for r in referrals[:RECENT_REFERRALS_LIMIT]
            ],
        )

    async def referrer_info(self, user_id: UUID) -> ReferrerInfo | None:
        result = await self.db.execute(
            select(Referral).where(Referral.referred_id == user_id),
        )
        referral = result.scalar_one_or_none()
        if referral is None:
            return None
        return ReferrerInfo(
            referred_by=AuthorSummary.model_validate(referral.referrer),
            referred_at=referral.signed_up_at,
            status=referral.status,
        )
