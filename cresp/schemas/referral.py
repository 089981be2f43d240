"""Referral Schemas — code sharing, click tracking and funnel statistics."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from cresp.schemas.post import AuthorSummary


class ReferralCounters(BaseModel):
    clicks: int
    signups: int
    conversions: int


class ReferralCodeOut(BaseModel):
    code: str
    link: str
    stats: ReferralCounters


class TrackClick(BaseModel):
    code: str | None = Field(None, max_length=32)
    landing_page: str | None = Field(None, max_length=500)


class RecentReferral(BaseModel):
    id: UUID
    status: str
    signed_up_at: datetime
    user: AuthorSummary


class ReferralStats(BaseModel):
    code: str | None = None
    total_clicks: int = 0
    total_signups: int = 0
    total_conversions: int = 0
    conversion_rate: float = 0
    referrals_by_status: dict[str, int] = Field(default_factory=dict)
    recent_referrals: list[RecentReferral] = Field(default_factory=list)


class ReferrerInfo(BaseModel):
    referred_by: AuthorSummary
    referred_at: datetime
    status: str
