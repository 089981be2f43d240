"""Referral Routes — share codes, click tracking and funnel statistics.

Invariants:
    - track-click never fails: unknown codes and storage errors reply success=False
    - A recorded click sets the referral_code cookie read by signup
    - Share links honour X-Forwarded-Proto so links built behind a proxy keep https
"""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.api.dependencies import get_current_user, request_metadata
from cresp.core.anonymize_request import RequestMetadata
from cresp.core.referral_rules import build_referral_link
from cresp.infrastructure.database import get_db
from cresp.models.user import User
from cresp.schemas.referral import (
    ReferralCodeOut, ReferralCounters, ReferralStats, ReferrerInfo, TrackClick,
)
from cresp.services.track_referrals import ReferralService

router = APIRouter(prefix="/api/v1/referral", tags=["referral"])

REFERRAL_COOKIE = "referral_code"
REFERRAL_COOKIE_MAX_AGE = 30 * 24 * 3600


def _request_scheme(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-proto")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.url.scheme


@router.get("/code", response_model=ReferralCodeOut)
async def get_code(
    request: Request,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    row = await ReferralService(db).get_or_create_code(user.id)
    host = request.headers.get("host") or request.url.netloc
    return ReferralCodeOut(
        code=row.code,
        link=build_referral_link(_request_scheme(request), host, row.code),
        stats=ReferralCounters(
            clicks=row.total_clicks,
            signups=row.total_signups,
            conversions=row.total_conversions,
        ),
    )


@router.get("/stats", response_model=ReferralStats)
async def get_stats(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await ReferralService(db).stats(user.id)


@router.get("/referrer", response_model=ReferrerInfo | None)
async def get_referrer(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await ReferralService(db).referrer_info(user.id)


@router.post("/track-click")
async def track_click(
    body: TrackClick,
    request: Request,
    response: Response,
    meta: RequestMetadata = Depends(request_metadata),
    db: AsyncSession = Depends(get_db),
):
    if not body.code:
        return {"success": False}
    recorded = await ReferralService(db).track_click_quietly(
        body.code, meta, landing_page=body.landing_page, referrer=request.headers.get("referer"),
    )
    if recorded:
        response.set_cookie(
            key=REFERRAL_COOKIE, value=body.code, max_age=REFERRAL_COOKIE_MAX_AGE,
            httponly=True, samesite="lax", path="/",
        )
    return {"success": recorded}
