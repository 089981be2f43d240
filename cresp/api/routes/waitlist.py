"""Waitlist Routes — public landing-page signup."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.infrastructure.database import get_db
from cresp.schemas.waitlist import WaitlistJoin, WaitlistJoined
from cresp.services.join_waitlist import join_waitlist

router = APIRouter(prefix="/api/v1/waitlist", tags=["waitlist"])


@router.post("/", response_model=WaitlistJoined, status_code=status.HTTP_201_CREATED)
async def join(body: WaitlistJoin, db: AsyncSession = Depends(get_db)):
    await join_waitlist(db, body)
    return WaitlistJoined()
