"""Waitlist Service — landing-page signups, one row per email."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.core.errors import DuplicateResourceError
from cresp.models.waitlist import WaitlistEntry
from cresp.schemas.waitlist import WaitlistJoin

logger = logging.getLogger(__name__)

ALREADY_JOINED = "This email is already on the waitlist!"


async def join_waitlist(db: AsyncSession, body: WaitlistJoin) -> WaitlistEntry:
    existing = await db.execute(select(WaitlistEntry.id).where(WaitlistEntry.email == body.email))
    if existing.scalar_one_or_none() is not None:
        raise DuplicateResourceError(ALREADY_JOINED)

    feedback = (body.feedback or "").strip() or None
    entry = WaitlistEntry(email=body.email, feedback=feedback)
    db.add(entry)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateResourceError(ALREADY_JOINED)
    logger.info("Waitlist signup")
    return entry
