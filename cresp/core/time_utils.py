"""Time helpers — timezone-aware now() and normalization of DB-returned datetimes.

Invariants:
    - Every datetime leaving this module is timezone-aware UTC
    - Naive datetimes are assumed to already be UTC (SQLite drops tzinfo)
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_expired(expires_at: datetime, now: datetime | None = None) -> bool:
    return ensure_utc(expires_at) < (now or utcnow())
