"""Time Utils — naive datetimes are read as UTC."""

from datetime import datetime, timezone

from cresp.core.time_utils import ensure_utc, is_expired


def test_naive_datetimes_treated_as_utc():
    naive = datetime(2026, 1, 1)
    assert ensure_utc(naive).tzinfo == timezone.utc
    assert is_expired(naive, now=datetime(2026, 1, 2, tzinfo=timezone.utc))
