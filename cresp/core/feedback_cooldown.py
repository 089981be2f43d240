"""Feedback Cooldown — pure eligibility rule for showing a feedback prompt.

Invariants:
    - A prompt (any trigger) shown within COOLDOWN blocks every prompt
    - A trigger dismissed DISMISS_LIMIT times is never shown again
    - "Recently shown" wins over "Dismissed too many times" when both apply
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

COOLDOWN = timedelta(days=7)
DISMISS_LIMIT = 3


@dataclass(frozen=True)
class CooldownDecision:
    can_show: bool
    reason: str | None
    last_shown: datetime | None


def cooldown_cutoff(now: datetime) -> datetime:
    return now - COOLDOWN


def decide_prompt(last_shown: datetime | None, dismiss_count: int) -> CooldownDecision:
    """last_shown is the most recent prompt inside the cooldown window, if any."""
    if last_shown is not None:
        return CooldownDecision(False, "Recently shown", last_shown)
    if dismiss_count >= DISMISS_LIMIT:
        return CooldownDecision(False, "Dismissed too many times", None)
    return CooldownDecision(True, None, None)
