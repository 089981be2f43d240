"""Referral Rules — pure code generation, funnel progression and stats math.

Invariants:
    - All functions are PURE (randomness injected via the `rng` parameter)
    - Codes look like <USERNAME[:8] upper>_<6 uppercase alphanumerics>
    - Referral status only moves forward along REFERRAL_FUNNEL
    - Conversion rate is signups/clicks as a percentage with 2 decimals; 0 without clicks

Design Decisions:
    - rng parameter (random.Random-compatible): tests pass a seeded instance,
      production uses secrets.SystemRandom for unguessable codes
"""

import secrets
import string
from urllib.parse import quote

from cresp.core.domain_types import ReferralStatus

CODE_RANDOM_LENGTH = 6
CODE_PREFIX_LENGTH = 8
MAX_CODE_ATTEMPTS = 10
RECENT_REFERRALS_LIMIT = 10

_CODE_ALPHABET = string.ascii_uppercase + string.digits
_SYSTEM_RANDOM = secrets.SystemRandom()

REFERRAL_FUNNEL: tuple[ReferralStatus, ...] = (
    ReferralStatus.SIGNED_UP,
    ReferralStatus.EMAIL_VERIFIED,
    ReferralStatus.PROFILE_COMPLETED,
    ReferralStatus.FIRST_POST,
    ReferralStatus.FIRST_COLLABORATION,
)

# Milestone → timestamp column set when the milestone is reached
MILESTONE_TIMESTAMP_FIELDS: dict[ReferralStatus, str] = {
    ReferralStatus.EMAIL_VERIFIED: "email_verified_at",
    ReferralStatus.PROFILE_COMPLETED: "profile_completed_at",
    ReferralStatus.FIRST_POST: "first_post_at",
    ReferralStatus.FIRST_COLLABORATION: "first_collaboration_at",
}


def generate_referral_code(username: str, rng=_SYSTEM_RANDOM) -> str:
    prefix = username[:CODE_PREFIX_LENGTH].upper()
    suffix = "".join(rng.choice(_CODE_ALPHABET) for _ in range(CODE_RANDOM_LENGTH))
    return f"{prefix}_{suffix}"


def is_forward_transition(current: str, milestone: ReferralStatus) -> bool:
    """True when milestone is strictly later in the funnel than current."""
    return REFERRAL_FUNNEL.index(milestone) > REFERRAL_FUNNEL.index(ReferralStatus(current))


def counts_as_conversion(milestone: ReferralStatus) -> bool:
    return milestone == ReferralStatus.PROFILE_COMPLETED


def conversion_rate(total_signups: int, total_clicks: int) -> float:
    if total_clicks <= 0:
        return 0.0
    return round(total_signups / total_clicks * 100, 2)


def count_by_status(statuses: list[str]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for status in statuses:
        counts[status] = counts.get(status, 0) + 1
    return counts


def build_referral_link(scheme: str, host: str, code: str) -> str:
    return f"{scheme}://{host}/join?ref={quote(code)}"
