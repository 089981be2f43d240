"""Referral Rules — verifies code format, funnel direction and stats math."""

import random

from cresp.core.domain_types import ReferralStatus
from cresp.core.referral_rules import (
    build_referral_link, conversion_rate, count_by_status, counts_as_conversion,
    generate_referral_code, is_forward_transition,
)


def test_code_prefix_and_suffix():
    code = generate_referral_code("janedoe_longname", rng=random.Random(7))
    prefix, suffix = code.split("_", 1)[0], code.rsplit("_", 1)[1]
    assert code.startswith("JANEDOE_")
    assert prefix == "JANEDOE"
    assert len(suffix) == 6
    assert suffix.isalnum() and suffix.upper() == suffix


def test_seeded_rng_is_deterministic():
    assert generate_referral_code("abc", random.Random(1)) == generate_referral_code("abc", random.Random(1))


def test_funnel_only_moves_forward():
    assert is_forward_transition("SIGNED_UP", ReferralStatus.PROFILE_COMPLETED)
    assert not is_forward_transition("FIRST_POST", ReferralStatus.PROFILE_COMPLETED)
    assert not is_forward_transition("EMAIL_VERIFIED", ReferralStatus.EMAIL_VERIFIED)


def test_only_profile_completion_converts():
    assert counts_as_conversion(ReferralStatus.PROFILE_COMPLETED)
    assert not counts_as_conversion(ReferralStatus.FIRST_POST)


def test_conversion_rate():
    assert conversion_rate(0, 0) == 0.0
    assert conversion_rate(1, 3) == 33.33
    assert conversion_rate(2, 2) == 100.0


def test_count_by_status():
    assert count_by_status(["SIGNED_UP", "FIRST_POST", "SIGNED_UP"]) == {
        "SIGNED_UP": 2, "FIRST_POST": 1,
    }


def test_link_quotes_code():
    assert build_referral_link("https", "cresp.app", "JANE_AB12CD") == (
        "https://cresp.app/join?ref=JANE_AB12CD"
    )
