"""Report Weighting — verifies queue tallies, priority mapping and queue ordering."""

import pytest

from cresp.core.domain_types import ModerationPriority
from cresp.core.moderation_categories import (
    categories_in_severity_band, categories_requiring_proof, category_keys,
    get_category_metadata, is_valid_category, sort_by_severity,
)
from cresp.core.weigh_reports import (
    add_report, first_report, priority_for_severity, queue_sort_key, report_weight,
)


def test_weight_defaults_to_one_without_trust_score():
    assert report_weight(None) == 1.0
    assert report_weight(0.25) == 0.25


def test_average_tracks_total_over_count():
    tally = add_report(add_report(first_report(1.0), 0.5), 0.0)
    assert tally.report_count == 3
    assert tally.total_weight == pytest.approx(1.5)
    assert tally.average_weight == pytest.approx(0.5)


@pytest.mark.parametrize("severity, priority", [
    (5, ModerationPriority.HIGH),
    (4, ModerationPriority.HIGH),
    (3, ModerationPriority.NORMAL),
    (2, ModerationPriority.LOW),
    (1, ModerationPriority.LOW),
])
def test_priority_for_severity(severity, priority):
    assert priority_for_severity(severity) == priority


def test_queue_sort_puts_high_then_heavier_first():
    entries = [("LOW", 9.0), ("HIGH", 1.0), ("NORMAL", 2.0), ("HIGH", 3.0)]
    ordered = sorted(entries, key=lambda e: queue_sort_key(*e))
    assert ordered == [("HIGH", 3.0), ("HIGH", 1.0), ("NORMAL", 2.0), ("LOW", 9.0)]


def test_catalog_has_eleven_categories():
    assert len(category_keys()) == 11
    assert is_valid_category("spam")
    assert not is_valid_category("unknown")


def test_category_metadata_lookup():
    meta = get_category_metadata("harassment")
    assert meta is not None
    assert meta.severity == 5
    assert meta.requires_proof is True
    assert get_category_metadata("nope") is None


def test_sort_by_severity_drops_unknown_keys():
    assert sort_by_severity(["off_topic", "bogus", "nsfw", "spam"]) == ["nsfw", "spam", "off_topic"]


def test_proof_and_severity_band_helpers():
    assert "copyright" in categories_requiring_proof()
    assert "spam" not in categories_requiring_proof()
    assert set(categories_in_severity_band(5)) == {
        "harassment", "fake_content", "hate_speech", "self_harm",
    }
