"""Moderation Category Catalog — static metadata for the 11 built-in report categories.

Invariants:
    - Keys here match the seeded moderation_categories rows one-to-one
    - severity is 1 (mildest) to 5 (most severe)
    - Catalog is immutable at runtime; admins edit the DB copy, not this one

Design Decisions:
    - Catalog lives in core (not only in the DB): the seed migration, tests and
      category helpers share one source
    - display_order follows declaration order
"""

from dataclasses import dataclass

from cresp.core.domain_types import ModerationAutoAction


@dataclass(frozen=True)
class CategoryMetadata:
    key: str
    name: str
    description: str
    severity: int
    auto_action: ModerationAutoAction | None
    requires_proof: bool
    icon: str
    color: str


MODERATION_CATEGORIES: tuple[CategoryMetadata, ...] = (
    CategoryMetadata(
        "ai_undisclosed", "AI Content Not Disclosed",
        "Content appears to be AI-generated but user did not disclose it",
        2, None, False, "🤖", "#f59e0b",
    ),
    CategoryMetadata(
        "nsfw", "NSFW Content",
        "Content contains nudity, sexual content, or graphic violence",
        4, ModerationAutoAction.REMOVE, False, "🔞", "#ef4444",
    ),
    CategoryMetadata(
        "spam", "Spam",
        "Unsolicited advertising, repeated posts, or promotional content",
        3, ModerationAutoAction.WARN, False, "📧", "#f97316",
    ),
    CategoryMetadata(
        "harassment", "Harassment",
        "Bullying, threatening, or targeting individuals or groups",
        5, ModerationAutoAction.BAN, True, "⚠️", "#dc2626",
    ),
    CategoryMetadata(
        "copyright", "Copyright Violation",
        "Content uses copyrighted material without permission",
        4, ModerationAutoAction.REMOVE, True, "©️", "#8b5cf6",
    ),
    CategoryMetadata(
        "misinformation", "Misinformation",
        "Deliberately false or misleading information",
        3, None, True, "❌", "#dc2626",
    ),
    CategoryMetadata(
        "fake_content", "Fake/Manipulated Content",
        "Deepfakes, altered images, or fabricated content",
        5, ModerationAutoAction.REMOVE, True, "🎭", "#be123c",
    ),
    CategoryMetadata(
        "off_topic", "Off-Topic Content",
        "Content not related to creative work or collaboration",
        1, None, False, "📍", "#6b7280",
    ),
    CategoryMetadata(
        "hate_speech", "Hate Speech",
        "Content promoting hate or discrimination based on identity",
        5, ModerationAutoAction.BAN, True, "🚫", "#991b1b",
    ),
    CategoryMetadata(
        "self_harm", "Self-Harm Content",
        "Content promoting or glorifying self-harm or suicide",
        5, ModerationAutoAction.REMOVE, False, "💔", "#7f1d1d",
    ),
    CategoryMetadata(
        "other", "Other",
        "Other issues not covered by specific categories",
        1, None, False, "📝", "#9ca3af",
    ),
)

_BY_KEY: dict[str, CategoryMetadata] = {c.key: c for c in MODERATION_CATEGORIES}


def category_keys() -> list[str]:
    return [c.key for c in MODERATION_CATEGORIES]


def is_valid_category(key: str) -> bool:
    return key in _BY_KEY


def get_category_metadata(key: str) -> CategoryMetadata | None:
    return _BY_KEY.get(key)


def sort_by_severity(keys: list[str]) -> list[str]:
    """Order keys most severe first. Unknown keys are dropped. Stable for ties."""
    return sorted(
        (k for k in keys if k in _BY_KEY),
        key=lambda k: _BY_KEY[k].severity,
        reverse=True,
    )


def categories_requiring_proof() -> list[str]:
    return [c.key for c in MODERATION_CATEGORIES if c.requires_proof]


def categories_in_severity_band(min_severity: int, max_severity: int = 5) -> list[str]:
    return [
        c.key for c in MODERATION_CATEGORIES
        if min_severity <= c.severity <= max_severity
    ]
