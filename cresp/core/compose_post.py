"""Post Composition — pure validation and shaping of a new post before persistence.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Portfolio posts carry at least one professional role, all held by the author
    - Every post has non-blank content or at least one media item
    - Media display order is images → videos → audios → documents, 0-based, gapless
    - Hashtags are lowercased, stripped of a leading '#', deduplicated in first-seen order

Design Decisions:
    - MediaDraft is a plain dict of ORM column values: service unpacks it straight
      into PostMedia(**draft) without a translation layer
    - Audio links reuse the provider/external-id columns of video links
"""

from cresp.core.domain_types import MediaType, PostType


def check_post_roles(
    post_type: PostType, role_ids: list[str], owned_role_ids: set[str],
) -> str | None:
    """Portfolio role rule. owned_role_ids: requested ids the author actually holds."""
    if post_type != PostType.PORTFOLIO:
        return None
    if not role_ids:
        return "Professional roles are required for portfolio posts"
    if set(role_ids) - owned_role_ids:
        return "One or more professional roles are invalid"
    return None


def has_text(content: str | None) -> bool:
    return bool(content and content.strip())


def check_post_body(content: str | None, media_count: int) -> str | None:
    if not has_text(content) and media_count == 0:
        return "Post must have either content or media"
    return None


def normalize_hashtags(raw: list[str]) -> list[str]:
    seen: list[str] = []
    for tag in raw:
        name = tag.strip().lstrip("#").lower()
        if name and name not in seen:
            seen.append(name)
    return seen


def order_media(
    images: list[dict],
    videos: list[dict],
    audios: list[dict],
    documents: list[dict],
) -> list[dict]:
    """Flatten request media into PostMedia column dicts with display_order assigned."""
    drafts: list[dict] = []
    for img in images:
        drafts.append({
            "media_type": MediaType.IMAGE.value,
            "url": img["url"],
            "file_name": img.get("file_name"),
            "file_size": img.get("size"),
            "mime_type": img.get("mime_type"),
            "width": img.get("width"),
            "height": img.get("height"),
        })
    for media_type, links in (
        (MediaType.VIDEO_LINK, videos), (MediaType.AUDIO_LINK, audios),
    ):
        for link in links:
            drafts.append({
                "media_type": media_type.value,
                "url": link["url"],
                "provider": link.get("provider"),
                "external_id": link.get("external_id"),
                "thumbnail_url": link.get("thumbnail"),
                "duration": link.get("duration"),
            })
    for doc in documents:
        drafts.append({
            "media_type": MediaType.DOCUMENT.value,
            "url": doc["url"],
            "file_name": doc.get("file_name"),
            "file_size": doc.get("size"),
            "mime_type": doc.get("mime_type"),
        })
    for position, draft in enumerate(drafts):
        draft["display_order"] = position
    return drafts


def is_first_of_type(post_type: PostType, portfolio_count: int, casual_count: int) -> tuple[bool, bool]:
    """(is_first_portfolio_post, is_first_casual_post) given counters after increment."""
    return (
        post_type == PostType.PORTFOLIO and portfolio_count == 1,
        post_type == PostType.CASUAL and casual_count == 1,
    )
