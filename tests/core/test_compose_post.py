"""Post Composition — verifies role, body, hashtag and media ordering rules."""

from cresp.core.compose_post import (
    check_post_body, check_post_roles, is_first_of_type, normalize_hashtags, order_media,
)
from cresp.core.domain_types import PostType


def test_portfolio_requires_roles():
    assert check_post_roles(PostType.PORTFOLIO, [], set()) == (
        "Professional roles are required for portfolio posts"
    )


def test_portfolio_roles_must_be_owned():
    message = check_post_roles(PostType.PORTFOLIO, ["prof_actor_001"], {"prof_director_001"})
    assert message == "One or more professional roles are invalid"


def test_casual_posts_skip_role_rule():
    assert check_post_roles(PostType.CASUAL, ["prof_actor_001"], set()) is None


def test_body_requires_text_or_media():
    assert check_post_body("   ", 0) == "Post must have either content or media"
    assert check_post_body(None, 1) is None
    assert check_post_body("hello", 0) is None


def test_hashtags_normalized_and_deduplicated():
    assert normalize_hashtags(["#Film", "film", " #Music ", "#", ""]) == ["film", "music"]


def test_media_order_is_images_videos_audios_documents():
    drafts = order_media(
        images=[{"url": "i1"}, {"url": "i2"}],
        videos=[{"url": "v1", "provider": "youtube"}],
        audios=[{"url": "a1"}],
        documents=[{"url": "d1", "size": 10}],
    )
    assert [d["url"] for d in drafts] == ["i1", "i2", "v1", "a1", "d1"]
    assert [d["display_order"] for d in drafts] == [0, 1, 2, 3, 4]
    assert [d["media_type"] for d in drafts] == [
        "IMAGE", "IMAGE", "VIDEO_LINK", "AUDIO_LINK", "DOCUMENT",
    ]
    assert drafts[4]["file_size"] == 10


def test_first_of_type_flags():
    assert is_first_of_type(PostType.PORTFOLIO, 1, 0) == (True, False)
    assert is_first_of_type(PostType.CASUAL, 1, 1) == (False, True)
    assert is_first_of_type(PostType.CASUAL, 0, 2) == (False, False)
