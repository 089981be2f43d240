"""Post Service — create, read, soft-delete posts and shape them for the API.

Invariants:
    - create_post writes post, privacy, portfolio, roles, hashtags, media, analytics
      and the author's post counter in ONE commit
    - Portfolio posts need >= 1 professional role, all held by the author
    - Every post has non-blank content or media
    - Soft-deleted posts are invisible to get_post (404); deleting twice is a 400
    - Only the author may delete a post

Design Decisions:
    - Post counters incremented with a SQL expression, then re-read: the
      is_first_* flags reflect the committed counter, not a stale ORM copy
    - Casual posts keep only the requested roles the author holds (no error):
      roles are optional decoration there
"""

import logging
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.core.compose_post import (
    check_post_body, check_post_roles, has_text, is_first_of_type, normalize_hashtags, order_media,
)
from cresp.core.domain_types import (
    ActivityStatus, PostStatus, PostType, PostVisibility, ReferralStatus,
)
from cresp.core.errors import (
    InputValidationError, PermissionDeniedError, ResourceNotFoundError,
)
from cresp.core.time_utils import utcnow
from cresp.models.post import (
    Hashtag, PortfolioPost, Post, PostAnalytics, PostHashtag, PostMedia,
    PostPrivacy, PostProfessionalRole,
)
from cresp.models.professional_role import UserProfessionalRole
from cresp.models.user import User
from cresp.schemas.post import (
    AuthorSummary, MediaOut, PortfolioOut, PostCreate, PostCreated, PostOut, PostRoleSummary,
)
from cresp.services.log_activity import ActivityLogger
from cresp.services.track_referrals import ReferralService

logger = logging.getLogger(__name__)


def serialize_post(post: Post) -> PostOut:
    return PostOut(
        id=post.id,
        post_type=post.post_type,
        content=post.content,
        is_ai_generated=post.is_ai_generated,
        status=post.status,
        visibility=post.visibility,
        like_count=post.like_count,
        comment_count=post.comment_count,
        published_at=post.published_at,
        created_at=post.created_at,
        author=AuthorSummary.model_validate(post.author),
        professional_roles=[
            PostRoleSummary(
                id=link.professional_role.id,
                key=link.professional_role.key,
                name=link.professional_role.name,
                icon=link.professional_role.icon,
            )
            for link in post.professional_roles
        ],
        hashtags=[link.hashtag.name for link in post.hashtags],
        media=[MediaOut.model_validate(m) for m in post.media],
        portfolio=PortfolioOut.model_validate(post.portfolio) if post.portfolio else None,
    )


class PostService:

    def __init__(self, db: AsyncSession, activity: ActivityLogger):
        self.db = db
        self.activity = activity

    async def _owned_role_ids(self, user_id: UUID, role_ids: list[str]) -> set[str]:
        if not role_ids:
            return set()
        result = await self.db.execute(
            select(UserProfessionalRole.professional_role_id)
            .where(UserProfessionalRole.user_id == user_id)
            .where(UserProfessionalRole.professional_role_id.in_(role_ids))
        )
        return set(result.scalars().all())

    async def _attach_hashtags(self, post_id: UUID, names: list[str]) -> None:
        now = utcnow()
        for name in names:
            result = await self.db.execute(select(Hashtag).where(Hashtag.name == name))
            tag = result.scalar_one_or_none()
            if tag is None:
                tag = Hashtag(name=name, use_count=1, last_used_at=now)
                self.db.add(tag)
                await self.db.flush()
            else:
                tag.use_count += 1
                tag.last_used_at = now
            self.db.add(PostHashtag(post_id=post_id, hashtag_id=tag.id))

    async def create_post(self, user_id: UUID, body: PostCreate) -> PostCreated:
        role_ids = list(dict.fromkeys(body.professional_role_ids))
        owned = await self._owned_role_ids(user_id, role_ids)
        message = check_post_roles(body.post_type, role_ids, owned) or check_post_body(
            body.content, body.media_count(),
        )
        if message:
            raise InputValidationError(message)

        now = utcnow()
        post = Post(
            user_id=user_id,
            post_type=body.post_type.value,
            content=body.content if has_text(body.content) else None,
            is_ai_generated=body.is_ai_generated,
            status=PostStatus.PUBLISHED.value,
            visibility=PostVisibility.PUBLIC.value,
            published_at=now,
        )
        self.db.add(post)
        await self.db.flush()

        self.db.add(PostPrivacy(post_id=post.id))
        if body.post_type == PostType.PORTFOLIO and body.portfolio is not None:
            self.db.add(PortfolioPost(post_id=post.id, **body.portfolio.model_dump()))
        for role_id in role_ids:
            if role_id in owned:
                self.db.add(PostProfessionalRole(
                    post_id=post.id, user_id=user_id, professional_role_id=role_id,
                ))
        await self._attach_hashtags(post.id, normalize_hashtags(body.hashtags))
        for draft in order_media(
            [m.model_dump() for m in body.images],
            [m.model_dump() for m in body.videos],
            [m.model_dump() for m in body.audios],
            [m.model_dump() for m in body.documents],
        ):
            self.db.add(PostMedia(post_id=post.id, **draft))
        self.db.add(PostAnalytics(post_id=post.id))

        counter = (
            User.portfolio_post_count if body.post_type == PostType.PORTFOLIO
            else User.casual_post_count
        )
        await self.db.execute(
            update(User).where(User.id == user_id).values({counter: counter + 1}),
        )
        await self.db.commit()

        counts = (await self.db.execute(
            select(User.portfolio_post_count, User.casual_post_count).where(User.id == user_id),
        )).one()
        first_portfolio, first_casual = is_first_of_type(body.post_type, *counts)
        logger.info("Post created", extra={"user_id": str(user_id), "post_id": str(post.id)})

        await self.activity.record(
            "post.create",
            user_id=user_id,
            resource_type="post",
            resource_id=str(post.id),
            metadata={
                "post_type": body.post_type.value,
                "has_media": body.media_count() > 0,
                "is_first_post": first_portfolio or first_casual,
            },
        )
        if sum(counts) == 1:
            await ReferralService(self.db).advance_quietly(user_id, ReferralStatus.FIRST_POST)

        return PostCreated(
            post_id=post.id,
            is_first_portfolio_post=first_portfolio,
            is_first_casual_post=first_casual,
        )

    async def get_post(self, post_id: UUID) -> Post:
        result = await self.db.execute(
            select(Post)
            .where(Post.id == post_id, Post.deleted_at.is_(None))
            .execution_options(populate_existing=True)
        )
        post = result.scalar_one_or_none()
        if post is None:
            raise ResourceNotFoundError("Post", str(post_id))
        return post

    async def delete_post(self, post_id: UUID, user_id: UUID) -> None:
        post = await self.db.get(Post, post_id)
        if post is None:
            raise ResourceNotFoundError("Post", str(post_id))
        if post.user_id != user_id:
            await self.activity.record(
                "post.delete", user_id=user_id, resource_type="post", resource_id=str(post_id),
                status=ActivityStatus.FAILURE, error_message="Not the post author",
            )
            raise PermissionDeniedError("You can only delete your own posts")
        if post.deleted_at is not None:
            raise InputValidationError("Post is already deleted")

        post.deleted_at = utcnow()
        await self.db.commit()
        await self.activity.record(
            "post.delete", user_id=user_id, resource_type="post", resource_id=str(post_id),
            metadata={"post_type": post.post_type},
        )
