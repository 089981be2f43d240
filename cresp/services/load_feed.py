"""Feed Service — cursor-paginated post listings (home feed and profile pages).

Invariants:
    - Only PUBLIC, non-deleted posts in the home feed
    - Ordering is total: sort column desc, then created_at desc, then id desc
    - Cursor is the id of the last post on the previous page and is excluded
    - Unknown or filtered-out cursor yields an empty page (never restarts from the top)
    - At most FEED_PAGE_SIZE posts per page; one extra row fetched to compute has_more

Design Decisions:
    - Keyset predicate as a row-value comparison (tuple_ < tuple_): stable under
      concurrent inserts where OFFSET paging would skip or repeat rows
"""

import logging
from uuid import UUID

from sqlalchemy import select, tuple_
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.core.domain_types import FeedSort, PostVisibility
from cresp.core.paginate_feed import FEED_PAGE_SIZE, normalize_sort, split_page
from cresp.models.post import Post
from cresp.schemas.post import PostPage
from cresp.services.publish_posts import serialize_post

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    FeedSort.LATEST: None,
    FeedSort.POPULAR: Post.like_count,
    FeedSort.DISCUSSED: Post.comment_count,
}


def _sort_key(sort: FeedSort) -> list:
    primary = _SORT_COLUMNS[sort]
    columns = [Post.created_at, Post.id]
    return [primary, *columns] if primary is not None else columns


class FeedService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def page(
        self, *filters, sort: str | None = None, cursor: UUID | None = None,
        page_size: int = FEED_PAGE_SIZE,
    ) -> PostPage:
        order = normalize_sort(sort)
        key = _sort_key(order)
        query = select(Post).where(Post.deleted_at.is_(None), *filters)

        if cursor is not None:
            anchor = (await self.db.execute(
                select(*key).where(Post.id == cursor, Post.deleted_at.is_(None), *filters),
            )).one_or_none()
            if anchor is None:
                return PostPage(posts=[], next_cursor=None, has_more=False)
            query = query.where(tuple_(*key) < tuple(anchor))

        result = await self.db.execute(
            query.order_by(*(col.desc() for col in key)).limit(page_size + 1),
        )
        rows, has_more = split_page(result.scalars().all(), page_size)
        return PostPage(
            posts=[serialize_post(p) for p in rows],
            next_cursor=rows[-1].id if has_more and rows else None,
            has_more=has_more,
        )

    async def load_feed(self, cursor: UUID | None = None, sort: str | None = None) -> PostPage:
        return await self.page(
            Post.visibility == PostVisibility.PUBLIC.value, sort=sort, cursor=cursor,
        )

    async def user_posts(self, user_id: UUID, cursor: UUID | None = None) -> PostPage:
        return await self.page(
            Post.user_id == user_id, Post.visibility == PostVisibility.PUBLIC.value, cursor=cursor,
        )
