"""Post & Feed Routes — home feed, post creation, detail and soft delete.

Invariants:
    - Feed and post detail are public; create/delete require a session
    - Unknown sort values fall back to latest (never a 400)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.api.dependencies import get_activity_logger, get_current_user
from cresp.infrastructure.database import get_db
from cresp.models.user import User
from cresp.schemas.auth import MessageResponse
from cresp.schemas.post import PostCreate, PostCreated, PostOut, PostPage
from cresp.services.load_feed import FeedService
from cresp.services.log_activity import ActivityLogger
from cresp.services.publish_posts import PostService, serialize_post

router = APIRouter(prefix="/api/v1", tags=["posts"])


def get_post_service(
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
) -> PostService:
    return PostService(db, activity)


@router.get("/feed", response_model=PostPage)
async def load_feed(
    cursor: UUID | None = Query(None),
    sort: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await FeedService(db).load_feed(cursor=cursor, sort=sort)


@router.post("/posts", response_model=PostCreated, status_code=status.HTTP_201_CREATED)
async def create_post(
    body: PostCreate,
    user: User = Depends(get_current_user),
    posts: PostService = Depends(get_post_service),
):
    return await posts.create_post(user.id, body)


@router.get("/posts/{post_id}", response_model=PostOut)
async def get_post(post_id: UUID, posts: PostService = Depends(get_post_service)):
    return serialize_post(await posts.get_post(post_id))


@router.delete("/posts/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: UUID,
    user: User = Depends(get_current_user),
    posts: PostService = Depends(get_post_service),
):
    await posts.delete_post(post_id, user.id)
    return MessageResponse(message="Post deleted successfully")


@router.get("/users/{user_id}/posts", response_model=PostPage)
async def list_user_posts(
    user_id: UUID,
    cursor: UUID | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await FeedService(db).user_posts(user_id, cursor=cursor)
