"""Post Schemas — post creation input and the post/feed read models.

Invariants:
    - Files referenced by PostCreate are already uploaded (media endpoints); only
      their metadata travels here
    - Portfolio details accepted only with post_type PORTFOLIO (ignored otherwise)
    - Read models built from ORM rows via from_attributes; nested shapes flattened
      by services/publish_posts.serialize_post

Design Decisions:
    - Link media share one schema for video and audio: same columns in PostMedia
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from cresp.core.domain_types import PostType


class UploadedFile(BaseModel):
    key: str | None = None
    url: str = Field(min_length=1, max_length=1000)
    file_name: str | None = Field(None, max_length=255)
    size: int | None = Field(None, ge=0)
    mime_type: str | None = Field(None, max_length=100)
    width: int | None = Field(None, ge=0)
    height: int | None = Field(None, ge=0)


class MediaLink(BaseModel):
    provider: str = Field(max_length=50)
    external_id: str = Field(max_length=255)
    url: str = Field(min_length=1, max_length=1000)
    thumbnail: str | None = Field(None, max_length=1000)
    duration: int | None = Field(None, ge=0)


class PortfolioDetails(BaseModel):
    project_title: str = Field(min_length=1, max_length=200)
    project_type: str | None = Field(None, max_length=50)
    project_status: str = Field("COMPLETED", max_length=20)
    user_role: str | None = Field(None, max_length=100)
    start_date: datetime | None = None
    end_date: datetime | None = None
    duration: str | None = Field(None, max_length=50)
    is_team_project: bool = False
    team_size: int | None = Field(None, ge=1)
    responsibilities: list[str] = Field(default_factory=list)
    key_contributions: str | None = None
    technologies: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    live_url: str | None = Field(None, max_length=500)
    repository_url: str | None = Field(None, max_length=500)
    case_study_url: str | None = Field(None, max_length=500)
    problem_statement: str | None = None
    solution: str | None = None
    impact: str | None = None
    challenges: str | None = None
    lessons_learned: str | None = None


class PostCreate(BaseModel):
    post_type: PostType = PostType.CASUAL
    content: str | None = Field(None, max_length=10_000)
    is_ai_generated: bool = False
    professional_role_ids: list[str] = Field(default_factory=list)
    hashtags: list[str] = Field(default_factory=list, max_length=30)
    images: list[UploadedFile] = Field(default_factory=list)
    videos: list[MediaLink] = Field(default_factory=list)
    audios: list[MediaLink] = Field(default_factory=list)
    documents: list[UploadedFile] = Field(default_factory=list)
    portfolio: PortfolioDetails | None = None

    def media_count(self) -> int:
        return len(self.images) + len(self.videos) + len(self.audios) + len(self.documents)


class PostCreated(BaseModel):
    message: str = "Post created successfully"
    post_id: UUID
    is_first_portfolio_post: bool
    is_first_casual_post: bool


# --- Read models -------------------------------------------------------------

class AuthorSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    name: str | None = None
    image: str | None = None


class PostRoleSummary(BaseModel):
    id: str
    key: str
    name: str
    icon: str | None = None


class MediaOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    media_type: str
    url: str
    file_name: str | None = None
    file_size: int | None = None
    mime_type: str | None = None
    width: int | None = None
    height: int | None = None
    provider: str | None = None
    external_id: str | None = None
    thumbnail_url: str | None = None
    duration: int | None = None
    display_order: int


class PortfolioOut(PortfolioDetails):
    model_config = ConfigDict(from_attributes=True)


class PostOut(BaseModel):
    id: UUID
    post_type: str
    content: str | None
    is_ai_generated: bool
    status: str
    visibility: str
    like_count: int
    comment_count: int
    published_at: datetime | None
    created_at: datetime
    author: AuthorSummary
    professional_roles: list[PostRoleSummary]
    hashtags: list[str]
    media: list[MediaOut]
    portfolio: PortfolioOut | None = None


class PostPage(BaseModel):
    posts: list[PostOut]
    next_cursor: UUID | None
    has_more: bool
