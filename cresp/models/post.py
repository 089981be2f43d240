"""Post ORM — posts and everything created alongside them.

Invariants:
    - Post.post_type is CASUAL or PORTFOLIO; only PORTFOLIO posts get a PortfolioPost row
    - Every post gets exactly one PostPrivacy and one PostAnalytics row at creation
    - deleted_at set means soft-deleted: hidden from feed, detail and profile listings
    - Hashtag.name is unique and lowercase; use_count increments per tagged post
    - PostMedia.display_order is 0-based and gapless per post

Design Decisions:
    - One file for the Post aggregate (post + children): the children are never
      written outside post creation, so they change together
    - Children eager-loaded with selectin: feed serialization touches all of them,
      and async sessions cannot lazy-load
    - List-valued portfolio fields stored as JSON arrays (portable across PostgreSQL/SQLite)
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    String, Text, Integer, Boolean, DateTime, ForeignKey, JSON, UniqueConstraint, Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from cresp.db.base import Base, utc_now


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_feed", "visibility", "deleted_at", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    post_type: Mapped[str] = mapped_column(String(20), nullable=False, default="CASUAL")
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_ai_generated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PUBLISHED")
    visibility: Mapped[str] = mapped_column(String(20), nullable=False, default="PUBLIC")
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now,
    )

    author: Mapped["User"] = relationship("User", lazy="selectin")
    privacy: Mapped["PostPrivacy | None"] = relationship(
        "PostPrivacy", uselist=False, cascade="all, delete-orphan", lazy="selectin",
    )
    portfolio: Mapped["PortfolioPost | None"] = relationship(
        "PortfolioPost", uselist=False, cascade="all, delete-orphan", lazy="selectin",
    )
    professional_roles: Mapped[list["PostProfessionalRole"]] = relationship(
        "PostProfessionalRole", cascade="all, delete-orphan", lazy="selectin",
    )
    hashtags: Mapped[list["PostHashtag"]] = relationship(
        "PostHashtag", cascade="all, delete-orphan", lazy="selectin",
    )
    media: Mapped[list["PostMedia"]] = relationship(
        "PostMedia", cascade="all, delete-orphan", lazy="selectin",
        order_by="PostMedia.display_order",
    )


class PostPrivacy(Base):
    __tablename__ = "post_privacy"

    post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True,
    )
    can_comment: Mapped[str] = mapped_column(String(20), nullable=False, default="EVERYONE")
    can_share: Mapped[str] = mapped_column(String(20), nullable=False, default="EVERYONE")
    can_download: Mapped[str] = mapped_column(String(20), nullable=False, default="CONNECTIONS")


class PortfolioPost(Base):
    """Structured project metadata for a PORTFOLIO post."""
    __tablename__ = "portfolio_posts"

    post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True,
    )
    project_title: Mapped[str] = mapped_column(String(200), nullable=False)
    project_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    project_status: Mapped[str] = mapped_column(String(20), nullable=False, default="COMPLETED")
    user_role: Mapped[str | None] = mapped_column(String(100), nullable=True)
    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    duration: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_team_project: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    team_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    responsibilities: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    key_contributions: Mapped[str | None] = mapped_column(Text, nullable=True)
    technologies: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    tools: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    skills: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    live_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    repository_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    case_study_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    problem_statement: Mapped[str | None] = mapped_column(Text, nullable=True)
    solution: Mapped[str | None] = mapped_column(Text, nullable=True)
    impact: Mapped[str | None] = mapped_column(Text, nullable=True)
    challenges: Mapped[str | None] = mapped_column(Text, nullable=True)
    lessons_learned: Mapped[str | None] = mapped_column(Text, nullable=True)


class PostProfessionalRole(Base):
    __tablename__ = "post_professional_roles"
    __table_args__ = (
        UniqueConstraint("post_id", "professional_role_id", name="uq_post_professional_role"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    professional_role_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("professional_roles.id", ondelete="CASCADE"), nullable=False,
    )
    reputation_earned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    professional_role: Mapped["ProfessionalRole"] = relationship(
        "ProfessionalRole", lazy="selectin",
    )


class Hashtag(Base):
    __tablename__ = "hashtags"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    use_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now,
    )


class PostHashtag(Base):
    __tablename__ = "post_hashtags"

    post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True,
    )
    hashtag_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("hashtags.id", ondelete="CASCADE"), primary_key=True,
    )

    hashtag: Mapped["Hashtag"] = relationship("Hashtag", lazy="selectin")


class PostMedia(Base):
    """Uploaded file (IMAGE, DOCUMENT) or external link (VIDEO_LINK, AUDIO_LINK)."""
    __tablename__ = "post_media"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    media_type: Mapped[str] = mapped_column(String(20), nullable=False)
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    file_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    file_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    mime_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    provider: Mapped[str | None] = mapped_column(String(50), nullable=True)
    external_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now,
    )


class PostAnalytics(Base):
    __tablename__ = "post_analytics"

    post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True,
    )
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unique_view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    share_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    download_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now,
    )
