"""Moderation ORM — report categories, the per-(post, category) queue, and reports.

Invariants:
    - ModerationQueue unique per (post_id, category_id); aggregates every report for that pair
    - average_weight == total_weight / report_count
    - ModerationReport unique per (post_id, reporter_id): one report per post per user
    - UserReport unique per (reported_user_id, reporter_id)

Design Decisions:
    - Reporter reputation/trust copied onto the report: later trust changes do not
      rewrite history
    - Category rows keyed by stable string ids (modcat_<key>_001) like other reference data
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    String, Text, Integer, Float, Boolean, DateTime, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from cresp.db.base import Base, utc_now


class ModerationCategory(Base):
    __tablename__ = "moderation_categories"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    key: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    severity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    auto_action: Mapped[str | None] = mapped_column(String(20), nullable=True)
    requires_proof: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    icon: Mapped[str | None] = mapped_column(String(20), nullable=True)
    color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class ModerationQueue(Base):
    __tablename__ = "moderation_queue"
    __table_args__ = (
        UniqueConstraint("post_id", "category_id", name="uq_moderation_queue_post_category"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False,
    )
    post_author_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    category_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("moderation_categories.id"), nullable=False,
    )
    report_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_weight: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    average_weight: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="NORMAL")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING", index=True)
    resolved_by_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
    )
    resolution_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now,
    )

    category: Mapped["ModerationCategory"] = relationship("ModerationCategory", lazy="selectin")


class ModerationReport(Base):
    __tablename__ = "moderation_reports"
    __table_args__ = (
        UniqueConstraint("post_id", "reporter_id", name="uq_moderation_report_post_reporter"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    queue_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("moderation_queue.id", ondelete="CASCADE"), nullable=False,
    )
    post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False,
    )
    reporter_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    category_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("moderation_categories.id"), nullable=False,
    )
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    report_weight: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    reporter_reputation: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reporter_trust_score: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now,
    )


class UserReport(Base):
    __tablename__ = "user_reports"
    __table_args__ = (
        UniqueConstraint("reported_user_id", "reporter_id", name="uq_user_report_reporter"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    reported_user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    reporter_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    category_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("moderation_categories.id"), nullable=False,
    )
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="NORMAL")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now,
    )
