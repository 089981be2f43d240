"""Initial schema — accounts, RBAC, professional roles, posts, moderation,
referrals, feedback, activity log and waitlist.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _now() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())


def _updated() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())


def _user_fk(name: str = "user_id", nullable: bool = False, ondelete: str = "CASCADE") -> sa.Column:
    return sa.Column(
        name, UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete=ondelete), nullable=nullable,
    )


def _post_fk(**kwargs) -> sa.Column:
    return sa.Column(
        "post_id", UUID(as_uuid=True), sa.ForeignKey("posts.id", ondelete="CASCADE"), **kwargs,
    )


def upgrade() -> None:
    # ── accounts ──
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.String(30), nullable=False, unique=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("bio", sa.Text, nullable=True),
        sa.Column("location", sa.String(100), nullable=True),
        sa.Column("onboarding_completed", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("total_reputation", sa.Integer, nullable=False, server_default="0"),
        sa.Column("trust_score", sa.Float, nullable=False, server_default="1.0"),
        sa.Column("portfolio_post_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("casual_post_count", sa.Integer, nullable=False, server_default="0"),
        _now(),
        _updated(),
    )
    op.create_table(
        "auth_accounts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False, unique=True,
        ),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("is_verified", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        _now(),
        _updated(),
    )
    for table in ("email_verification_tokens", "password_reset_tokens"):
        op.create_table(
            table,
            sa.Column("id", UUID(as_uuid=True), primary_key=True),
            _user_fk(),
            sa.Column("token", sa.String(500), nullable=False, unique=True),
            sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("consumed_at", sa.DateTime(timezone=True), nullable=True),
            _now(),
        )
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])

    # ── RBAC ──
    op.create_table(
        "roles",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("key", sa.String(50), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("priority", sa.Integer, nullable=False, server_default="0"),
        _now(),
    )
    op.create_table(
        "actions",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("key", sa.String(100), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("min_role_priority", sa.Integer, nullable=True),
        _now(),
    )
    op.create_table(
        "authorizations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("subject_type", sa.String(10), nullable=False),
        sa.Column("subject_id", sa.String(64), nullable=False),
        sa.Column(
            "action_id", sa.String(64), sa.ForeignKey("actions.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("effect", sa.String(10), nullable=False, server_default="ALLOW"),
        _now(),
        sa.UniqueConstraint("subject_type", "subject_id", "action_id", name="uq_authorization_subject_action"),
    )
    op.create_index("ix_authorizations_subject_id", "authorizations", ["subject_id"])
    op.create_table(
        "user_roles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _user_fk(),
        sa.Column("role_id", sa.String(64), sa.ForeignKey("roles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "role_id", name="uq_user_role"),
    )
    op.create_index("ix_user_roles_user_id", "user_roles", ["user_id"])

    # ── professional roles ──
    op.create_table(
        "professional_roles",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("key", sa.String(50), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("icon", sa.String(20), nullable=True),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("display_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        _now(),
    )
    op.create_index("ix_professional_roles_category", "professional_roles", ["category"])
    op.create_table(
        "user_professional_roles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _user_fk(),
        sa.Column(
            "professional_role_id", sa.String(64),
            sa.ForeignKey("professional_roles.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("is_primary", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("years_experience", sa.Integer, nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "professional_role_id", name="uq_user_professional_role"),
    )
    op.create_index("ix_user_professional_roles_user_id", "user_professional_roles", ["user_id"])

    # ── posts ──
    op.create_table(
        "posts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _user_fk(),
        sa.Column("post_type", sa.String(20), nullable=False, server_default="CASUAL"),
        sa.Column("content", sa.Text, nullable=True),
        sa.Column("is_ai_generated", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("status", sa.String(20), nullable=False, server_default="PUBLISHED"),
        sa.Column("visibility", sa.String(20), nullable=False, server_default="PUBLIC"),
        sa.Column("like_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("comment_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        _now(),
        _updated(),
    )
    op.create_index("ix_posts_user_id", "posts", ["user_id"])
    op.create_index("ix_posts_feed", "posts", ["visibility", "deleted_at", "created_at"])
    op.create_table(
        "post_privacy",
        _post_fk(primary_key=True),
        sa.Column("can_comment", sa.String(20), nullable=False, server_default="EVERYONE"),
        sa.Column("can_share", sa.String(20), nullable=False, server_default="EVERYONE"),
        sa.Column("can_download", sa.String(20), nullable=False, server_default="CONNECTIONS"),
    )
    op.create_table(
        "portfolio_posts",
        _post_fk(primary_key=True),
        sa.Column("project_title", sa.String(200), nullable=False),
        sa.Column("project_type", sa.String(50), nullable=True),
        sa.Column("project_status", sa.String(20), nullable=False, server_default="COMPLETED"),
        sa.Column("user_role", sa.String(100), nullable=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duration", sa.String(50), nullable=True),
        sa.Column("is_team_project", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("team_size", sa.Integer, nullable=True),
        sa.Column("responsibilities", sa.JSON, nullable=False),
        sa.Column("key_contributions", sa.Text, nullable=True),
        sa.Column("technologies", sa.JSON, nullable=False),
        sa.Column("tools", sa.JSON, nullable=False),
        sa.Column("skills", sa.JSON, nullable=False),
        sa.Column("live_url", sa.String(500), nullable=True),
        sa.Column("repository_url", sa.String(500), nullable=True),
        sa.Column("case_study_url", sa.String(500), nullable=True),
        sa.Column("problem_statement", sa.Text, nullable=True),
        sa.Column("solution", sa.Text, nullable=True),
        sa.Column("impact", sa.Text, nullable=True),
        sa.Column("challenges", sa.Text, nullable=True),
        sa.Column("lessons_learned", sa.Text, nullable=True),
    )
    op.create_table(
        "post_professional_roles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _post_fk(nullable=False),
        _user_fk(),
        sa.Column(
            "professional_role_id", sa.String(64),
            sa.ForeignKey("professional_roles.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("reputation_earned", sa.Integer, nullable=False, server_default="0"),
        sa.UniqueConstraint("post_id", "professional_role_id", name="uq_post_professional_role"),
    )
    op.create_table(
        "hashtags",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("use_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        _now(),
    )
    op.create_table(
        "post_hashtags",
        _post_fk(primary_key=True),
        sa.Column(
            "hashtag_id", UUID(as_uuid=True), sa.ForeignKey("hashtags.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_table(
        "post_media",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _post_fk(nullable=False),
        sa.Column("media_type", sa.String(20), nullable=False),
        sa.Column("url", sa.String(1000), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=True),
        sa.Column("file_size", sa.Integer, nullable=True),
        sa.Column("mime_type", sa.String(100), nullable=True),
        sa.Column("width", sa.Integer, nullable=True),
        sa.Column("height", sa.Integer, nullable=True),
        sa.Column("provider", sa.String(50), nullable=True),
        sa.Column("external_id", sa.String(255), nullable=True),
        sa.Column("thumbnail_url", sa.String(1000), nullable=True),
        sa.Column("duration", sa.Integer, nullable=True),
        sa.Column("display_order", sa.Integer, nullable=False, server_default="0"),
        _now(),
    )
    op.create_index("ix_post_media_post_id", "post_media", ["post_id"])
    op.create_table(
        "post_analytics",
        _post_fk(primary_key=True),
        sa.Column("view_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("unique_view_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("share_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("download_count", sa.Integer, nullable=False, server_default="0"),
        _updated(),
    )

    # ── moderation ──
    op.create_table(
        "moderation_categories",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("key", sa.String(50), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("severity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("auto_action", sa.String(20), nullable=True),
        sa.Column("requires_proof", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("icon", sa.String(20), nullable=True),
        sa.Column("color", sa.String(20), nullable=True),
        sa.Column("display_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
    )
    op.create_table(
        "moderation_queue",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _post_fk(nullable=False),
        _user_fk("post_author_id"),
        sa.Column(
            "category_id", sa.String(64), sa.ForeignKey("moderation_categories.id"), nullable=False,
        ),
        sa.Column("report_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_weight", sa.Float, nullable=False, server_default="0"),
        sa.Column("average_weight", sa.Float, nullable=False, server_default="0"),
        sa.Column("priority", sa.String(10), nullable=False, server_default="NORMAL"),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        _user_fk("resolved_by_id", nullable=True, ondelete="SET NULL"),
        sa.Column("resolution_note", sa.Text, nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        _now(),
        _updated(),
        sa.UniqueConstraint("post_id", "category_id", name="uq_moderation_queue_post_category"),
    )
    op.create_index("ix_moderation_queue_status", "moderation_queue", ["status"])
    op.create_table(
        "moderation_reports",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "queue_id", UUID(as_uuid=True),
            sa.ForeignKey("moderation_queue.id", ondelete="CASCADE"), nullable=False,
        ),
        _post_fk(nullable=False),
        _user_fk("reporter_id"),
        sa.Column(
            "category_id", sa.String(64), sa.ForeignKey("moderation_categories.id"), nullable=False,
        ),
        sa.Column("details", sa.Text, nullable=True),
        sa.Column("report_weight", sa.Float, nullable=False, server_default="1.0"),
        sa.Column("reporter_reputation", sa.Integer, nullable=False, server_default="0"),
        sa.Column("reporter_trust_score", sa.Float, nullable=False, server_default="1.0"),
        _now(),
        sa.UniqueConstraint("post_id", "reporter_id", name="uq_moderation_report_post_reporter"),
    )
    op.create_table(
        "user_reports",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _user_fk("reported_user_id"),
        _user_fk("reporter_id"),
        sa.Column(
            "category_id", sa.String(64), sa.ForeignKey("moderation_categories.id"), nullable=False,
        ),
        sa.Column("reason", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("priority", sa.String(10), nullable=False, server_default="NORMAL"),
        _now(),
        sa.UniqueConstraint("reported_user_id", "reporter_id", name="uq_user_report_reporter"),
    )

    # ── referrals ──
    op.create_table(
        "referral_codes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False, unique=True,
        ),
        sa.Column("code", sa.String(32), nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("total_clicks", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_signups", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_conversions", sa.Integer, nullable=False, server_default="0"),
        _now(),
        _updated(),
    )
    op.create_table(
        "referral_clicks",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "referral_code_id", UUID(as_uuid=True),
            sa.ForeignKey("referral_codes.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.String(255), nullable=True),
        sa.Column("referrer", sa.String(500), nullable=True),
        sa.Column("landing_page", sa.String(500), nullable=True),
        sa.Column("converted_to_signup", sa.Boolean, nullable=False, server_default="false"),
        _user_fk("converted_user_id", nullable=True, ondelete="SET NULL"),
        sa.Column("converted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("clicked_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_referral_clicks_referral_code_id", "referral_clicks", ["referral_code_id"])
    op.create_table(
        "referrals",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "referral_code_id", UUID(as_uuid=True),
            sa.ForeignKey("referral_codes.id", ondelete="CASCADE"), nullable=False,
        ),
        _user_fk("referrer_id"),
        sa.Column(
            "referred_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False, unique=True,
        ),
        sa.Column("status", sa.String(30), nullable=False, server_default="SIGNED_UP"),
        sa.Column("signed_up_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("email_verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("profile_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("first_post_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("first_collaboration_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_referrals_referrer_id", "referrals", ["referrer_id"])

    # ── feedback, activity, waitlist ──
    op.create_table(
        "feedback_prompt_logs",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _user_fk(),
        sa.Column("trigger", sa.String(50), nullable=False),
        sa.Column("shown_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("dismissed", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("responded", sa.Boolean, nullable=False, server_default="false"),
    )
    op.create_index("ix_feedback_prompt_logs_user_id", "feedback_prompt_logs", ["user_id"])
    op.create_table(
        "user_feedback",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _user_fk(),
        sa.Column("feedback_type", sa.String(30), nullable=False),
        sa.Column("trigger", sa.String(50), nullable=False),
        sa.Column("rating", sa.Integer, nullable=True),
        sa.Column("comment", sa.Text, nullable=True),
        sa.Column("url", sa.String(500), nullable=True),
        sa.Column("user_agent", sa.String(255), nullable=True),
        _now(),
    )
    op.create_index("ix_user_feedback_user_id", "user_feedback", ["user_id"])
    op.create_table(
        "activity_logs",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _user_fk(nullable=True, ondelete="SET NULL"),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("action_category", sa.String(50), nullable=False),
        sa.Column("resource_type", sa.String(50), nullable=True),
        sa.Column("resource_id", sa.String(64), nullable=True),
        sa.Column("method", sa.String(10), nullable=True),
        sa.Column("endpoint", sa.String(255), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.String(255), nullable=True),
        sa.Column("duration", sa.Integer, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="success"),
        sa.Column("changes_before", sa.JSON, nullable=True),
        sa.Column("changes_after", sa.JSON, nullable=True),
        sa.Column("metadata", sa.JSON, nullable=True),
        sa.Column("error_message", sa.Text, nullable=True),
        _now(),
    )
    op.create_index("ix_activity_logs_user_id", "activity_logs", ["user_id"])
    op.create_index("ix_activity_logs_action", "activity_logs", ["action"])
    op.create_index("ix_activity_logs_created_at", "activity_logs", ["created_at"])
    op.create_table(
        "waitlist",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("feedback", sa.Text, nullable=True),
        sa.Column("source", sa.String(50), nullable=False, server_default="landing_page"),
        _now(),
    )


def downgrade() -> None:
    for table in (
        "waitlist", "activity_logs", "user_feedback", "feedback_prompt_logs",
        "referrals", "referral_clicks", "referral_codes",
        "user_reports", "moderation_reports", "moderation_queue", "moderation_categories",
        "post_analytics", "post_media", "post_hashtags", "hashtags",
        "post_professional_roles", "portfolio_posts", "post_privacy", "posts",
        "user_professional_roles", "professional_roles",
        "user_roles", "authorizations", "actions", "roles",
        "password_reset_tokens", "email_verification_tokens", "auth_accounts", "users",
    ):
        op.drop_table(table)
