"""Seed reference data — platform roles, actions, professional roles and
moderation categories.

Revision ID: 002_seed_reference_data
Revises: 001_initial
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from cresp.db.seed import (
    action_rows, moderation_category_rows, professional_role_rows, role_rows,
)

revision: str = "002_seed_reference_data"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_ROLES = sa.table(
    "roles",
    sa.column("id", sa.String), sa.column("key", sa.String), sa.column("name", sa.String),
    sa.column("description", sa.Text), sa.column("priority", sa.Integer),
)
_ACTIONS = sa.table(
    "actions",
    sa.column("id", sa.String), sa.column("key", sa.String),
    sa.column("description", sa.Text), sa.column("min_role_priority", sa.Integer),
)
_PROFESSIONAL_ROLES = sa.table(
    "professional_roles",
    sa.column("id", sa.String), sa.column("key", sa.String), sa.column("name", sa.String),
    sa.column("description", sa.Text), sa.column("icon", sa.String),
    sa.column("category", sa.String), sa.column("display_order", sa.Integer),
    sa.column("is_active", sa.Boolean),
)
_MODERATION_CATEGORIES = sa.table(
    "moderation_categories",
    sa.column("id", sa.String), sa.column("key", sa.String), sa.column("name", sa.String),
    sa.column("description", sa.Text), sa.column("severity", sa.Integer),
    sa.column("auto_action", sa.String), sa.column("requires_proof", sa.Boolean),
    sa.column("icon", sa.String), sa.column("color", sa.String),
    sa.column("display_order", sa.Integer), sa.column("is_active", sa.Boolean),
)


def upgrade() -> None:
    op.bulk_insert(_ROLES, role_rows())
    op.bulk_insert(_ACTIONS, action_rows())
    op.bulk_insert(_PROFESSIONAL_ROLES, professional_role_rows())
    op.bulk_insert(_MODERATION_CATEGORIES, moderation_category_rows())


def downgrade() -> None:
    for table in ("moderation_categories", "professional_roles", "actions", "roles"):
        op.execute(sa.text(f"DELETE FROM {table}"))
