"""Reference Data — roles, actions, professional roles and moderation categories.

Invariants:
    - Row ids are stable strings shared by the seed migration, the app and tests
    - seed_reference_data is idempotent: existing ids are skipped, never updated
    - Every action key used by require_action() or log_activity() is listed in ACTIONS

Design Decisions:
    - Row builders return plain dicts: the seed migration feeds them to
      op.bulk_insert, the async seeder feeds them to ORM constructors
    - Action ids derived from keys (action_<key with dots as underscores>_001)
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.core.domain_types import ROLE_PRIORITIES, RoleKey
from cresp.core.moderation_categories import MODERATION_CATEGORIES
from cresp.core.professional_role_catalog import PROFESSIONAL_ROLES
from cresp.models.moderation import ModerationCategory
from cresp.models.professional_role import ProfessionalRole
from cresp.models.rbac import Action, Role

logger = logging.getLogger(__name__)

ROLE_DESCRIPTIONS: dict[RoleKey, str] = {
    RoleKey.GUEST: "Unauthenticated or restricted visitor",
    RoleKey.MEMBER: "Registered member",
    RoleKey.MODERATOR: "Reviews reported content",
    RoleKey.ADMIN: "Full administrative access",
}

# (key, description, min_role_priority)
ACTIONS: tuple[tuple[str, str, int | None], ...] = (
    ("auth.signup", "Create an account", 0),
    ("auth.login", "Log in", 0),
    ("auth.email_verify_request", "Request an email verification link", 0),
    ("auth.email_verify_consume", "Verify an email address", 0),
    ("auth.password_reset_request", "Request a password reset link", 0),
    ("auth.password_reset_consume", "Reset a password", 0),
    ("auth.password_change", "Change own password", 20),
    ("auth.logout", "Log out", 20),
    ("auth.session_invalidate", "Invalidate own sessions", 20),
    ("auth.session_revoke", "Revoke another user's sessions", 60),
    ("referral.generate", "Generate a referral code", 20),
    ("referral.view", "View referral statistics", 20),
    ("onboarding.complete", "Complete onboarding", 20),
    ("onboarding.skip", "Skip onboarding", 20),
    ("post.create", "Create a post", 20),
    ("post.delete", "Delete own post", 20),
    ("post.report", "Report a post", 20),
    ("user.report", "Report a user", 20),
    ("moderation.review", "Review and resolve the moderation queue", 40),
    ("role.assign", "Assign or remove user roles", 60),
)


def role_id(key: RoleKey) -> str:
    return f"role_{key.value}_001"


def action_id(key: str) -> str:
    return f"action_{key.replace('.', '_')}_001"


def moderation_category_id(key: str) -> str:
    return f"modcat_{key}_001"


def role_rows() -> list[dict]:
    return [
        {
            "id": role_id(key),
            "key": key.value,
            "name": key.value.capitalize(),
            "description": ROLE_DESCRIPTIONS[key],
            "priority": priority,
        }
        for key, priority in ROLE_PRIORITIES.items()
    ]


def action_rows() -> list[dict]:
    return [
        {
            "id": action_id(key),
            "key": key,
            "description": description,
            "min_role_priority": min_priority,
        }
        for key, description, min_priority in ACTIONS
    ]


def professional_role_rows() -> list[dict]:
    return [
        {
            "id": seed.id,
            "key": seed.key,
            "name": seed.name,
            "description": seed.description,
            "icon": seed.icon,
            "category": seed.category,
            "display_order": position,
            "is_active": True,
        }
        for position, seed in enumerate(PROFESSIONAL_ROLES)
    ]


def moderation_category_rows() -> list[dict]:
    return [
        {
            "id": moderation_category_id(meta.key),
            "key": meta.key,
            "name": meta.name,
            "description": meta.description,
            "severity": meta.severity,
            "auto_action": meta.auto_action.value if meta.auto_action else None,
            "requires_proof": meta.requires_proof,
            "icon": meta.icon,
            "color": meta.color,
            "display_order": position,
            "is_active": True,
        }
        for position, meta in enumerate(MODERATION_CATEGORIES)
    ]


_SEEDS = (
    (Role, role_rows),
    (Action, action_rows),
    (ProfessionalRole, professional_role_rows),
    (ModerationCategory, moderation_category_rows),
)


async def seed_reference_data(db: AsyncSession) -> int:
    """Insert missing reference rows. Returns the number of rows added."""
    added = 0
    for model, build_rows in _SEEDS:
        result = await db.execute(select(model.id))
        existing = set(result.scalars().all())
        for row in build_rows():
            if row["id"] not in existing:
                db.add(model(**row))
                added += 1
    await db.commit()
    if added:
        logger.info(f"Seeded {added} reference rows")
    return added
