"""Professional Role Service — catalog reads and a user's role assignments.

Invariants:
    - Only active catalog roles can be assigned
    - replace_user_roles swaps the whole set in one commit; the first id becomes primary
    - At most one primary role per user
    - get_user_roles orders primary first, then by assignment time

Design Decisions:
    - assign_roles flushes only so onboarding can share the transaction;
      replace_user_roles commits because it is a standalone operation
"""

import logging
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.core.errors import InputValidationError
from cresp.core.professional_role_catalog import check_role_selection, complementary_roles
from cresp.models.professional_role import ProfessionalRole, UserProfessionalRole
from cresp.models.user import User
from cresp.schemas.profile import UserProfessionalRoleOut
from cresp.services.log_activity import ActivityLogger

logger = logging.getLogger(__name__)

INVALID_ROLES = "One or more professional roles are invalid"
DEFAULT_MATCH_LIMIT = 20


def role_view(assignment: UserProfessionalRole) -> UserProfessionalRoleOut:
    role = assignment.professional_role
    return UserProfessionalRoleOut(
        id=role.id,
        key=role.key,
        name=role.name,
        icon=role.icon,
        category=role.category,
        is_primary=assignment.is_primary,
        years_experience=assignment.years_experience,
        assigned_at=assignment.assigned_at,
    )


class ProfessionalRoleService:

    def __init__(self, db: AsyncSession, activity: ActivityLogger | None = None):
        self.db = db
        self.activity = activity or ActivityLogger(db)

    async def list_roles(self, category: str | None = None) -> list[ProfessionalRole]:
        query = select(ProfessionalRole).where(ProfessionalRole.is_active.is_(True))
        if category:
            query = query.where(ProfessionalRole.category == category)
        result = await self.db.execute(
            query.order_by(ProfessionalRole.display_order, ProfessionalRole.name),
        )
        return list(result.scalars().all())

    async def roles_by_category(self) -> dict[str, list[ProfessionalRole]]:
        grouped: dict[str, list[ProfessionalRole]] = {}
        for role in await self.list_roles():
            grouped.setdefault(role.category or "other", []).append(role)
        return grouped

    async def get_user_roles(self, user_id: UUID) -> list[UserProfessionalRole]:
        result = await self.db.execute(
            select(UserProfessionalRole)
            .where(UserProfessionalRole.user_id == user_id)
            .order_by(UserProfessionalRole.is_primary.desc(), UserProfessionalRole.assigned_at)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def active_role_ids(self, role_ids: list[str]) -> set[str]:
        if not role_ids:
            return set()
        result = await self.db.execute(
            select(ProfessionalRole.id)
            .where(ProfessionalRole.id.in_(role_ids))
            .where(ProfessionalRole.is_active.is_(True))
        )
        return set(result.scalars().all())

    async def assign_roles(self, user_id: UUID, role_ids: list[str]) -> None:
        """Replace the user's roles with role_ids (validated). Flushes, does not commit."""
        message = check_role_selection(role_ids)
        if message:
            raise InputValidationError(message, field="professional_role_ids")
        if await self.active_role_ids(role_ids) != set(role_ids):
            raise InputValidationError(INVALID_ROLES, field="professional_role_ids")

        await self.db.execute(
            delete(UserProfessionalRole).where(UserProfessionalRole.user_id == user_id),
        )
        for position, role_id in enumerate(role_ids):
            self.db.add(UserProfessionalRole(
                user_id=user_id, professional_role_id=role_id, is_primary=position == 0,
            ))
        await self.db.flush()

    async def replace_user_roles(self, user_id: UUID, role_ids: list[str]) -> list[UserProfessionalRole]:
        before = [a.professional_role_id for a in await self.get_user_roles(user_id)]
        await self.assign_roles(user_id, role_ids)
        await self.db.commit()
        assignments = await self.get_user_roles(user_id)
        await self.activity.record(
            "profile.professional_roles_update",
            user_id=user_id,
            resource_type="user",
            resource_id=str(user_id),
            changes_before={"professional_role_ids": before},
            changes_after={"professional_role_ids": role_ids},
        )
        return assignments

    async def set_primary_role(self, user_id: UUID, role_id: str) -> None:
        result = await self.db.execute(
            select(UserProfessionalRole.id)
            .where(UserProfessionalRole.user_id == user_id)
            .where(UserProfessionalRole.professional_role_id == role_id)
        )
        if result.scalar_one_or_none() is None:
            raise InputValidationError(INVALID_ROLES, field="professional_role_id")
        await self.db.execute(
            update(UserProfessionalRole)
            .where(UserProfessionalRole.user_id == user_id)
            .values(is_primary=UserProfessionalRole.professional_role_id == role_id)
        )
        await self.db.commit()

    def complementary_roles(self, role_key: str) -> list[str]:
        return complementary_roles(role_key)

    async def find_users_by_roles(
        self,
        role_keys: list[str],
        primary_only: bool = False,
        limit: int = DEFAULT_MATCH_LIMIT,
        exclude_user_id: UUID | None = None,
    ) -> list[User]:
        if not role_keys:
            return []
        query = (
            select(User)
            .join(UserProfessionalRole, UserProfessionalRole.user_id == User.id)
            .join(ProfessionalRole, ProfessionalRole.id == UserProfessionalRole.professional_role_id)
            .where(ProfessionalRole.key.in_(role_keys))
        )
        if primary_only:
            query = query.where(UserProfessionalRole.is_primary.is_(True))
        if exclude_user_id is not None:
            query = query.where(User.id != exclude_user_id)
        result = await self.db.execute(
            query.distinct().order_by(User.total_reputation.desc(), User.created_at).limit(limit),
        )
        return list(result.scalars().all())
