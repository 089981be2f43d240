"""Authorization Service — loads RBAC grants and delegates the decision to core.

Invariants:
    - Every decision goes through core/decide_authorization.decide (one rule source)
    - Role grants only considered for roles the user currently holds
    - require_action raises PermissionDeniedError; can_* never raise on deny

Design Decisions:
    - Grants loaded with one query per table (action, user rows, role rows, roles):
      decision chain evaluated in memory
"""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.core.decide_authorization import ActionGrants, decide
from cresp.core.domain_types import AuthorizationEffect, RoleKey, SubjectType
from cresp.core.errors import PermissionDeniedError, ResourceNotFoundError
from cresp.models.rbac import Action, Authorization, Role, UserRole

logger = logging.getLogger(__name__)


class AuthorizationService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _action(self, action_key: str) -> Action | None:
        result = await self.db.execute(select(Action).where(Action.key == action_key))
        return result.scalar_one_or_none()

    async def _effects(
        self, subject_type: SubjectType, subject_ids: list[str], action_id: str,
    ) -> set[AuthorizationEffect]:
        if not subject_ids:
            return set()
        result = await self.db.execute(
            select(Authorization.effect)
            .where(Authorization.subject_type == subject_type.value)
            .where(Authorization.subject_id.in_(subject_ids))
            .where(Authorization.action_id == action_id)
        )
        return {AuthorizationEffect(e) for e in result.scalars().all()}

    async def get_user_roles(self, user_id: UUID) -> list[Role]:
        result = await self.db.execute(
            select(Role)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.priority.desc())
        )
        return list(result.scalars().all())

    async def can_user_perform(self, user_id: UUID, action_key: str) -> bool:
        action = await self._action(action_key)
        if action is None:
            logger.warning(f"Action not found: {action_key}", extra={"action": action_key})
            return False
        roles = await self.get_user_roles(user_id)
        grants = ActionGrants(
            action_exists=True,
            min_role_priority=action.min_role_priority,
            user_effects=await self._effects(SubjectType.USER, [str(user_id)], action.id),
            role_effects=await self._effects(SubjectType.ROLE, [r.id for r in roles], action.id),
            role_priorities=[r.priority for r in roles],
        )
        return decide(grants)

    async def can_role_perform(self, role_key: str, action_key: str) -> bool:
        action = await self._action(action_key)
        role = await self._role(role_key)
        if action is None or role is None:
            return False
        grants = ActionGrants(
            action_exists=True,
            min_role_priority=action.min_role_priority,
            role_effects=await self._effects(SubjectType.ROLE, [role.id], action.id),
            role_priorities=[role.priority],
        )
        return decide(grants)

    async def require_action(self, user_id: UUID, action_key: str) -> None:
        if not await self.can_user_perform(user_id, action_key):
            raise PermissionDeniedError(
                f"You do not have permission to perform {action_key}",
            )

    async def get_user_actions(self, user_id: UUID) -> list[str]:
        result = await self.db.execute(select(Action.key).order_by(Action.key))
        return [key for key in result.scalars().all() if await self.can_user_perform(user_id, key)]

    async def get_role_actions(self, role_key: str) -> list[str]:
        result = await self.db.execute(select(Action.key).order_by(Action.key))
        return [key for key in result.scalars().all() if await self.can_role_perform(role_key, key)]

    async def user_has_role(self, user_id: UUID, role_key: str) -> bool:
        return any(r.key == role_key for r in await self.get_user_roles(user_id))

    async def _role(self, role_key: str) -> Role | None:
        result = await self.db.execute(select(Role).where(Role.key == role_key))
        return result.scalar_one_or_none()

    async def assign_role_to_user(self, user_id: UUID, role_key: str) -> None:
        """Idempotent. Flushes only: the caller owns the transaction."""
        role = await self._role(role_key)
        if role is None:
            raise ResourceNotFoundError("Role", role_key)
        existing = await self.db.execute(
            select(UserRole.id)
            .where(UserRole.user_id == user_id)
            .where(UserRole.role_id == role.id)
        )
        if existing.scalar_one_or_none() is None:
            self.db.add(UserRole(user_id=user_id, role_id=role.id))
            await self.db.flush()

    async def remove_role_from_user(self, user_id: UUID, role_key: str) -> None:
        role = await self._role(role_key)
        if role is None:
            raise ResourceNotFoundError("Role", role_key)
        await self.db.execute(
            delete(UserRole)
            .where(UserRole.user_id == user_id)
            .where(UserRole.role_id == role.id)
        )
        await self.db.flush()

    async def assign_default_role(self, user_id: UUID) -> None:
        await self.assign_role_to_user(user_id, RoleKey.MEMBER.value)
