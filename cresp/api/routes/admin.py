"""Admin Routes — platform role assignment and permission introspection.

Invariants:
    - Assigning or removing roles requires the role.assign action (admin priority)
    - Permission listings only ever describe the caller
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.api.dependencies import get_activity_logger, get_current_user
from cresp.infrastructure.database import get_db
from cresp.models.user import User
from cresp.schemas.auth import MessageResponse
from cresp.schemas.rbac import PermissionsOut, RoleAssignment
from cresp.services.check_permissions import AuthorizationService
from cresp.services.log_activity import ActivityLogger
from cresp.services.read_profiles import load_user

router = APIRouter(prefix="/api/v1", tags=["admin"])

ASSIGN_ACTION = "role.assign"


@router.get("/users/me/permissions", response_model=PermissionsOut)
async def read_my_permissions(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    authz = AuthorizationService(db)
    roles = await authz.get_user_roles(user.id)
    return PermissionsOut(
        roles=[r.key for r in roles], actions=await authz.get_user_actions(user.id),
    )


@router.post("/admin/users/{user_id}/roles", response_model=MessageResponse)
async def assign_role(
    user_id: UUID,
    body: RoleAssignment,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    authz = AuthorizationService(db)
    await authz.require_action(user.id, ASSIGN_ACTION)
    await load_user(db, user_id)
    await authz.assign_role_to_user(user_id, body.role_key)
    await db.commit()
    await activity.record(
        ASSIGN_ACTION, user_id=user.id, resource_type="user", resource_id=str(user_id),
        metadata={"role": body.role_key, "operation": "assign"},
    )
    return MessageResponse(message="Role assigned")


@router.delete("/admin/users/{user_id}/roles/{role_key}", response_model=MessageResponse)
async def remove_role(
    user_id: UUID,
    role_key: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    authz = AuthorizationService(db)
    await authz.require_action(user.id, ASSIGN_ACTION)
    await authz.remove_role_from_user(user_id, role_key)
    await db.commit()
    await activity.record(
        ASSIGN_ACTION, user_id=user.id, resource_type="user", resource_id=str(user_id),
        metadata={"role": role_key, "operation": "remove"},
    )
    return MessageResponse(message="Role removed")
