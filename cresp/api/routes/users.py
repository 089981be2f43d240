"""User Routes — own account, public profiles, activity history and role management.

Invariants:
    - /me routes always act on the session user; no user id in the path
    - Public profile never exposes email or onboarding state
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.api.dependencies import get_activity_logger, get_current_user
from cresp.infrastructure.database import get_db
from cresp.models.user import User
from cresp.schemas.auth import MessageResponse
from cresp.schemas.profile import (
    ActivityOut, PrimaryRoleUpdate, PublicProfileOut, RoleSelection, UserOut,
    UserProfessionalRoleOut,
)
from cresp.services.log_activity import ActivityLogger
from cresp.services.manage_professional_roles import ProfessionalRoleService, role_view
from cresp.services.read_profiles import public_profile

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/me", response_model=UserOut)
async def read_me(user: User = Depends(get_current_user)):
    return user


@router.get("/me/activity", response_model=list[ActivityOut])
async def read_my_activity(
    limit: int = Query(50, ge=1, le=200),
    user: User = Depends(get_current_user),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    return await activity.history(user.id, limit=limit)


@router.get("/me/professional-roles", response_model=list[UserProfessionalRoleOut])
async def read_my_roles(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    assignments = await ProfessionalRoleService(db).get_user_roles(user.id)
    return [role_view(a) for a in assignments]


@router.put("/me/professional-roles", response_model=list[UserProfessionalRoleOut])
async def replace_my_roles(
    body: RoleSelection,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    assignments = await ProfessionalRoleService(db, activity).replace_user_roles(
        user.id, body.professional_role_ids,
    )
    return [role_view(a) for a in assignments]


@router.put("/me/professional-roles/primary", response_model=MessageResponse)
async def set_my_primary_role(
    body: PrimaryRoleUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await ProfessionalRoleService(db).set_primary_role(user.id, body.professional_role_id)
    return MessageResponse(message="Primary role updated")


@router.get("/{user_id}", response_model=PublicProfileOut)
async def read_profile(user_id: UUID, db: AsyncSession = Depends(get_db)):
    return await public_profile(db, user_id)
