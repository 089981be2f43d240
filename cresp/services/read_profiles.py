"""Profile Reads — the caller's account and other users' public profiles."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from cresp.core.errors import ResourceNotFoundError
from cresp.models.user import User
from cresp.schemas.profile import PublicProfileOut
from cresp.services.manage_professional_roles import ProfessionalRoleService, role_view


async def load_user(db: AsyncSession, user_id: UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise ResourceNotFoundError("User", str(user_id))
    return user


async def public_profile(db: AsyncSession, user_id: UUID) -> PublicProfileOut:
    user = await load_user(db, user_id)
    assignments = await ProfessionalRoleService(db).get_user_roles(user_id)
    return PublicProfileOut(
        id=user.id,
        username=user.username,
        name=user.name,
        image=user.image,
        bio=user.bio,
        location=user.location,
        total_reputation=user.total_reputation,
        portfolio_post_count=user.portfolio_post_count,
        casual_post_count=user.casual_post_count,
        created_at=user.created_at,
        professional_roles=[role_view(a) for a in assignments],
    )
