"""Professional Role Routes — the public role catalog."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.infrastructure.database import get_db
from cresp.schemas.profile import ProfessionalRoleOut
from cresp.services.manage_professional_roles import ProfessionalRoleService

router = APIRouter(prefix="/api/v1/professional-roles", tags=["professional-roles"])


@router.get("/", response_model=list[ProfessionalRoleOut])
async def list_roles(
    category: str | None = Query(None, max_length=50),
    db: AsyncSession = Depends(get_db),
):
    return await ProfessionalRoleService(db).list_roles(category)


@router.get("/by-category", response_model=dict[str, list[ProfessionalRoleOut]])
async def roles_by_category(db: AsyncSession = Depends(get_db)):
    return await ProfessionalRoleService(db).roles_by_category()


@router.get("/{role_key}/complementary", response_model=list[str])
async def complementary_roles(role_key: str, db: AsyncSession = Depends(get_db)):
    return ProfessionalRoleService(db).complementary_roles(role_key)
