"""Profile Schemas — professional roles, onboarding and user views.

Invariants:
    - Optional profile strings are stripped; blank becomes None
    - Role-id lists deduplicated in first-seen order before any rule runs
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cresp.core.professional_role_catalog import check_role_selection


def _blank_to_none(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    return v or None


def _dedupe(ids: list[str]) -> list[str]:
    return list(dict.fromkeys(ids))


class ProfessionalRoleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    key: str
    name: str
    description: str | None = None
    icon: str | None = None
    category: str | None = None
    display_order: int


class UserProfessionalRoleOut(BaseModel):
    id: str
    key: str
    name: str
    icon: str | None = None
    category: str | None = None
    is_primary: bool
    years_experience: int | None = None
    assigned_at: datetime


class RoleSelection(BaseModel):
    professional_role_ids: list[str]

    @field_validator("professional_role_ids")
    @classmethod
    def validate_selection(cls, v: list[str]) -> list[str]:
        v = _dedupe(v)
        message = check_role_selection(v)
        if message:
            raise ValueError(message)
        return v


class PrimaryRoleUpdate(BaseModel):
    professional_role_id: str = Field(min_length=1)


class OnboardingComplete(RoleSelection):
    name: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=1000)
    location: str | None = Field(None, max_length=100)

    @field_validator("name", "bio", "location")
    @classmethod
    def strip_optional(cls, v: str | None) -> str | None:
        return _blank_to_none(v)


class OnboardingResult(BaseModel):
    message: str
    onboarding_completed: bool = True


class UserOut(BaseModel):
    """The caller's own account view."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    name: str | None = None
    image: str | None = None
    bio: str | None = None
    location: str | None = None
    onboarding_completed: bool
    total_reputation: int
    portfolio_post_count: int
    casual_post_count: int
    created_at: datetime


class PublicProfileOut(BaseModel):
    id: UUID
    username: str
    name: str | None = None
    image: str | None = None
    bio: str | None = None
    location: str | None = None
    total_reputation: int
    portfolio_post_count: int
    casual_post_count: int
    created_at: datetime
    professional_roles: list[UserProfessionalRoleOut]


class ActivityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    action: str
    action_category: str
    resource_type: str | None = None
    resource_id: str | None = None
    status: str
    extra_metadata: dict | None = Field(None, serialization_alias="metadata")
    created_at: datetime
