"""RBAC Schemas — platform role assignment and permission listings."""

from pydantic import BaseModel, Field


class RoleAssignment(BaseModel):
    role_key: str = Field(min_length=1, max_length=50)


class PermissionsOut(BaseModel):
    roles: list[str]
    actions: list[str]
