"""Moderation Schemas — report submission and moderator queue views."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    key: str
    name: str
    description: str | None = None
    severity: int
    auto_action: str | None = None
    requires_proof: bool
    icon: str | None = None
    color: str | None = None


class PostReportCreate(BaseModel):
    post_id: UUID
    category: str = Field(min_length=1, max_length=50)
    details: str | None = Field(None, max_length=2000)


class UserReportCreate(BaseModel):
    user_id: UUID
    category: str = Field(min_length=1, max_length=50)
    reason: str | None = Field(None, max_length=2000)


class ReportAccepted(BaseModel):
    message: str = "Report submitted successfully"
    report_id: UUID


class QueueEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    post_author_id: UUID
    category: CategoryOut
    report_count: int
    total_weight: float
    average_weight: float
    priority: str
    status: str
    resolution_note: str | None = None
    resolved_at: datetime | None = None
    created_at: datetime


class QueueResolve(BaseModel):
    status: Literal["RESOLVED", "DISMISSED"]
    note: str | None = Field(None, max_length=2000)
