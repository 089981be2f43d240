"""Feedback Schemas — prompt cooldown checks and feedback submission."""

from datetime import datetime

from pydantic import BaseModel, Field


class PromptTrigger(BaseModel):
    trigger: str = Field(min_length=1, max_length=50)


class CooldownOut(BaseModel):
    can_show: bool
    reason: str | None = None
    last_shown: datetime | None = None


class FeedbackSubmit(BaseModel):
    trigger: str = Field(min_length=1, max_length=50)
    feedback_type: str = Field(min_length=1, max_length=30)
    rating: int | None = Field(None, ge=1, le=5)
    comment: str | None = Field(None, max_length=5000)
    url: str | None = Field(None, max_length=500)
