"""Waitlist Schemas — landing-page signup."""

from pydantic import BaseModel, EmailStr, Field, field_validator


class WaitlistJoin(BaseModel):
    email: EmailStr
    feedback: str | None = Field(None, max_length=2000)

    @field_validator("email")
    @classmethod
    def lowercase(cls, v: str) -> str:
        return v.lower()


class WaitlistJoined(BaseModel):
    message: str = "Thanks for joining the waitlist!"
