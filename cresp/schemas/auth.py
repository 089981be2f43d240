"""Auth Schemas — signup, login and token flows at the API boundary.

Invariants:
    - Field validators delegate to core/validate_credentials.py (single rule source)
    - Field order is the order rules are reported: first failing field wins
    - Emails normalised to lowercase after syntax validation

Design Decisions:
    - EmailStr for syntax, core check for length bounds: pydantic owns RFC parsing,
      the length bounds are a business rule
"""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from cresp.core.validate_credentials import (
    check_email_length, check_login_identifier, check_password, check_username,
)


def _raise_if(message: str | None) -> None:
    if message:
        raise ValueError(message)


class SignupRequest(BaseModel):
    username: str
    email: EmailStr
    password: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        _raise_if(check_username(v))
        return v

    @field_validator("email")
    @classmethod
    def validate_email_length(cls, v: str) -> str:
        _raise_if(check_email_length(v))
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        _raise_if(check_password(v))
        return v


class LoginRequest(BaseModel):
    identifier: str
    password: str = Field(min_length=1)

    @field_validator("identifier")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        v = v.strip()
        _raise_if(check_login_identifier(v))
        return v


class VerifyEmailRequest(BaseModel):
    token: str | None = None


class ForgotPasswordRequest(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def lowercase(cls, v: str) -> str:
        return v.lower()


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1)
    password: str

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        _raise_if(check_password(v))
        return v


class SignupResponse(BaseModel):
    message: str
    user_id: UUID
    needs_verification: bool = True
    verification_token: str | None = None


class LoginResponse(BaseModel):
    message: str
    user_id: UUID
    onboarding_completed: bool


class PasswordResetRequested(BaseModel):
    message: str
    reset_token: str | None = None


class MessageResponse(BaseModel):
    message: str
