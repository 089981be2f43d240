"""Auth Routes — account creation, session cookies and token flows.

Invariants:
    - signup replies 201 for a new account, 200 when re-sending verification
    - login/refresh set the session cookie; logout clears it even for anonymous callers
    - Business rules live in services/authenticate.py; routes only map HTTP
"""

import logging

from fastapi import APIRouter, Cookie, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.api.dependencies import (
    clear_session_cookie, get_current_user, get_optional_user, request_metadata,
    set_session_cookie,
)
from cresp.core.anonymize_request import RequestMetadata
from cresp.infrastructure.database import get_db
from cresp.infrastructure.email import EmailService, get_email_service
from cresp.models.user import User
from cresp.schemas.auth import (
    ForgotPasswordRequest, LoginRequest, LoginResponse, MessageResponse,
    PasswordResetRequested, ResetPasswordRequest, SignupRequest, SignupResponse,
    VerifyEmailRequest,
)
from cresp.services.authenticate import AuthService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    emails: EmailService = Depends(get_email_service),
    meta: RequestMetadata = Depends(request_metadata),
) -> AuthService:
    return AuthService(db, emails, meta)


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    body: SignupRequest,
    response: Response,
    referral_code: str | None = Cookie(None),
    auth: AuthService = Depends(get_auth_service),
):
    outcome = await auth.signup(body, referral_code)
    if not outcome.created:
        response.status_code = status.HTTP_200_OK
    return outcome.response


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest, response: Response, auth: AuthService = Depends(get_auth_service),
):
    outcome = await auth.login(body)
    set_session_cookie(response, outcome.session_token)
    return LoginResponse(
        message="Login successful",
        user_id=outcome.user.id,
        onboarding_completed=outcome.user.onboarding_completed,
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    user: User | None = Depends(get_optional_user),
    auth: AuthService = Depends(get_auth_service),
):
    await auth.logout(user.id if user else None)
    clear_session_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.post("/verify-email", response_model=MessageResponse)
async def verify_email(body: VerifyEmailRequest, auth: AuthService = Depends(get_auth_service)):
    return MessageResponse(message=await auth.verify_email(body.token))


@router.post("/forgot-password", response_model=PasswordResetRequested)
async def forgot_password(
    body: ForgotPasswordRequest, auth: AuthService = Depends(get_auth_service),
):
    return await auth.forgot_password(body.email)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    body: ResetPasswordRequest, auth: AuthService = Depends(get_auth_service),
):
    return MessageResponse(message=await auth.reset_password(body.token, body.password))


@router.post("/refresh", response_model=MessageResponse)
async def refresh_session(
    response: Response,
    user: User = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
):
    set_session_cookie(response, await auth.refresh_session(user.id))
    return MessageResponse(message="Session refreshed")
