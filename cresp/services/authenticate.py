"""Auth Service — signup, login, email verification and password reset.

Invariants:
    - Login failure message identical for unknown user and wrong password (no enumeration)
    - forgot_password replies the same whether or not the email exists
    - Account creation (user, auth account, verification token, member role) is one commit
    - Token consumption and the state it unlocks are one commit
    - Side channels (activity log, referral tracking, email) run after the commit and
      never fail the operation

Design Decisions:
    - Purpose tokens validated by DB row, checked in order: unknown → expired →
      consumed → already verified (distinct messages per case)
    - Fresh verification tokens are issued on re-signup and on unverified login;
      older tokens stay valid until they expire
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.config import get_settings
from cresp.core.anonymize_request import RequestMetadata
from cresp.core.domain_types import ActivityStatus, ReferralStatus, TokenType
from cresp.core.errors import (
    AuthenticationError, DuplicateResourceError, EmailDeliveryError,
    EmailNotVerifiedError, InputValidationError, InvalidTokenError,
)
from cresp.core.time_utils import is_expired, utcnow
from cresp.core.validate_credentials import is_email_identifier
from cresp.infrastructure.email import EmailService
from cresp.infrastructure.security import (
    SessionClaims, create_purpose_token, create_session_token, hash_password, verify_password,
)
from cresp.models.user import AuthAccount, EmailVerificationToken, PasswordResetToken, User
from cresp.schemas.auth import (
    LoginRequest, PasswordResetRequested, SignupRequest, SignupResponse,
)
from cresp.services.check_permissions import AuthorizationService
from cresp.services.log_activity import ActivityLogger
from cresp.services.track_referrals import ReferralService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email/username or password"
FORGOT_PASSWORD_REPLY = (
    "If an account exists with that email, you will receive a password reset link."
)


@dataclass
class SignupOutcome:
    response: SignupResponse
    created: bool


@dataclass
class LoginOutcome:
    user: User
    session_token: str


def session_claims(user: User) -> SessionClaims:
    return SessionClaims(
        user_id=user.id,
        email=user.email,
        username=user.username,
        onboarding_completed=user.onboarding_completed,
    )


class AuthService:

    def __init__(self, db: AsyncSession, emails: EmailService, request: RequestMetadata):
        self.db = db
        self.emails = emails
        self.request = request
        self.activity = ActivityLogger(db, request)
        self.settings = get_settings()

    # --- helpers ---------------------------------------------------------------

    async def _user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def _user_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def _account(self, user_id: UUID) -> AuthAccount | None:
        result = await self.db.execute(select(AuthAccount).where(AuthAccount.user_id == user_id))
        return result.scalar_one_or_none()

    def _add_verification_token(self, user_id: UUID) -> str:
        token, expires_at = create_purpose_token(
            user_id, TokenType.EMAIL_VERIFICATION, self.settings.verification_token_ttl_seconds,
        )
        self.db.add(EmailVerificationToken(user_id=user_id, token=token, expires_at=expires_at))
        return token

    def _echo(self, token: str) -> str | None:
        return token if self.settings.expose_auth_tokens else None

    async def _send_quietly(self, kind: str, user: User, send) -> None:
        try:
            await send
        except EmailDeliveryError as e:
            logger.warning(
                f"{kind} email not delivered: {e.message}",
                extra={"user_id": str(user.id), "provider": e.provider},
            )

    # --- operations ------------------------------------------------------------

    async def signup(self, body: SignupRequest, referral_code: str | None = None) -> SignupOutcome:
        existing = await self._user_by_email(body.email)
        if existing:
            account = await self._account(existing.id)
            if account is not None and account.is_verified:
                raise DuplicateResourceError("Email already registered and verified. Please login.")
            token = self._add_verification_token(existing.id)
            await self.db.commit()
            await self.activity.record(
                "auth.verification_email_resent", user_id=existing.id,
                metadata={"reason": "signup_attempt_unverified"},
            )
            await self._send_quietly(
                "Verification", existing,
                self.emails.send_verification_email(existing.email, existing.username, token),
            )
            return SignupOutcome(
                response=SignupResponse(
                    message="Email already registered but not verified. Use the verification link below.",
                    user_id=existing.id,
                    verification_token=self._echo(token),
                ),
                created=False,
            )

        if await self._user_by_username(body.username):
            raise DuplicateResourceError("Username already taken")

        user = User(username=body.username, email=body.email)
        self.db.add(user)
        await self.db.flush()
        self.db.add(AuthAccount(
            user_id=user.id, password_hash=hash_password(body.password), is_verified=False,
        ))
        token = self._add_verification_token(user.id)
        await AuthorizationService(self.db).assign_default_role(user.id)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateResourceError("Username or email already taken")
        logger.info("User signed up", extra={"user_id": str(user.id)})

        await self.activity.record(
            "auth.signup", user_id=user.id,
            metadata={"username": user.username, "referred": bool(referral_code)},
        )
        if referral_code:
            await ReferralService(self.db).record_signup_quietly(
                referral_code, user.id, self.request.ip_address,
            )
        await self._send_quietly(
            "Verification", user,
            self.emails.send_verification_email(user.email, user.username, token),
        )
        return SignupOutcome(
            response=SignupResponse(
                message="Account created successfully! Please use the verification link below.",
                user_id=user.id,
                verification_token=self._echo(token),
            ),
            created=True,
        )

    async def login(self, body: LoginRequest) -> LoginOutcome:
        if is_email_identifier(body.identifier):
            user = await self._user_by_email(body.identifier)
        else:
            user = await self._user_by_username(body.identifier)
        account = await self._account(user.id) if user else None

        if user is None or account is None or not verify_password(body.password, account.password_hash):
            await self.activity.record(
                "auth.login", user_id=user.id if user else None,
                status=ActivityStatus.FAILURE, error_message=INVALID_CREDENTIALS,
            )
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not account.is_verified:
            token = self._add_verification_token(user.id)
            await self.db.commit()
            await self.activity.record("auth.verification_email_requested", user_id=user.id)
            await self._send_quietly(
                "Verification", user,
                self.emails.send_verification_email(user.email, user.username, token),
            )
            raise EmailNotVerifiedError(self._echo(token))

        account.last_login_at = utcnow()
        await self.db.commit()
        await self.activity.record("auth.login", user_id=user.id)
        return LoginOutcome(user=user, session_token=create_session_token(session_claims(user)))

    async def logout(self, user_id: UUID | None) -> None:
        if user_id is not None:
            await self.activity.record("auth.logout", user_id=user_id)

    async def verify_email(self, token: str | None) -> str:
        if not token:
            raise InputValidationError("Verification token is required", field="token")
        result = await self.db.execute(
            select(EmailVerificationToken).where(EmailVerificationToken.token == token),
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise InvalidTokenError("Invalid verification token")
        if is_expired(row.expires_at):
            raise InvalidTokenError("Verification token has expired")
        if row.consumed_at is not None:
            raise InvalidTokenError("Verification token already used")
        account = await self._account(row.user_id)
        if account is None:
            raise InvalidTokenError("Invalid verification token")
        if account.is_verified:
            raise InvalidTokenError("Email already verified")

        account.is_verified = True
        row.consumed_at = utcnow()
        await self.db.commit()

        user = await self.db.get(User, row.user_id)
        await ReferralService(self.db).advance_quietly(user.id, ReferralStatus.EMAIL_VERIFIED)
        await self.activity.record("auth.email_verified", user_id=user.id)
        await self._send_quietly(
            "Welcome", user, self.emails.send_welcome_email(user.email, user.username),
        )
        return "Email verified successfully! You can now log in."

    async def forgot_password(self, email: str) -> PasswordResetRequested:
        user = await self._user_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return PasswordResetRequested(message=FORGOT_PASSWORD_REPLY)

        token, expires_at = create_purpose_token(
            user.id, TokenType.PASSWORD_RESET, self.settings.reset_token_ttl_seconds,
        )
        self.db.add(PasswordResetToken(user_id=user.id, token=token, expires_at=expires_at))
        await self.db.commit()
        await self._send_quietly(
            "Password reset", user,
            self.emails.send_password_reset_email(user.email, user.username, token),
        )
        await self.activity.record("auth.password_reset_request", user_id=user.id)
        return PasswordResetRequested(message=FORGOT_PASSWORD_REPLY, reset_token=self._echo(token))

    async def reset_password(self, token: str, password: str) -> str:
        result = await self.db.execute(
            select(PasswordResetToken).where(PasswordResetToken.token == token),
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise InvalidTokenError("Invalid reset token")
        if is_expired(row.expires_at):
            raise InvalidTokenError("Reset token has expired")
        if row.consumed_at is not None:
            raise InvalidTokenError("Reset token already used")
        account = await self._account(row.user_id)
        if account is None:
            raise InvalidTokenError("Invalid reset token")

        account.password_hash = hash_password(password)
        row.consumed_at = utcnow()
        await self.db.commit()
        await self.activity.record("auth.password_reset_consume", user_id=row.user_id)
        return "Password reset successfully! You can now log in with your new password."

    async def refresh_session(self, user_id: UUID) -> str:
        user = await self.db.get(User, user_id)
        if user is None:
            raise AuthenticationError()
        return create_session_token(session_claims(user))
