"""Security Primitives — bcrypt password hashing (passlib) and JWT signing (python-jose).

Invariants:
    - Plain passwords never logged or persisted; only CryptContext hashes
    - Session tokens carry: sub (user id), email, username, onboarding_completed, type, iat, exp
    - Verification/reset tokens carry a random jti so two tokens issued in the same
      second for the same user still differ (DB enforces token uniqueness)
    - decode_session_token returns None for every failure mode (bad signature,
      expired, wrong type, malformed subject)

Design Decisions:
    - Purpose tokens are validated by DB lookup, not by decoding: the DB row owns
      expiry and consumption state so error messages can distinguish the cases
    - CryptContext built per rounds value and cached: tests run with 4 rounds
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import lru_cache
from uuid import UUID

from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext

from cresp.config import get_settings
from cresp.core.domain_types import TokenType
from cresp.core.time_utils import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionClaims:
    user_id: UUID
    email: str
    username: str
    onboarding_completed: bool


@lru_cache
def _password_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(password: str) -> str:
    return _password_context(get_settings().password_hash_rounds).hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _password_context(get_settings().password_hash_rounds).verify(
            password, password_hash,
        )
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def create_session_token(claims: SessionClaims) -> str:
    settings = get_settings()
    now = utcnow()
    payload = {
        "sub": str(claims.user_id),
        "email": claims.email,
        "username": claims.username,
        "onboarding_completed": claims.onboarding_completed,
        "type": TokenType.SESSION.value,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=settings.session_ttl_seconds)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str) -> SessionClaims | None:
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError:
        logger.info("Session token expired")
        return None
    except JWTError as e:
        logger.info(f"Session token rejected: {e}")
        return None
    if payload.get("type") != TokenType.SESSION.value:
        return None
    try:
        user_id = UUID(payload.get("sub", ""))
    except ValueError:
        return None
    return SessionClaims(
        user_id=user_id,
        email=payload.get("email", ""),
        username=payload.get("username", ""),
        onboarding_completed=bool(payload.get("onboarding_completed", False)),
    )


def create_purpose_token(
    user_id: UUID, token_type: TokenType, ttl_seconds: int,
) -> tuple[str, datetime]:
    """Signed one-time token for email verification or password reset.

    Returns (token, expires_at). The caller stores both in the DB.
    """
    settings = get_settings()
    now = utcnow()
    expires_at = now + timedelta(seconds=ttl_seconds)
    payload = {
        "sub": str(user_id),
        "type": token_type.value,
        "jti": secrets.token_urlsafe(16),
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return token, expires_at
