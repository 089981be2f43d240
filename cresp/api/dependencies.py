"""API Dependencies — session resolution, request metadata and cookie helpers.

Invariants:
    - The session JWT is read from the auth cookie first, then an Authorization: Bearer header
    - A valid token for a user that no longer exists counts as anonymous
    - get_current_user raises AuthenticationError (401); get_optional_user never raises

Design Decisions:
    - Cookie is httpOnly + SameSite=lax, secure only in production: local HTTP dev
      keeps working while production cookies never travel in clear text
"""

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from cresp.config import get_settings
from cresp.core.anonymize_request import RequestMetadata, client_ip_from_headers
from cresp.core.errors import AuthenticationError
from cresp.infrastructure.database import get_db
from cresp.infrastructure.security import decode_session_token
from cresp.models.user import User
from cresp.services.log_activity import ActivityLogger

_bearer = HTTPBearer(auto_error=False)


def request_metadata(request: Request) -> RequestMetadata:
    ip = client_ip_from_headers(request.headers)
    if ip is None and request.client is not None:
        ip = request.client.host
    return RequestMetadata(
        method=request.method,
        endpoint=request.url.path,
        ip_address=ip,
        user_agent=request.headers.get("user-agent"),
    )


async def get_optional_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    token = request.cookies.get(get_settings().session_cookie_name)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        return None
    claims = decode_session_token(token)
    if claims is None:
        return None
    return await db.get(User, claims.user_id)


async def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise AuthenticationError()
    return user


def get_activity_logger(
    db: AsyncSession = Depends(get_db),
    meta: RequestMetadata = Depends(request_metadata),
) -> ActivityLogger:
    return ActivityLogger(db, meta)


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
