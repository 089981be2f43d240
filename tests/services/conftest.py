"""Service test fixtures — async DB, seeded reference data and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with roles, actions,
      professional roles and moderation categories seeded
    - get_db, get_storage and get_email_service are overridden for route tests
    - Outbound email is captured by the root RecordingProvider (emails.provider.sent)

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - db_manager patched: readiness probe uses db_manager.session() directly
    - Auth headers minted from session claims: tests that are not about login
      skip the bcrypt round trip
    - The client never stores response cookies: a session cookie left over from one
      request would outrank the Bearer header of the next (cookie is read first)
"""

from http.cookiejar import CookieJar, DefaultCookiePolicy

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from cresp.db.base import Base
from cresp.db.seed import role_id, seed_reference_data
from cresp.core.domain_types import RoleKey
from cresp.infrastructure.database import get_db, DatabaseSessionManager
from cresp.infrastructure.email import get_email_service
from cresp.infrastructure.security import create_session_token, hash_password
from cresp.infrastructure.storage import LocalStorage, get_storage
from cresp.models.rbac import UserRole
from cresp.models.user import AuthAccount, User
from cresp.services.authenticate import session_claims
import cresp.infrastructure.database as db_module
import cresp.models  # noqa: F401
from cresp.main import app

DEFAULT_PASSWORD = "Sup3rSecret"


class _DiscardCookies(DefaultCookiePolicy):
    def set_ok(self, cookie, request):
        return False


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )
    async with factory() as session:
        await seed_reference_data(session)
    return factory


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "uploads", "/api/v1/uploads")


@pytest.fixture
async def client(test_engine, test_session_factory, emails, storage):
    """FastAPI test client with DB, storage and email dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_email_service] = lambda: emails

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
        cookies=CookieJar(policy=_DiscardCookies()),
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def make_user(test_db):
    """Factory: verified user with the member role (plus any extra platform roles)."""
    async def _make(
        username: str = "janedoe_01",
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        verified: bool = True,
        roles: tuple[RoleKey, ...] = (),
        **profile,
    ) -> User:
        user = User(username=username, email=email or f"{username}@example.com", **profile)
        test_db.add(user)
        await test_db.flush()
        test_db.add(AuthAccount(
            user_id=user.id, password_hash=hash_password(password), is_verified=verified,
        ))
        for key in (RoleKey.MEMBER, *roles):
            test_db.add(UserRole(user_id=user.id, role_id=role_id(key)))
        await test_db.commit()
        return user
    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_session_token(session_claims(user))}"}
    return _headers
