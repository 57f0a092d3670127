"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from unittest.mock import AsyncMock

# Test settings must be in place before the application is imported
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["JWT_ALLOW_LOCAL_TOKENS"] = "true"
os.environ["COGNITO_USER_POOL_ID"] = "us-east-1_TestPool"
os.environ["COGNITO_CLIENT_ID"] = "test-client-id"
os.environ.setdefault("AWS_REGION", "us-east-1")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities.profile import UserProfile, UserRole
from infrastructure.auth.jwt_provider import CognitoJWTVerifier
from infrastructure.auth.provider import ADMIN_GROUP, TokenClaims, TokenUse
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.database.models import Base
from infrastructure.identity.provider import AuthTokens

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

USER_ID = "11111111-1111-4111-8111-111111111111"
USER_EMAIL = "user@example.com"
ADMIN_ID = "22222222-2222-4222-8222-222222222222"
ADMIN_EMAIL = "admin@example.com"

TokenFactory = Callable[..., str]


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of Work factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
async def seeded_profiles(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
) -> dict[str, UserProfile]:
    """A regular user and an admin, both onboarded."""
    profiles = {}
    async with uow_factory() as uow:
        for key, profile in (
            ("user", UserProfile(id=USER_ID, email=USER_EMAIL, name="Regular User")),
            (
                "admin",
                UserProfile(
                    id=ADMIN_ID,
                    email=ADMIN_EMAIL,
                    name="Admin User",
                    role=UserRole.ADMIN,
                    is_onboarded=True,
                ),
            ),
        ):
            profiles[key] = await uow.profiles.save(profile)
        await uow.commit()
    return profiles


@pytest.fixture
def identity_provider() -> AsyncMock:
    """Identity provider double; every call succeeds unless a test says otherwise."""
    provider = AsyncMock()
    provider.sign_up.return_value = "33333333-3333-4333-8333-333333333333"
    provider.sign_in.return_value = AuthTokens(
        access_token="access-token",
        id_token="id-token",
        refresh_token="refresh-token",
        expires_in=3600,
    )
    return provider


@pytest.fixture
def token_verifier() -> CognitoJWTVerifier:
    """Verifier accepting local HS256 tokens."""
    return CognitoJWTVerifier(
        client_id="test-client-id",
        issuer="",
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
        allow_local_tokens=True,
    )


@pytest.fixture
def make_token(token_verifier: CognitoJWTVerifier) -> TokenFactory:
    """Build a signed token for a test caller."""

    def factory(
        user_id: str = USER_ID,
        token_use: TokenUse = TokenUse.ACCESS,
        admin: bool = False,
        email: str | None = USER_EMAIL,
        name: str | None = None,
    ) -> str:
        groups = {ADMIN_GROUP} if admin else {"user"}
        claims = TokenClaims(
            id=user_id,
            token_use=token_use,
            email=email if token_use is TokenUse.ID else None,
            name=name if token_use is TokenUse.ID else None,
            groups=frozenset(groups),
        )
        return token_verifier.create_token(claims)

    return factory


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def api_client(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    identity_provider: AsyncMock,
    token_verifier: CognitoJWTVerifier,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the test database and identity provider double.

    This client:
    - Uses an in-memory SQLite database
    - Verifies locally signed HS256 tokens
    - Routes every identity provider call to an AsyncMock
    """
    from api.dependencies.auth import get_token_verifier
    from api.v1.dependencies import get_account_service, get_auth_service
    from domain.services.account_service import AccountService
    from domain.services.auth_service import AuthService
    from main import create_app

    app = create_app()

    def override_get_account_service() -> AccountService:
        return AccountService(uow_factory, identity_provider)

    def override_get_auth_service() -> AuthService:
        return AuthService(uow_factory, identity_provider)

    def override_get_token_verifier() -> CognitoJWTVerifier:
        return token_verifier

    app.dependency_overrides[get_account_service] = override_get_account_service
    app.dependency_overrides[get_auth_service] = override_get_auth_service
    app.dependency_overrides[get_token_verifier] = override_get_token_verifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
