"""Unit tests for authentication dependencies."""

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from api.dependencies.auth import (
    get_bearer_token,
    get_current_claims,
    require_admin,
    require_token_use,
)
from core.exceptions import AuthenticationError, AuthorizationError, ErrorCode
from infrastructure.auth.jwt_provider import CognitoJWTVerifier
from infrastructure.auth.provider import ADMIN_GROUP, TokenClaims, TokenUse


@pytest.fixture
def verifier() -> CognitoJWTVerifier:
    return CognitoJWTVerifier(
        client_id="test-client",
        issuer="",
        secret_key="test-secret",
        algorithm="HS256",
        expire_minutes=30,
        allow_local_tokens=True,
    )


@pytest.fixture
def id_claims() -> TokenClaims:
    return TokenClaims(
        id="user-sub-1",
        token_use=TokenUse.ID,
        email="test@example.com",
        name="Test User",
        groups=frozenset({"user"}),
    )


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


# --- get_current_claims ---


class TestGetCurrentClaims:
    @pytest.mark.asyncio
    async def test_returns_claims_with_valid_token(
        self, verifier: CognitoJWTVerifier, id_claims: TokenClaims
    ):
        token = verifier.create_token(id_claims)

        result = await get_current_claims(_bearer(token), verifier)

        assert result.id == id_claims.id
        assert result.email == id_claims.email
        assert result.token_use is TokenUse.ID

    @pytest.mark.asyncio
    async def test_raises_when_no_credentials(self, verifier: CognitoJWTVerifier):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_claims(None, verifier)

        assert exc_info.value.error_code == ErrorCode.UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_raises_when_invalid_token(self, verifier: CognitoJWTVerifier):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_claims(_bearer("invalid.jwt.token"), verifier)

        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_raises_when_expired_token(self, id_claims: TokenClaims):
        issuer = CognitoJWTVerifier(
            secret_key="test-secret", algorithm="HS256", expire_minutes=-1,
            allow_local_tokens=True,
        )
        token = issuer.create_token(id_claims)
        normal = CognitoJWTVerifier(
            secret_key="test-secret", algorithm="HS256", expire_minutes=30,
            allow_local_tokens=True,
        )

        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_claims(_bearer(token), normal)

        assert exc_info.value.error_code == ErrorCode.TOKEN_EXPIRED


# --- require_token_use ---


class TestRequireTokenUse:
    @pytest.mark.asyncio
    async def test_accepts_matching_token_class(self, id_claims: TokenClaims):
        dependency = require_token_use(TokenUse.ID)

        assert await dependency(id_claims) is id_claims

    @pytest.mark.asyncio
    async def test_rejects_id_token_where_access_token_required(self, id_claims: TokenClaims):
        dependency = require_token_use(TokenUse.ACCESS)

        with pytest.raises(AuthenticationError) as exc_info:
            await dependency(id_claims)

        assert exc_info.value.error_code == ErrorCode.WRONG_TOKEN_USE
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_rejects_access_token_where_id_token_required(self):
        dependency = require_token_use(TokenUse.ID)
        access = TokenClaims(id="u1", token_use=TokenUse.ACCESS)

        with pytest.raises(AuthenticationError) as exc_info:
            await dependency(access)

        assert exc_info.value.error_code == ErrorCode.WRONG_TOKEN_USE


# --- require_admin ---


class TestRequireAdmin:
    @pytest.mark.asyncio
    async def test_admits_admin_group_member(self):
        claims = TokenClaims(
            id="admin-1", token_use=TokenUse.ACCESS, groups=frozenset({ADMIN_GROUP})
        )

        assert await require_admin(claims) is claims

    @pytest.mark.asyncio
    async def test_rejects_non_admin(self, id_claims: TokenClaims):
        with pytest.raises(AuthorizationError) as exc_info:
            await require_admin(id_claims)

        assert exc_info.value.status_code == 403


# --- get_bearer_token ---


class TestGetBearerToken:
    @pytest.mark.asyncio
    async def test_returns_raw_token(self):
        assert await get_bearer_token(_bearer("abc")) == "abc"

    @pytest.mark.asyncio
    async def test_returns_none_without_header(self):
        assert await get_bearer_token(None) is None
