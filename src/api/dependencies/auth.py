"""Authentication dependencies for FastAPI."""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AuthenticationError, AuthorizationError, ErrorCode
from infrastructure.auth.jwt_provider import CognitoJWTVerifier
from infrastructure.auth.provider import TokenClaims, TokenUse

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)

# Singleton token verifier
_token_verifier: CognitoJWTVerifier | None = None


def get_token_verifier() -> CognitoJWTVerifier:
    """Get or create the token verifier singleton."""
    global _token_verifier
    if _token_verifier is None:
        _token_verifier = CognitoJWTVerifier()
    return _token_verifier


async def get_current_claims(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    verifier: CognitoJWTVerifier = Depends(get_token_verifier),
) -> TokenClaims:
    """
    Dependency to get the verified claims of the bearer token.

    Raises:
        AuthenticationError: If no token provided, or token invalid or expired
    """
    if not credentials:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    claims = await verifier.validate_token(credentials.credentials)

    if not claims:
        raise AuthenticationError(
            message="Invalid token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    return claims


def require_token_use(
    token_use: TokenUse,
) -> Callable[[TokenClaims], Awaitable[TokenClaims]]:
    """Build a dependency that only accepts one token class."""

    async def dependency(
        claims: Annotated[TokenClaims, Depends(get_current_claims)],
    ) -> TokenClaims:
        if claims.token_use != token_use:
            raise AuthenticationError(
                message=f"This endpoint requires an {token_use.value} token",
                error_code=ErrorCode.WRONG_TOKEN_USE,
            )
        return claims

    return dependency


async def require_admin(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
) -> TokenClaims:
    """Dependency that only admits members of the admin group."""
    if not claims.is_admin:
        raise AuthorizationError(
            "You do not have the required role to access this resource"
        )
    return claims


async def get_bearer_token(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
) -> str | None:
    """Raw bearer token, forwarded to the identity provider for self-service calls."""
    return credentials.credentials if credentials else None


# Type aliases for convenience in route handlers
CurrentClaims = Annotated[TokenClaims, Depends(get_current_claims)]
IdTokenClaims = Annotated[TokenClaims, Depends(require_token_use(TokenUse.ID))]
AccessTokenClaims = Annotated[TokenClaims, Depends(require_token_use(TokenUse.ACCESS))]
AdminClaims = Annotated[TokenClaims, Depends(require_admin)]
BearerToken = Annotated[str | None, Depends(get_bearer_token)]
