"""JWT verification for Cognito-issued tokens.

Supports both Cognito user pool JWTs (RS256 via JWKS) and locally-created
tokens (HS256, opt-in through JWT_ALLOW_LOCAL_TOKENS, never in production
and never with the default secret).

Cognito ID token payload structure:
    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "name": "John",
        "cognito:groups": ["user"],
        "token_use": "id",
        "aud": "<app client id>",
        "iss": "https://cognito-idp.<region>.amazonaws.com/<pool id>",
        "auth_time": 1234567890,
        "exp": 1234567890
    }

Access tokens carry ``client_id`` instead of ``aud`` and no email or name.
"""

import logging
import time
from datetime import datetime, timedelta
from typing import Any, Optional

import httpx
from jose import ExpiredSignatureError, JWTError, jwt

from core.config import DEFAULT_JWT_SECRET, settings
from core.exceptions import AuthenticationError, ErrorCode
from infrastructure.auth.provider import TokenClaims, TokenUse

logger = logging.getLogger(__name__)

# Module-level JWKS cache (fetched once, reused across requests)
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys() -> dict[str, Any]:
    """Fetch and cache the user pool's JWKS keys."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    jwks_url = settings.cognito_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            jwks_data = response.json()
            # Build a kid -> key mapping
            _jwks_cache = {}
            for key_data in jwks_data.get("keys", []):
                kid = key_data.get("kid")
                if kid:
                    _jwks_cache[kid] = key_data
            logger.info("Fetched %d JWKS keys from Cognito", len(_jwks_cache))
            return _jwks_cache
    except Exception:
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}


class CognitoJWTVerifier:
    """Verifies Cognito (RS256) and local (HS256) bearer tokens."""

    def __init__(
        self,
        client_id: str = settings.cognito_client_id,
        issuer: str = settings.cognito_issuer,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        allow_local_tokens: bool = (
            settings.jwt_allow_local_tokens and not settings.is_production
        ),
    ) -> None:
        self._client_id = client_id
        self._issuer = issuer
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        # Never accept tokens signed with the placeholder secret
        self._allow_local_tokens = (
            allow_local_tokens and secret_key != DEFAULT_JWT_SECRET
        )

    async def validate_token(self, token: str) -> Optional[TokenClaims]:
        """
        Validate a JWT and extract its claims.

        Detects the signing algorithm from the token header:
        - RS256 (Cognito): validates via JWKS public key, issuer and client
        - HS256 (local/test): validates via shared secret

        Args:
            token: The JWT to validate

        Returns:
            TokenClaims if valid, None if invalid

        Raises:
            AuthenticationError: If the token signature is valid but expired
        """
        try:
            header = jwt.get_unverified_header(token)
            alg = header.get("alg", self._algorithm)

            if alg == "RS256":
                payload = await self._validate_rs256(token, header)
            elif self._allow_local_tokens:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
            else:
                return None

            if payload is None:
                return None

            return self._to_claims(payload)

        except ExpiredSignatureError:
            raise AuthenticationError(
                message="Token has expired",
                error_code=ErrorCode.TOKEN_EXPIRED,
            )
        except JWTError:
            return None

    async def _validate_rs256(
        self, token: str, header: dict
    ) -> Optional[dict]:
        """Validate an RS256-signed JWT using the user pool's JWKS."""
        kid = header.get("kid")
        if not kid:
            return None

        jwks_keys = await _get_jwks_keys()
        key_data = jwks_keys.get(kid)
        if not key_data:
            # Key not found: refetch once in case the pool rotated its keys
            global _jwks_cache
            _jwks_cache = None
            jwks_keys = await _get_jwks_keys()
            key_data = jwks_keys.get(kid)
            if not key_data:
                logger.warning("JWKS key not found for kid=%s", kid)
                return None

        payload: dict = jwt.decode(
            token,
            key_data,
            algorithms=["RS256"],
            issuer=self._issuer,
            options={"verify_aud": False},
        )

        # ID tokens name the app client in "aud", access tokens in "client_id"
        if payload.get("token_use") == TokenUse.ID:
            audience = payload.get("aud")
        else:
            audience = payload.get("client_id")
        if audience != self._client_id:
            logger.warning("Token issued for another client: %s", audience)
            return None

        return payload

    def _to_claims(self, payload: dict) -> Optional[TokenClaims]:
        """Build TokenClaims, rejecting payloads that miss required claims."""
        user_id = payload.get("sub")
        if not user_id:
            return None

        try:
            token_use = TokenUse(payload.get("token_use"))
        except ValueError:
            return None

        email = payload.get("email")
        if token_use is TokenUse.ID and not email:
            return None

        return TokenClaims(
            id=str(user_id),
            token_use=token_use,
            email=email,
            name=payload.get("name"),
            groups=frozenset(payload.get("cognito:groups") or []),
            auth_time=payload.get("auth_time"),
            exp=payload.get("exp"),
        )

    def create_token(self, claims: TokenClaims) -> str:
        """
        Create a local HS256 token carrying Cognito-shaped claims.

        Used for development and tests; Cognito issues production tokens.
        """
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": claims.id,
            "token_use": claims.token_use.value,
            "cognito:groups": sorted(claims.groups),
            "auth_time": claims.auth_time or int(time.time()),
            "exp": expire,
        }
        if claims.email:
            payload["email"] = claims.email
        if claims.name:
            payload["name"] = claims.name

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
