"""Token verification protocol."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional, Protocol

ADMIN_GROUP = "admin"


class TokenUse(StrEnum):
    """Cognito token classes (the ``token_use`` claim)."""

    ID = "id"
    ACCESS = "access"


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims of a bearer token; lives for a single request.

    Access tokens carry no ``email`` or ``name`` claim.
    """

    id: str
    token_use: TokenUse
    email: Optional[str] = None
    name: Optional[str] = None
    groups: frozenset[str] = field(default_factory=frozenset)
    auth_time: Optional[int] = None
    exp: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return ADMIN_GROUP in self.groups


class ITokenVerifier(Protocol):
    """Protocol for bearer token verification."""

    async def validate_token(self, token: str) -> Optional[TokenClaims]:
        """
        Validate a bearer token.

        Args:
            token: The bearer token to validate

        Returns:
            TokenClaims if valid, None if invalid

        Raises:
            AuthenticationError: If the token has expired
        """
        ...
