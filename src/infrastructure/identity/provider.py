"""Identity provider protocol."""

from dataclasses import dataclass
from typing import Mapping, Protocol


@dataclass(frozen=True)
class AuthTokens:
    """Tokens issued by the identity provider after a successful sign-in."""

    access_token: str
    id_token: str
    refresh_token: str
    expires_in: int


class IIdentityProvider(Protocol):
    """Protocol for the managed identity service (credentials, groups, attributes)."""

    async def sign_up(self, email: str, password: str, name: str) -> str:
        """
        Register a new identity.

        Returns:
            The provider subject identifier of the new user
        """
        ...

    async def sign_in(self, email: str, password: str) -> AuthTokens:
        """Authenticate with email and password."""
        ...

    async def add_to_group(self, email: str, group: str) -> None:
        """Add a user to a group (admin-scoped)."""
        ...

    async def remove_from_group(self, email: str, group: str) -> None:
        """Remove a user from a group (admin-scoped)."""
        ...

    async def update_user_attributes(
        self, access_token: str, attributes: Mapping[str, str | None]
    ) -> None:
        """Update the attributes of the user owning the access token."""
        ...

    async def admin_update_user_attributes(
        self, username: str, attributes: Mapping[str, str | None]
    ) -> None:
        """Update the attributes of any user (admin-scoped)."""
        ...
