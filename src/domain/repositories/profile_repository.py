"""Profile repository protocol."""

from typing import Any, Protocol

from domain.entities.profile import UserProfile


class IProfileRepository(Protocol):
    """Repository interface for UserProfile entities."""

    async def get(self, id: str) -> UserProfile | None:
        """Get a profile by ID (the identity provider subject)."""
        ...

    async def get_by_email(self, email: str) -> UserProfile | None:
        """Get a profile by email."""
        ...

    async def get_all(self) -> list[UserProfile]:
        """Get every profile, oldest first."""
        ...

    def create(self, **fields: Any) -> UserProfile:
        """Build a new profile in memory. Nothing is written until save()."""
        ...

    async def save(self, profile: UserProfile) -> UserProfile:
        """Insert or update a profile."""
        ...
