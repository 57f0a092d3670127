"""User profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class UserRole(StrEnum):
    """Application roles. Each role mirrors an identity provider group."""

    USER = "user"
    ADMIN = "admin"


@dataclass
class UserProfile:
    """Domain entity for a user profile (mirrors the identity provider record).

    ``id`` is the identity provider subject and never changes after creation.
    """

    id: str
    email: str
    name: str = ""
    role: UserRole = UserRole.USER
    is_onboarded: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        """Coerce stored role strings and keep timestamps ordered."""
        self.role = UserRole(self.role)
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def rename(self, name: str) -> None:
        """Set the display name. The first name set completes onboarding."""
        self.name = name
        self.is_onboarded = True
