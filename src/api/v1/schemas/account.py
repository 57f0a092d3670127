"""Pydantic schemas for Account API."""

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from api.v1.schemas.common import CamelModel
from domain.entities.profile import UserRole


class UserProfileResponse(CamelModel):
    """Public view of a stored profile."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "7c1e2f9a-5d41-4b7e-9b2f-0d7f3a9c1e11",
                "email": "jane@example.com",
                "name": "Jane Doe",
                "role": "user",
                "isOnboarded": True,
            }
        },
    )

    id: str
    email: str
    name: str
    role: UserRole
    is_onboarded: bool


class UpdateProfileRequest(CamelModel):
    """Schema for editing a profile.

    ``userId`` selects another user and is honoured for admins only.
    An empty ``name`` leaves the name unchanged.
    """

    user_id: str | None = Field(None, min_length=1, max_length=64)
    name: str | None = Field(None, max_length=100)
    role: UserRole | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else None


class EditProfileResponse(CamelModel):
    """Schema for a successful profile edit."""

    message: str
    user: UserProfileResponse


class AccountClaimsResponse(CamelModel):
    """Identity as asserted by the caller's ID token."""

    id: str
    email: str | None = None
    name: str | None = None
    groups: list[str]
    token_use: str
    auth_time: int | None = None
    exp: int | None = None
