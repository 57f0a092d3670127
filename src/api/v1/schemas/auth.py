"""Pydantic schemas for Auth API."""

from pydantic import Field, field_validator

from api.v1.schemas.account import UserProfileResponse
from api.v1.schemas.common import CamelModel


class SignInOrRegisterRequest(CamelModel):
    """Schema for signing in, or registering when the email is unknown."""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=256)
    name: str | None = Field(None, max_length=100)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Basic email validation."""
        v = v.strip().lower()
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Invalid email address")
        return v

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class TokensResponse(CamelModel):
    """Tokens issued by the identity provider."""

    access_token: str
    id_token: str
    refresh_token: str
    expires_in: int


class AuthResponse(CamelModel):
    """Schema for a successful sign-in or registration."""

    message: str
    user: UserProfileResponse
    tokens: TokensResponse
