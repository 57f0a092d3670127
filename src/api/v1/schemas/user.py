"""Pydantic schemas for User administration API."""

from pydantic import BaseModel

from api.v1.schemas.account import UserProfileResponse


class UserListResponse(BaseModel):
    """Schema for list of user profiles."""

    data: list[UserProfileResponse]
