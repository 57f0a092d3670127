"""Account API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import (
    AccessTokenClaims,
    BearerToken,
    CurrentClaims,
    IdTokenClaims,
)
from api.v1.dependencies import get_account_service
from api.v1.schemas.account import (
    AccountClaimsResponse,
    EditProfileResponse,
    UpdateProfileRequest,
    UserProfileResponse,
)
from api.v1.schemas.common import ErrorResponse
from core.rate_limit import limiter
from domain.entities.profile import UserProfile
from domain.services.account_service import (
    AccountService,
    Caller,
    ProfileChangeRequest,
)

router = APIRouter(prefix="/account", tags=["account"])


def to_profile_response(profile: UserProfile) -> UserProfileResponse:
    """Map a profile entity to its public view."""
    return UserProfileResponse(
        id=profile.id,
        email=profile.email,
        name=profile.name,
        role=profile.role,
        is_onboarded=profile.is_onboarded,
    )


@router.get(
    "/me",
    response_model=AccountClaimsResponse,
    summary="Get current user identity",
    responses={401: {"model": ErrorResponse, "description": "Missing, invalid or non-ID token"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_me(
    request: Request,
    claims: IdTokenClaims,
) -> AccountClaimsResponse:
    """Return the identity asserted by the caller's ID token."""
    return AccountClaimsResponse(
        id=claims.id,
        email=claims.email,
        name=claims.name,
        groups=sorted(claims.groups),
        token_use=claims.token_use.value,
        auth_time=claims.auth_time,
        exp=claims.exp,
    )


@router.get(
    "/profile",
    response_model=UserProfileResponse,
    summary="Get current user profile",
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid token"},
        404: {"model": ErrorResponse, "description": "No profile stored for this user"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    claims: CurrentClaims,
    service: AccountService = Depends(get_account_service),
) -> UserProfileResponse:
    """Return the caller's stored profile."""
    profile = await service.get_account_details(claims.id)
    return to_profile_response(profile)


@router.put(
    "/edit",
    response_model=EditProfileResponse,
    summary="Edit a profile",
    responses={
        200: {"description": "Profile updated successfully"},
        401: {"model": ErrorResponse, "description": "Missing, invalid or non-access token"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def edit_profile(
    request: Request,
    body: UpdateProfileRequest,
    claims: AccessTokenClaims,
    access_token: BearerToken,
    service: AccountService = Depends(get_account_service),
) -> EditProfileResponse:
    """Users can edit their own name. Admins can edit the name and role of any user."""
    profile = await service.update_profile(
        caller=Caller(id=claims.id, is_admin=claims.is_admin),
        request=ProfileChangeRequest(
            target_user_id=body.user_id,
            name=body.name,
            role=body.role,
        ),
        access_token=access_token,
    )
    return EditProfileResponse(
        message="Profile updated successfully",
        user=to_profile_response(profile),
    )
