"""User administration API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import AdminClaims
from api.v1.dependencies import get_account_service
from api.v1.routes.account import to_profile_response
from api.v1.schemas.user import UserListResponse
from api.v1.schemas.common import ErrorResponse
from core.rate_limit import limiter
from domain.services.account_service import AccountService

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "",
    response_model=UserListResponse,
    summary="List all users",
    responses={403: {"model": ErrorResponse, "description": "Caller is not an admin"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_users(
    request: Request,
    claims: AdminClaims,
    service: AccountService = Depends(get_account_service),
) -> UserListResponse:
    """List every user profile. Admin only."""
    profiles = await service.list_profiles()
    return UserListResponse(data=[to_profile_response(p) for p in profiles])
