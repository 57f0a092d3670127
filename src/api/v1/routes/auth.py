"""Auth API routes."""

from fastapi import APIRouter, Depends, Request

from api.v1.dependencies import get_auth_service
from api.v1.routes.account import to_profile_response
from api.v1.schemas.auth import AuthResponse, SignInOrRegisterRequest, TokensResponse
from api.v1.schemas.common import ErrorResponse
from core.rate_limit import limiter
from domain.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "",
    response_model=AuthResponse,
    summary="Sign in or register",
    responses={
        200: {"description": "Signed in, or registered and signed in"},
        400: {"model": ErrorResponse, "description": "Name missing or weak password"},
        401: {"model": ErrorResponse, "description": "Invalid email or password"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
        429: {"model": ErrorResponse, "description": "Too many attempts"},
    },
)
@limiter.limit("5/minute")  # type: ignore[untyped-decorator]
async def sign_in_or_register(
    request: Request,
    body: SignInOrRegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Sign in with email and password. Unknown emails are registered (name required)."""
    result = await service.sign_in_or_register(
        email=body.email,
        password=body.password,
        name=body.name,
    )
    return AuthResponse(
        message="Registration successful" if result.is_new_user else "Login successful",
        user=to_profile_response(result.profile),
        tokens=TokensResponse(
            access_token=result.tokens.access_token,
            id_token=result.tokens.id_token,
            refresh_token=result.tokens.refresh_token,
            expires_in=result.tokens.expires_in,
        ),
    )
