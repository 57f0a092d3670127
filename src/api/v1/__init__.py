"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.account import router as account_router
from api.v1.routes.auth import router as auth_router
from api.v1.routes.users import router as users_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(account_router)
router.include_router(users_router)
