"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from domain.services.account_service import AccountService
from domain.services.auth_service import AuthService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.identity.cognito_provider import CognitoIdentityProvider


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_identity_provider() -> CognitoIdentityProvider:
    """Get the Cognito identity provider client."""
    return CognitoIdentityProvider()


@lru_cache
def get_account_service() -> AccountService:
    """Get Account service instance."""
    return AccountService(get_uow_factory(), get_identity_provider())


@lru_cache
def get_auth_service() -> AuthService:
    """Get Auth service instance."""
    return AuthService(get_uow_factory(), get_identity_provider())
