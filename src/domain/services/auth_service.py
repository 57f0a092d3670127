"""Authentication service: sign in existing users, register new ones."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

import structlog

from core.exceptions import ValidationError
from domain.entities.profile import UserProfile, UserRole
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.identity.provider import AuthTokens, IIdentityProvider

logger = structlog.get_logger()


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a sign-in-or-register call."""

    profile: UserProfile
    tokens: AuthTokens
    is_new_user: bool


class AuthService:
    """Service layer for authentication."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        identity_provider: IIdentityProvider,
    ) -> None:
        self._uow_factory = uow_factory
        self._identity = identity_provider

    async def sign_in_or_register(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
    ) -> AuthResult:
        """
        Sign in a known email, or register it first.

        Registration creates the identity provider account and the local
        profile, puts the user in the "user" group, then signs in like any
        returning user. A failing group assignment is raised; the committed
        profile stays, so the next attempt takes the sign-in path.

        Raises:
            ValidationError: Unknown email and no name supplied
            InvalidCredentialsError: Wrong password (or unknown provider user)
            EmailTakenError, WeakPasswordError, InvalidFormatError,
            AccountDisabledError, RateLimitedError,
            IdentityProviderError: Surfaced by the provider
        """
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_by_email(email)

        if profile:
            tokens = await self._identity.sign_in(email, password)
            return AuthResult(profile=profile, tokens=tokens, is_new_user=False)

        if not name:
            raise ValidationError(
                "Name is required for registration",
                details={"field": "name"},
            )

        user_sub = await self._identity.sign_up(email, password, name)

        async with self._uow_factory() as uow:
            profile = uow.profiles.create(
                id=user_sub,
                email=email,
                name=name,
                role=UserRole.USER,
                is_onboarded=False,
            )
            profile = await uow.profiles.save(profile)
            await uow.commit()

        logger.info("user_registered", user_id=profile.id)

        await self._identity.add_to_group(email, UserRole.USER.value)

        tokens = await self._identity.sign_in(email, password)
        return AuthResult(profile=profile, tokens=tokens, is_new_user=True)
