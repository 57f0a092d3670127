"""Account service: profile reads and the profile edit workflow."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from core.exceptions import AuthorizationError, SelfDemotionError, UserNotFoundError
from domain.entities.profile import UserProfile, UserRole
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.identity_sync import (
    SyncFailureHandler,
    log_sync_failure,
    run_best_effort,
)
from infrastructure.identity.provider import IIdentityProvider


@dataclass(frozen=True)
class Caller:
    """The authenticated user performing an operation."""

    id: str
    is_admin: bool = False


@dataclass(frozen=True)
class ProfileChangeRequest:
    """Requested field changes. A missing target means the caller."""

    target_user_id: Optional[str] = None
    name: Optional[str] = None
    role: Optional[UserRole] = None


class AccountService:
    """Service layer for profile business logic.

    The local store is the source of truth. Group and attribute changes are
    mirrored to the identity provider after the local commit, on a best-effort
    basis: a provider failure never undoes or fails a committed edit.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        identity_provider: IIdentityProvider,
        on_sync_failure: SyncFailureHandler = log_sync_failure,
    ) -> None:
        self._uow_factory = uow_factory
        self._identity = identity_provider
        self._on_sync_failure = on_sync_failure

    async def get_account_details(self, user_id: str) -> UserProfile:
        """Get the stored profile of a user."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if not profile:
                raise UserNotFoundError(user_id)
            return profile

    async def list_profiles(self) -> list[UserProfile]:
        """Get all profiles."""
        async with self._uow_factory() as uow:
            return await uow.profiles.get_all()  # type: ignore[no-any-return]

    async def update_profile(
        self,
        caller: Caller,
        request: ProfileChangeRequest,
        access_token: Optional[str] = None,
    ) -> UserProfile:
        """
        Apply a profile change on behalf of a caller.

        Rules:
        - Non-admins may only edit themselves and may not change roles
        - Admins may edit anyone, but never demote themselves
        - Setting a name marks the profile as onboarded

        All checks run before anything is written, so a rejected request
        leaves the profile untouched.

        Raises:
            AuthorizationError: Caller may not perform the change
            SelfDemotionError: Admin tried to drop their own admin role
            UserNotFoundError: Target profile does not exist
        """
        # Rejected before any lookup so non-admins cannot enumerate other ids
        if (
            not caller.is_admin
            and request.target_user_id
            and request.target_user_id != caller.id
        ):
            raise AuthorizationError("You can only edit your own profile")

        target_id = caller.id
        if caller.is_admin and request.target_user_id:
            target_id = request.target_user_id
        is_self = target_id == caller.id

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(target_id)
            if not profile:
                raise UserNotFoundError(target_id)

            if request.role is not None and not caller.is_admin:
                raise AuthorizationError("You do not have permission to change roles")

            if (
                is_self
                and request.role == UserRole.USER
                and profile.role == UserRole.ADMIN
            ):
                raise SelfDemotionError()

            previous_role = profile.role
            name_changed = bool(request.name)
            role_changed = request.role is not None

            if request.name:
                profile.rename(request.name)
            if request.role is not None:
                profile.role = UserRole(request.role)

            saved = await uow.profiles.save(profile)
            await uow.commit()

        if role_changed:
            await self._sync_role(saved, previous_role)

        if name_changed:
            await self._sync_name(saved, is_self, access_token)

        return saved

    async def _sync_role(self, profile: UserProfile, previous_role: UserRole) -> None:
        """Mirror a role change onto provider group membership."""
        added = await run_best_effort(
            "add_to_group",
            lambda: self._identity.add_to_group(profile.email, profile.role.value),
            self._on_sync_failure,
            user_id=profile.id,
            group=profile.role.value,
        )
        # Drop the old group only once the new one is in place
        if added and previous_role != profile.role:
            await run_best_effort(
                "remove_from_group",
                lambda: self._identity.remove_from_group(
                    profile.email, previous_role.value
                ),
                self._on_sync_failure,
                user_id=profile.id,
                group=previous_role.value,
            )

    async def _sync_name(
        self, profile: UserProfile, is_self: bool, access_token: Optional[str]
    ) -> None:
        """Mirror a name change onto the provider's user attributes."""
        attributes = {"name": profile.name}
        if is_self:
            if not access_token:
                return
            token = access_token
            await run_best_effort(
                "update_user_attributes",
                lambda: self._identity.update_user_attributes(token, attributes),
                self._on_sync_failure,
                user_id=profile.id,
            )
        else:
            # The caller's token would update the caller, not the target
            await run_best_effort(
                "admin_update_user_attributes",
                lambda: self._identity.admin_update_user_attributes(
                    profile.email, attributes
                ),
                self._on_sync_failure,
                user_id=profile.id,
            )
