"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from domain.entities.profile import UserProfile
from infrastructure.identity.provider import AuthTokens


class FakeUnitOfWork:
    """Fake Unit of Work with a mocked profile repository for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        # create() builds an entity in memory and is not awaited
        self.profiles.create = MagicMock(side_effect=lambda **fields: UserProfile(**fields))
        # save() echoes back what it was given
        self.profiles.save.side_effect = lambda profile: profile
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class RecordingSyncSink:
    """Collects best-effort sync failures instead of logging them."""

    def __init__(self) -> None:
        self.failures: list[tuple[str, Exception, dict]] = []

    def __call__(self, operation: str, error: Exception, context: dict) -> None:
        self.failures.append((operation, error, context))

    @property
    def operations(self) -> list[str]:
        return [operation for operation, _, _ in self.failures]


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def identity() -> AsyncMock:
    """Identity provider double."""
    provider = AsyncMock()
    provider.sign_up.return_value = "new-user-sub"
    provider.sign_in.return_value = AuthTokens(
        access_token="access-token",
        id_token="id-token",
        refresh_token="refresh-token",
        expires_in=3600,
    )
    return provider


@pytest.fixture
def sync_sink() -> RecordingSyncSink:
    return RecordingSyncSink()


@pytest.fixture
def user_id() -> str:
    """A user subject identifier."""
    return "user-sub-1"


@pytest.fixture
def admin_id() -> str:
    """An admin subject identifier (distinct from user_id)."""
    return "admin-sub-1"
