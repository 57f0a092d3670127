"""SQLAlchemy implementation of Profile repository."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import UserProfile
from infrastructure.database.models import UserModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository.

    Soft-deleted rows (``deleted_at`` set) are invisible to every lookup.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: str) -> UserProfile | None:
        """Get a profile by ID."""
        stmt = select(UserModel).where(
            UserModel.id == id,
            UserModel.deleted_at.is_(None),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_email(self, email: str) -> UserProfile | None:
        """Get a profile by email."""
        stmt = select(UserModel).where(
            UserModel.email == email,
            UserModel.deleted_at.is_(None),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all(self) -> list[UserProfile]:
        """Get every profile, oldest first."""
        stmt = (
            select(UserModel)
            .where(UserModel.deleted_at.is_(None))
            .order_by(UserModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def create(self, **fields: Any) -> UserProfile:
        """Build a profile entity without touching the session."""
        return UserProfile(**fields)

    async def save(self, profile: UserProfile) -> UserProfile:
        """Insert the profile, or update the mutable columns of an existing row."""
        model = await self._session.get(UserModel, profile.id)

        if model is None:
            model = self._to_model(profile)
            self._session.add(model)
        else:
            model.name = profile.name
            model.role = profile.role.value
            model.is_onboarded = profile.is_onboarded

        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    def _to_entity(self, model: UserModel) -> UserProfile:
        """Convert ORM model to domain entity."""
        return UserProfile(
            id=model.id,
            email=model.email,
            name=model.name,
            role=model.role,
            is_onboarded=model.is_onboarded,
            created_at=model.created_at,
            updated_at=model.updated_at,
            deleted_at=model.deleted_at,
        )

    def _to_model(self, entity: UserProfile) -> UserModel:
        """Convert domain entity to ORM model."""
        return UserModel(
            id=entity.id,
            email=entity.email,
            name=entity.name,
            role=entity.role.value,
            is_onboarded=entity.is_onboarded,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
