"""
SQLite implementation of user repository.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select

from chorely.core.exceptions import NotFoundError
from chorely.core.security import normalize_email
from chorely.infrastructure.local.database import UserORM, get_session_factory
from chorely.infrastructure.local.query_utils import commit_or_raise
from chorely.interfaces.user_repository import IUserRepository
from chorely.models.user import UserAccount, UserCreate, UserUpdate
from chorely.utils.datetime_utils import now_utc


class SqliteUserRepository(IUserRepository):
    """SQLite implementation of user repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: UserORM) -> UserAccount:
        return UserAccount(
            id=UUID(orm.id),
            email=orm.email,
            name=orm.name,
            password_hash=orm.password_hash,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    async def get(self, user_id: UUID) -> Optional[UserAccount]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(UserORM).where(UserORM.id == str(user_id))
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def get_by_email(self, email: str) -> Optional[UserAccount]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(UserORM).where(UserORM.email == normalize_email(email))
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def create(self, user: UserCreate) -> UserAccount:
        async with self._session_factory() as session:
            orm = UserORM(
                id=str(uuid4()),
                email=normalize_email(user.email),
                name=user.name,
                password_hash=user.password_hash,
            )
            session.add(orm)
            await commit_or_raise(session, "A user with this email already exists")
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def update(self, user_id: UUID, update: UserUpdate) -> UserAccount:
        async with self._session_factory() as session:
            result = await session.execute(
                select(UserORM).where(UserORM.id == str(user_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                raise NotFoundError(f"User {user_id} not found")

            update_data = update.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                if value is None and field != "name":
                    continue
                if field == "email":
                    value = normalize_email(value)
                setattr(orm, field, value)

            orm.updated_at = now_utc()
            await commit_or_raise(session, "A user with this email already exists")
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def delete(self, user_id: UUID) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                select(UserORM).where(UserORM.id == str(user_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                return False
            await session.delete(orm)
            await commit_or_raise(
                session,
                "User could not be deleted",
                reference_message="The user's categories are still used by household tasks",
            )
            return True

    async def list_all(self) -> list[UserAccount]:
        async with self._session_factory() as session:
            result = await session.execute(select(UserORM).order_by(UserORM.created_at))
            return [self._orm_to_model(orm) for orm in result.scalars().all()]
