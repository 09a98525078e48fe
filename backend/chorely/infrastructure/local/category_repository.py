"""
SQLite implementation of category repository.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import and_, func, select

from chorely.core.exceptions import NotFoundError
from chorely.infrastructure.local.database import CategoryORM, TaskORM, get_session_factory
from chorely.infrastructure.local.query_utils import accessible_to, commit_or_raise
from chorely.interfaces.category_repository import ICategoryRepository
from chorely.models.category import Category, CategoryCreate, CategoryUpdate
from chorely.utils.datetime_utils import now_utc

_DUPLICATE_NAME = "A category with this name already exists"


class SqliteCategoryRepository(ICategoryRepository):
    """SQLite implementation of category repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: CategoryORM) -> Category:
        return Category(
            id=UUID(orm.id),
            name=orm.name,
            emoji=orm.emoji,
            color=orm.color,
            user_id=UUID(orm.user_id) if orm.user_id else None,
            household_id=UUID(orm.household_id) if orm.household_id else None,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    def _new_orm(self, category: CategoryCreate) -> CategoryORM:
        return CategoryORM(
            id=str(uuid4()),
            name=category.name,
            emoji=category.emoji,
            color=category.color,
            user_id=str(category.user_id) if category.user_id else None,
            household_id=str(category.household_id) if category.household_id else None,
        )

    async def create(self, category: CategoryCreate) -> Category:
        async with self._session_factory() as session:
            orm = self._new_orm(category)
            session.add(orm)
            await commit_or_raise(session, _DUPLICATE_NAME)
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def create_many(self, categories: list[CategoryCreate]) -> list[Category]:
        async with self._session_factory() as session:
            orms = [self._new_orm(category) for category in categories]
            session.add_all(orms)
            await commit_or_raise(session, _DUPLICATE_NAME)
            for orm in orms:
                await session.refresh(orm)
            return [self._orm_to_model(orm) for orm in orms]

    async def get(self, category_id: UUID) -> Optional[Category]:
        async with self._session_factory() as session:
            orm = await session.get(CategoryORM, str(category_id))
            return self._orm_to_model(orm) if orm else None

    async def get_accessible(self, user_id: UUID, category_id: UUID) -> Optional[Category]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(CategoryORM).where(
                    and_(CategoryORM.id == str(category_id), accessible_to(CategoryORM, user_id))
                )
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def get_by_name(
        self,
        name: str,
        user_id: Optional[UUID] = None,
        household_id: Optional[UUID] = None,
    ) -> Optional[Category]:
        conditions = [CategoryORM.name == name]
        if household_id:
            conditions.append(CategoryORM.household_id == str(household_id))
        elif user_id:
            conditions.append(CategoryORM.user_id == str(user_id))
        else:
            conditions.append(CategoryORM.user_id.is_(None))
            conditions.append(CategoryORM.household_id.is_(None))

        async with self._session_factory() as session:
            result = await session.execute(select(CategoryORM).where(and_(*conditions)))
            orm = result.scalars().first()
            return self._orm_to_model(orm) if orm else None

    async def list_accessible(self, user_id: UUID) -> list[Category]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(CategoryORM)
                .where(accessible_to(CategoryORM, user_id))
                .order_by(CategoryORM.name)
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def count_accessible(self, user_id: UUID) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count(CategoryORM.id)).where(accessible_to(CategoryORM, user_id))
            )
            return result.scalar_one()

    async def update(self, category_id: UUID, update: CategoryUpdate) -> Category:
        async with self._session_factory() as session:
            orm = await session.get(CategoryORM, str(category_id))
            if not orm:
                raise NotFoundError(f"Category {category_id} not found")

            update_data = update.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                if value is None and field == "name":
                    continue
                setattr(orm, field, value)

            orm.updated_at = now_utc()
            await commit_or_raise(session, _DUPLICATE_NAME)
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def delete(self, category_id: UUID) -> bool:
        async with self._session_factory() as session:
            orm = await session.get(CategoryORM, str(category_id))
            if not orm:
                return False
            await session.delete(orm)
            await commit_or_raise(
                session, "Category could not be deleted", reference_message="Category is still used by tasks"
            )
            return True

    async def count_tasks(self, category_id: UUID, user_id: Optional[UUID] = None) -> int:
        query = select(func.count(TaskORM.id)).where(TaskORM.category_id == str(category_id))
        if user_id:
            query = query.where(accessible_to(TaskORM, user_id))
        async with self._session_factory() as session:
            result = await session.execute(query)
            return result.scalar_one()
