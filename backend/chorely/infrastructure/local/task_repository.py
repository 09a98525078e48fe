"""
SQLite implementation of Task repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import and_, case, func, select

from chorely.core.exceptions import NotFoundError
from chorely.infrastructure.local.database import (
    CategoryORM,
    RecurrenceRuleORM,
    TaskORM,
    get_session_factory,
)
from chorely.infrastructure.local.query_utils import accessible_to, commit_or_raise
from chorely.interfaces.task_repository import ITaskRepository
from chorely.models.enums import TaskPriority, TaskStatusFilter
from chorely.models.stats import CategoryBreakdown
from chorely.models.task import CategoryRef, Task, TaskCreate, TaskUpdate
from chorely.utils.datetime_utils import now_utc

# Fields that may be cleared explicitly with null
_NULLABLE_FIELDS = {
    "description",
    "estimated_minutes",
    "actual_minutes",
    "assigned_to_id",
    "parent_task_id",
    "completed_at",
}
_UUID_FIELDS = {"category_id", "parent_task_id"}

_PRIORITY_RANK = case(
    (TaskORM.priority == TaskPriority.HIGH.value, 3),
    (TaskORM.priority == TaskPriority.MEDIUM.value, 2),
    else_=1,
)


def _uuid_or_none(value: Optional[str]) -> Optional[UUID]:
    return UUID(value) if value else None


class SqliteTaskRepository(ITaskRepository):
    """SQLite implementation of task repository."""

    def __init__(self, session_factory=None):
        """
        Initialize repository.

        Args:
            session_factory: Optional session factory (for testing)
        """
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: TaskORM, category: Optional[CategoryORM] = None) -> Task:
        """Convert ORM object to Pydantic model."""
        return Task(
            id=UUID(orm.id),
            title=orm.title,
            description=orm.description,
            is_completed=bool(orm.is_completed),
            completed_at=orm.completed_at,
            due_date=orm.due_date,
            estimated_minutes=orm.estimated_minutes,
            actual_minutes=orm.actual_minutes,
            priority=TaskPriority(orm.priority),
            user_id=_uuid_or_none(orm.user_id),
            category_id=UUID(orm.category_id),
            household_id=_uuid_or_none(orm.household_id),
            assigned_to_id=orm.assigned_to_id,
            parent_task_id=_uuid_or_none(orm.parent_task_id),
            source_task_id=_uuid_or_none(orm.source_task_id),
            created_at=orm.created_at,
            updated_at=orm.updated_at,
            category=(
                CategoryRef(
                    id=UUID(category.id),
                    name=category.name,
                    emoji=category.emoji,
                    color=category.color,
                )
                if category
                else None
            ),
        )

    def _select(self):
        """Task rows joined with their category."""
        return select(TaskORM, CategoryORM).outerjoin(
            CategoryORM, CategoryORM.id == TaskORM.category_id
        )

    async def _fetch_one(self, query) -> Optional[Task]:
        async with self._session_factory() as session:
            result = await session.execute(query)
            row = result.first()
            return self._orm_to_model(row[0], row[1]) if row else None

    async def _fetch_all(self, query) -> list[Task]:
        async with self._session_factory() as session:
            result = await session.execute(query)
            return [self._orm_to_model(task, category) for task, category in result.all()]

    async def create(self, task: TaskCreate, user_id: Optional[UUID]) -> Task:
        """Create a new task."""
        async with self._session_factory() as session:
            orm = TaskORM(
                id=str(uuid4()),
                title=task.title,
                description=task.description,
                is_completed=False,
                due_date=task.due_date,
                estimated_minutes=task.estimated_minutes,
                priority=task.priority.value,
                user_id=str(user_id) if user_id else None,
                category_id=str(task.category_id),
                household_id=str(task.household_id) if task.household_id else None,
                assigned_to_id=task.assigned_to_id,
                parent_task_id=str(task.parent_task_id) if task.parent_task_id else None,
                source_task_id=str(task.source_task_id) if task.source_task_id else None,
            )
            session.add(orm)
            await commit_or_raise(session, "A task of this series is already due at that time")
            task_id = orm.id

        return await self._fetch_one(self._select().where(TaskORM.id == task_id))

    async def get(self, task_id: UUID) -> Optional[Task]:
        """Get a task by ID."""
        return await self._fetch_one(self._select().where(TaskORM.id == str(task_id)))

    async def get_accessible(self, user_id: UUID, task_id: UUID) -> Optional[Task]:
        return await self._fetch_one(
            self._select().where(
                and_(TaskORM.id == str(task_id), accessible_to(TaskORM, user_id))
            )
        )

    async def list_accessible(
        self,
        user_id: UUID,
        status: TaskStatusFilter = TaskStatusFilter.ALL,
        priority: Optional[TaskPriority] = None,
        category_id: Optional[UUID] = None,
        household_id: Optional[UUID] = None,
        due_from: Optional[datetime] = None,
        due_to: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Task], int]:
        """List tasks with optional filters."""
        conditions = [accessible_to(TaskORM, user_id)]
        if status == TaskStatusFilter.COMPLETED:
            conditions.append(TaskORM.is_completed.is_(True))
        elif status == TaskStatusFilter.PENDING:
            conditions.append(TaskORM.is_completed.is_(False))
        if priority:
            conditions.append(TaskORM.priority == priority.value)
        if category_id:
            conditions.append(TaskORM.category_id == str(category_id))
        if household_id:
            conditions.append(TaskORM.household_id == str(household_id))
        if due_from:
            conditions.append(TaskORM.due_date >= due_from)
        if due_to:
            conditions.append(TaskORM.due_date < due_to)

        query = (
            self._select()
            .where(and_(*conditions))
            .order_by(
                TaskORM.is_completed.asc(),
                TaskORM.due_date.asc(),
                _PRIORITY_RANK.desc(),
                TaskORM.created_at.desc(),
            )
            .limit(limit)
            .offset(offset)
        )
        tasks = await self._fetch_all(query)

        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count(TaskORM.id)).where(and_(*conditions))
            )
            total = result.scalar_one()
        return tasks, total

    async def update(self, task_id: UUID, update: TaskUpdate) -> Task:
        """Update an existing task."""
        async with self._session_factory() as session:
            orm = await session.get(TaskORM, str(task_id))
            if not orm:
                raise NotFoundError(f"Task {task_id} not found")

            update_data = update.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                if value is None and field not in _NULLABLE_FIELDS:
                    continue
                if field in _UUID_FIELDS:
                    value = str(value) if value else None
                elif hasattr(value, "value"):  # Enum
                    value = value.value
                setattr(orm, field, value)

            orm.updated_at = now_utc()
            await commit_or_raise(session, "A task of this series is already due at that time")

        return await self.get(task_id)

    async def delete(self, task_id: UUID) -> bool:
        """Delete a task."""
        async with self._session_factory() as session:
            orm = await session.get(TaskORM, str(task_id))
            if not orm:
                return False
            await session.delete(orm)
            await session.commit()
            return True

    async def list_subtasks(self, task_id: UUID) -> list[Task]:
        return await self._fetch_all(
            self._select()
            .where(TaskORM.parent_task_id == str(task_id))
            .order_by(TaskORM.due_date, TaskORM.created_at)
        )

    async def get_ancestor_ids(self, task_id: UUID) -> list[UUID]:
        ancestors: list[UUID] = []
        seen = {str(task_id)}
        async with self._session_factory() as session:
            current = await session.get(TaskORM, str(task_id))
            while current is not None and current.parent_task_id:
                parent_id = current.parent_task_id
                ancestors.append(UUID(parent_id))
                if parent_id in seen:
                    break
                seen.add(parent_id)
                current = await session.get(TaskORM, parent_id)
        return ancestors

    async def list_series_instances(self, root_id: UUID) -> list[Task]:
        return await self._fetch_all(
            self._select()
            .where(TaskORM.source_task_id == str(root_id))
            .order_by(TaskORM.due_date)
        )

    async def list_series_roots(self, user_id: Optional[UUID] = None) -> list[Task]:
        query = self._select().join(RecurrenceRuleORM, RecurrenceRuleORM.task_id == TaskORM.id)
        if user_id:
            query = query.where(accessible_to(TaskORM, user_id))
        return await self._fetch_all(query.order_by(TaskORM.due_date))

    async def list_due_between(
        self, user_id: UUID, due_from: datetime, due_before: datetime
    ) -> list[Task]:
        return await self._fetch_all(
            self._select()
            .where(
                and_(
                    accessible_to(TaskORM, user_id),
                    TaskORM.due_date >= due_from,
                    TaskORM.due_date < due_before,
                )
            )
            .order_by(TaskORM.due_date)
        )

    async def count(
        self,
        user_id: UUID,
        is_completed: Optional[bool] = None,
        due_from: Optional[datetime] = None,
        due_before: Optional[datetime] = None,
        completed_from: Optional[datetime] = None,
        completed_before: Optional[datetime] = None,
    ) -> int:
        conditions = [accessible_to(TaskORM, user_id)]
        if is_completed is not None:
            conditions.append(TaskORM.is_completed.is_(is_completed))
        if due_from:
            conditions.append(TaskORM.due_date >= due_from)
        if due_before:
            conditions.append(TaskORM.due_date < due_before)
        if completed_from:
            conditions.append(TaskORM.completed_at >= completed_from)
        if completed_before:
            conditions.append(TaskORM.completed_at < completed_before)

        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count(TaskORM.id)).where(and_(*conditions))
            )
            return result.scalar_one()

    async def category_breakdown(self, user_id: UUID) -> list[CategoryBreakdown]:
        completed = func.sum(case((TaskORM.is_completed.is_(True), 1), else_=0))
        async with self._session_factory() as session:
            result = await session.execute(
                select(
                    CategoryORM.id,
                    CategoryORM.name,
                    CategoryORM.color,
                    CategoryORM.emoji,
                    func.count(TaskORM.id),
                    completed,
                )
                .select_from(TaskORM)
                .join(CategoryORM, CategoryORM.id == TaskORM.category_id)
                .where(accessible_to(TaskORM, user_id))
                .group_by(CategoryORM.id, CategoryORM.name, CategoryORM.color, CategoryORM.emoji)
                .order_by(func.count(TaskORM.id).desc(), CategoryORM.name)
            )
            return [
                CategoryBreakdown(
                    category_id=UUID(category_id),
                    name=name,
                    color=color,
                    emoji=emoji,
                    total=total,
                    completed=int(done or 0),
                )
                for category_id, name, color, emoji, total, done in result.all()
            ]
