"""
SQLite implementation of task history repository.
"""

from __future__ import annotations

from uuid import UUID, uuid4

from sqlalchemy import select

from chorely.infrastructure.local.database import TaskHistoryORM, get_session_factory
from chorely.infrastructure.local.query_utils import commit_or_raise
from chorely.interfaces.task_history_repository import ITaskHistoryRepository
from chorely.models.enums import TaskHistoryAction
from chorely.models.task_history import TaskHistory, TaskHistoryCreate


class SqliteTaskHistoryRepository(ITaskHistoryRepository):
    """SQLite implementation of task history repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: TaskHistoryORM) -> TaskHistory:
        return TaskHistory(
            id=UUID(orm.id),
            task_id=UUID(orm.task_id),
            action=TaskHistoryAction(orm.action),
            completed_by=orm.completed_by,
            completion_time=orm.completion_time,
            notes=orm.notes,
            created_at=orm.created_at,
        )

    async def create(self, entry: TaskHistoryCreate) -> TaskHistory:
        async with self._session_factory() as session:
            orm = TaskHistoryORM(
                id=str(uuid4()),
                task_id=str(entry.task_id),
                action=entry.action.value,
                completed_by=entry.completed_by,
                completion_time=entry.completion_time,
                notes=entry.notes,
            )
            session.add(orm)
            await commit_or_raise(session, "Duplicate history entry")
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def list_for_task(self, task_id: UUID, limit: int = 10) -> list[TaskHistory]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(TaskHistoryORM)
                .where(TaskHistoryORM.task_id == str(task_id))
                .order_by(TaskHistoryORM.created_at.desc(), TaskHistoryORM.id.desc())
                .limit(limit)
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]
