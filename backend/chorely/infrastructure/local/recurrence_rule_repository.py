"""
SQLite implementation of recurrence rule repository.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select

from chorely.core.exceptions import NotFoundError
from chorely.infrastructure.local.database import RecurrenceRuleORM, get_session_factory
from chorely.infrastructure.local.query_utils import commit_or_raise
from chorely.interfaces.recurrence_rule_repository import IRecurrenceRuleRepository
from chorely.models.enums import RecurrenceFrequency, Weekday
from chorely.models.recurrence_rule import RecurrenceRule, RecurrenceRuleCreate, RecurrenceRuleUpdate
from chorely.utils.datetime_utils import now_utc

_NULLABLE_FIELDS = {"day_of_month", "end_date", "occurrences", "last_generated_date"}


class SqliteRecurrenceRuleRepository(IRecurrenceRuleRepository):
    """SQLite implementation of recurrence rule repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: RecurrenceRuleORM) -> RecurrenceRule:
        return RecurrenceRule(
            id=UUID(orm.id),
            task_id=UUID(orm.task_id),
            frequency=RecurrenceFrequency(orm.frequency),
            interval=orm.interval,
            days_of_week=[Weekday(day) for day in (orm.days_of_week or [])],
            day_of_month=orm.day_of_month,
            end_date=orm.end_date,
            occurrences=orm.occurrences,
            last_generated_date=orm.last_generated_date,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    async def _get_orm(self, session, task_id: UUID) -> Optional[RecurrenceRuleORM]:
        result = await session.execute(
            select(RecurrenceRuleORM).where(RecurrenceRuleORM.task_id == str(task_id))
        )
        return result.scalar_one_or_none()

    async def create(self, task_id: UUID, rule: RecurrenceRuleCreate) -> RecurrenceRule:
        async with self._session_factory() as session:
            orm = RecurrenceRuleORM(
                id=str(uuid4()),
                task_id=str(task_id),
                frequency=rule.frequency.value,
                interval=rule.interval,
                days_of_week=[day.value for day in rule.days_of_week],
                day_of_month=rule.day_of_month,
                end_date=rule.end_date,
                occurrences=rule.occurrences,
            )
            session.add(orm)
            await commit_or_raise(session, f"Task {task_id} already has a recurrence rule")
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def get_by_task(self, task_id: UUID) -> Optional[RecurrenceRule]:
        async with self._session_factory() as session:
            orm = await self._get_orm(session, task_id)
            return self._orm_to_model(orm) if orm else None

    async def update(self, task_id: UUID, update: RecurrenceRuleUpdate) -> RecurrenceRule:
        async with self._session_factory() as session:
            orm = await self._get_orm(session, task_id)
            if not orm:
                raise NotFoundError(f"Recurrence rule for task {task_id} not found")

            update_data = update.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                if value is None and field not in _NULLABLE_FIELDS:
                    continue
                if field == "days_of_week":
                    value = [Weekday(day).value for day in value]
                elif hasattr(value, "value"):
                    value = value.value
                setattr(orm, field, value)

            orm.updated_at = now_utc()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def delete_by_task(self, task_id: UUID) -> bool:
        async with self._session_factory() as session:
            orm = await self._get_orm(session, task_id)
            if not orm:
                return False
            await session.delete(orm)
            await session.commit()
            return True

    async def list_all(self) -> list[RecurrenceRule]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(RecurrenceRuleORM).order_by(RecurrenceRuleORM.created_at)
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]
