"""
Recurrence service.

Expands recurrence rules into occurrence dates and materialises the upcoming
occurrences of each series as task instances.

A series is anchored at the due date of the task that owns the rule (the series
root). The root itself is always occurrence #1; generated instances point back
to it through ``source_task_id``.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator, Optional
from uuid import UUID

from chorely.core.exceptions import BusinessLogicError, DuplicateError, ValidationError
from chorely.core.logger import setup_logger
from chorely.interfaces.recurrence_rule_repository import IRecurrenceRuleRepository
from chorely.interfaces.task_history_repository import ITaskHistoryRepository
from chorely.interfaces.task_repository import ITaskRepository
from chorely.models.enums import RecurrenceFrequency, TaskHistoryAction
from chorely.models.recurrence_rule import (
    RecurrenceRule,
    RecurrenceRuleBase,
    RecurrenceRuleCreate,
    RecurrenceRuleUpdate,
)
from chorely.models.task import Task, TaskCreate
from chorely.models.task_history import TaskHistoryCreate
from chorely.utils.datetime_utils import now_utc, start_of_day

logger = setup_logger(__name__)


# ===========================================
# Occurrence arithmetic
# ===========================================


def _clamped(year: int, month: int, day: int) -> date:
    """Date in the given month with ``day`` clamped to the month length."""
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))


def _at(day: date, anchor: datetime) -> datetime:
    return datetime.combine(day, anchor.time())


def _candidates(rule: RecurrenceRuleBase, anchor: datetime) -> Iterator[datetime]:
    """Unbounded, strictly increasing occurrences after the anchor."""
    interval = rule.interval
    freq = rule.frequency

    if freq == RecurrenceFrequency.DAILY:
        step = 1
        while True:
            yield anchor + timedelta(days=step * interval)
            step += 1

    elif freq == RecurrenceFrequency.WEEKLY and not rule.days_of_week:
        step = 1
        while True:
            yield anchor + timedelta(weeks=step * interval)
            step += 1

    elif freq == RecurrenceFrequency.WEEKLY:
        weekdays = sorted({day.index for day in rule.days_of_week})
        anchor_monday = anchor.date() - timedelta(days=anchor.weekday())
        week = 0
        while True:
            monday = anchor_monday + timedelta(weeks=week * interval)
            for weekday in weekdays:
                candidate = _at(monday + timedelta(days=weekday), anchor)
                if candidate > anchor:
                    yield candidate
            week += 1

    elif freq == RecurrenceFrequency.MONTHLY:
        day = rule.day_of_month or anchor.day
        anchor_month_index = anchor.year * 12 + anchor.month - 1
        step = 0
        while True:
            month_index = anchor_month_index + step * interval
            candidate = _at(_clamped(month_index // 12, month_index % 12 + 1, day), anchor)
            if candidate > anchor:
                yield candidate
            step += 1

    elif freq == RecurrenceFrequency.YEARLY:
        day = rule.day_of_month or anchor.day
        step = 0
        while True:
            candidate = _at(_clamped(anchor.year + step * interval, anchor.month, day), anchor)
            if candidate > anchor:
                yield candidate
            step += 1


def iter_occurrences(
    rule: RecurrenceRuleBase,
    anchor: datetime,
    after: Optional[datetime] = None,
    until: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> Iterator[datetime]:
    """
    Iterate the occurrences of a rule anchored at ``anchor``.

    The anchor is occurrence #1. ``rule.occurrences`` caps the total count and
    ``rule.end_date`` (inclusive, by calendar date) ends the series.

    Args:
        rule: Recurrence rule
        anchor: Due date of the series root
        after: Only yield occurrences strictly after this moment
        until: Stop after this moment (inclusive)
        limit: Maximum number of occurrences to yield

    Examples:
        Monthly on the 31st: Jan 31 -> Feb 28 -> Mar 31 -> Apr 30
    """
    if limit is not None and limit <= 0:
        return
    yielded = 0
    position = 0

    def _sequence() -> Iterator[datetime]:
        yield anchor
        yield from _candidates(rule, anchor)

    for occurrence in _sequence():
        position += 1
        if rule.occurrences is not None and position > rule.occurrences:
            return
        if rule.end_date is not None and occurrence.date() > rule.end_date:
            return
        if until is not None and occurrence > until:
            return
        if after is not None and occurrence <= after:
            continue
        yield occurrence
        yielded += 1
        if limit is not None and yielded >= limit:
            return


def next_occurrence(
    rule: RecurrenceRuleBase, anchor: datetime, after: datetime
) -> Optional[datetime]:
    """Next occurrence strictly after ``after``, or None when the series is exhausted."""
    return next(iter_occurrences(rule, anchor, after=after, limit=1), None)


def validate_rule(rule: RecurrenceRuleBase, anchor: datetime) -> None:
    """Reject rules that can never produce a sensible series."""
    if rule.end_date is not None and rule.end_date < anchor.date():
        raise ValidationError("End date must not be before the task's due date")
    if rule.day_of_month is not None and rule.frequency not in (
        RecurrenceFrequency.MONTHLY,
        RecurrenceFrequency.YEARLY,
    ):
        raise ValidationError("day_of_month only applies to monthly or yearly rules")


def _describe(rule: RecurrenceRuleBase) -> str:
    text = f"every {rule.interval} {rule.frequency.value}"
    if rule.frequency == RecurrenceFrequency.WEEKLY and rule.days_of_week:
        text += " on " + ", ".join(day.value for day in rule.days_of_week)
    if rule.day_of_month:
        text += f" on day {rule.day_of_month}"
    if rule.end_date:
        text += f" until {rule.end_date.isoformat()}"
    if rule.occurrences:
        text += f" for {rule.occurrences} occurrences"
    return text


# ===========================================
# Service
# ===========================================


class RecurrenceService:
    """Service for recurrence rules and the task instances they generate."""

    def __init__(
        self,
        rule_repo: IRecurrenceRuleRepository,
        task_repo: ITaskRepository,
        history_repo: ITaskHistoryRepository,
        lookahead_days: int = 30,
    ):
        self.rule_repo = rule_repo
        self.task_repo = task_repo
        self.history_repo = history_repo
        self.lookahead_days = lookahead_days

    async def set_rule(
        self, task: Task, data: RecurrenceRuleCreate, user_id: Optional[UUID] = None
    ) -> RecurrenceRule:
        """Create or replace the recurrence rule of a series root."""
        if task.source_task_id:
            raise BusinessLogicError(
                "Generated instances cannot own a recurrence rule; edit the series root task"
            )
        validate_rule(data, task.due_date)

        existing = await self.rule_repo.get_by_task(task.id)
        if existing:
            rule = await self.rule_repo.update(
                task.id, RecurrenceRuleUpdate(**data.model_dump())
            )
        else:
            rule = await self.rule_repo.create(task.id, data)

        await self.history_repo.create(
            TaskHistoryCreate(
                task_id=task.id,
                action=TaskHistoryAction.RECURRENCE_SET,
                completed_by=str(user_id) if user_id else None,
                notes=_describe(rule),
            )
        )
        return rule

    async def remove_rule(self, task: Task, user_id: Optional[UUID] = None) -> bool:
        removed = await self.rule_repo.delete_by_task(task.id)
        if removed:
            await self.history_repo.create(
                TaskHistoryCreate(
                    task_id=task.id,
                    action=TaskHistoryAction.RECURRENCE_REMOVED,
                    completed_by=str(user_id) if user_id else None,
                )
            )
        return removed

    async def preview(
        self, root: Task, count: int = 5, after: Optional[datetime] = None
    ) -> list[datetime]:
        """Upcoming occurrence dates of a series (no writes)."""
        rule = await self.rule_repo.get_by_task(root.id)
        if not rule:
            return []
        return list(
            iter_occurrences(rule, root.due_date, after=after or now_utc(), limit=count)
        )

    async def generate_next(
        self, root: Task, rule: Optional[RecurrenceRule] = None
    ) -> Optional[Task]:
        """
        Create the instance following the latest existing occurrence of a series.

        Returns:
            The created task, or None when the series is exhausted or has no rule.
        """
        rule = rule or await self.rule_repo.get_by_task(root.id)
        if not rule:
            return None

        instances = await self.task_repo.list_series_instances(root.id)
        latest = max([root.due_date] + [task.due_date for task in instances])
        due_date = next_occurrence(rule, root.due_date, after=latest)
        if due_date is None:
            logger.info(f"Series {root.id} is exhausted")
            return None

        task = await self._create_instance(root, due_date)
        if task:
            await self.rule_repo.update(
                root.id, RecurrenceRuleUpdate(last_generated_date=due_date)
            )
        return task

    async def ensure_upcoming(
        self,
        lookahead_days: Optional[int] = None,
        now: Optional[datetime] = None,
        user_id: Optional[UUID] = None,
    ) -> dict:
        """Ensure every series has its instances up to ``now + lookahead`` materialised.

        With ``user_id`` only the series accessible to that user are touched.

        Occurrences before today are not backfilled. Due dates that already exist
        are skipped, so running this repeatedly creates nothing new.
        """
        now = now or now_utc()
        horizon = now + timedelta(days=self.lookahead_days if lookahead_days is None else lookahead_days)
        today = start_of_day(now)
        created: list[Task] = []

        for root in await self.task_repo.list_series_roots(user_id=user_id):
            rule = await self.rule_repo.get_by_task(root.id)
            if not rule:
                continue

            instances = await self.task_repo.list_series_instances(root.id)
            existing_due_dates = {task.due_date for task in instances}
            latest: Optional[datetime] = None

            for due_date in iter_occurrences(rule, root.due_date, after=root.due_date, until=horizon):
                if due_date < today:
                    continue
                if due_date in existing_due_dates:
                    continue
                task = await self._create_instance(root, due_date)
                if task:
                    created.append(task)
                    latest = due_date

            if latest and (rule.last_generated_date is None or latest > rule.last_generated_date):
                await self.rule_repo.update(
                    root.id, RecurrenceRuleUpdate(last_generated_date=latest)
                )

        if created:
            logger.info(f"Generated {len(created)} recurring task instance(s)")
        return {
            "created_count": len(created),
            "tasks": [task.model_dump(mode="json") for task in created],
        }

    async def handle_completion(self, task: Task) -> Optional[Task]:
        """
        React to a completed task of a series.

        The next instance is generated only when no task of the series is still pending.
        """
        if task.source_task_id:
            root = await self.task_repo.get(task.source_task_id)
            if not root:
                return None
        else:
            root = task

        rule = await self.rule_repo.get_by_task(root.id)
        if not rule:
            return None

        instances = await self.task_repo.list_series_instances(root.id)
        pending = [
            member
            for member in [root] + instances
            if member.id != task.id and not member.is_completed
        ]
        if pending:
            return None
        return await self.generate_next(root, rule)

    async def _create_instance(self, root: Task, due_date: datetime) -> Optional[Task]:
        data = TaskCreate(
            title=root.title,
            description=root.description,
            due_date=due_date,
            estimated_minutes=root.estimated_minutes,
            priority=root.priority,
            category_id=root.category_id,
            household_id=root.household_id,
            assigned_to_id=root.assigned_to_id,
            source_task_id=root.id,
        )
        try:
            task = await self.task_repo.create(data, root.user_id)
        except DuplicateError:
            logger.info(f"Instance of series {root.id} due {due_date.isoformat()} already exists")
            return None

        await self.history_repo.create(
            TaskHistoryCreate(
                task_id=task.id,
                action=TaskHistoryAction.GENERATED,
                notes=f"Generated from series {root.id}",
            )
        )
        return task
