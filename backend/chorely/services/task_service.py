"""
Task service.

Task lifecycle rules shared by the API and background jobs: access checks,
completion bookkeeping, history entries and subtask tree integrity.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from chorely.core.exceptions import (
    BusinessLogicError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from chorely.core.logger import setup_logger
from chorely.interfaces.category_repository import ICategoryRepository
from chorely.interfaces.household_repository import IHouseholdRepository
from chorely.interfaces.recurrence_rule_repository import IRecurrenceRuleRepository
from chorely.interfaces.task_history_repository import ITaskHistoryRepository
from chorely.interfaces.task_repository import ITaskRepository
from chorely.models.category import Category
from chorely.models.enums import TaskHistoryAction
from chorely.models.task import Task, TaskCreate, TaskDetail, TaskPatch, TaskUpdate
from chorely.models.task_history import TaskHistory, TaskHistoryCreate
from chorely.services.household_permissions import (
    HouseholdAction,
    ensure_household_action,
    get_household_access,
)
from chorely.services.recurrence_service import RecurrenceService
from chorely.services.task_estimates import get_task_estimate
from chorely.utils.datetime_utils import now_utc

logger = setup_logger(__name__)

DETAIL_HISTORY_LIMIT = 10


def _ensure_category_scope(category: Category, household_id: Optional[UUID]) -> None:
    """A task's category must live where the task lives: same household, or personal."""
    if category.household_id != household_id:
        if household_id:
            raise ValidationError("Household tasks must use a category of the same household")
        raise ValidationError("Personal tasks must use a personal category")


class TaskService:
    """Service for task lifecycle operations."""

    def __init__(
        self,
        task_repo: ITaskRepository,
        category_repo: ICategoryRepository,
        household_repo: IHouseholdRepository,
        history_repo: ITaskHistoryRepository,
        rule_repo: IRecurrenceRuleRepository,
        recurrence_service: Optional[RecurrenceService] = None,
    ):
        self.task_repo = task_repo
        self.category_repo = category_repo
        self.household_repo = household_repo
        self.history_repo = history_repo
        self.rule_repo = rule_repo
        self.recurrence_service = recurrence_service or RecurrenceService(
            rule_repo, task_repo, history_repo
        )

    async def get_accessible_task(self, user_id: UUID, task_id: UUID) -> Task:
        task = await self.task_repo.get_accessible(user_id, task_id)
        if not task:
            raise NotFoundError("Task not found or access denied")
        return task

    async def create_task(self, user_id: UUID, data: TaskCreate) -> Task:
        """
        Create a personal or household task.

        Household tasks are stored without an owning user. A missing estimate is
        filled from the known-chore catalogue.
        """
        category = await self.category_repo.get_accessible(user_id, data.category_id)
        if not category:
            raise ForbiddenError("Category not found or access denied")

        if data.household_id:
            access = await get_household_access(user_id, data.household_id, self.household_repo)
            ensure_household_action(access, HouseholdAction.TASK_WRITE)
        _ensure_category_scope(category, data.household_id)

        if data.parent_task_id:
            await self.get_accessible_task(user_id, data.parent_task_id)

        updates = {"source_task_id": None}
        if data.estimated_minutes is None:
            updates["estimated_minutes"] = get_task_estimate(data.title, category.name).minutes
        data = data.model_copy(update=updates)
        owner_id = None if data.household_id else user_id
        task = await self.task_repo.create(data, owner_id)

        await self._record(task.id, TaskHistoryAction.CREATED, user_id)
        logger.info(f"Task {task.id} created by {user_id}")
        return task

    async def update_task(self, user_id: UUID, task_id: UUID, update: TaskUpdate) -> Task:
        """
        Apply a partial update.

        Completing a task stamps ``completed_at``, defaults ``actual_minutes`` to the
        estimate and lets the recurrence engine produce the next occurrence.
        """
        task = await self.get_accessible_task(user_id, task_id)
        changes = update.model_dump(exclude_unset=True)

        if changes.get("category_id"):
            category = await self.category_repo.get_accessible(user_id, changes["category_id"])
            if not category:
                raise ForbiddenError("Category not found or access denied")
            _ensure_category_scope(category, task.household_id)

        if changes.get("parent_task_id"):
            await self.get_accessible_task(user_id, changes["parent_task_id"])
            await self._ensure_no_cycle(task.id, changes["parent_task_id"])

        changed_fields = sorted(field for field in changes if field != "is_completed")

        completing = changes.get("is_completed") is True and not task.is_completed
        reopening = changes.get("is_completed") is False and task.is_completed
        if completing:
            changes["completed_at"] = now_utc()
            if changes.get("actual_minutes") is None and task.estimated_minutes:
                changes["actual_minutes"] = task.estimated_minutes
        elif reopening:
            changes["completed_at"] = None
        else:
            changes.pop("is_completed", None)

        updated = await self.task_repo.update(task_id, TaskPatch(**changes))

        if completing:
            await self._record(
                task_id,
                TaskHistoryAction.COMPLETED,
                user_id,
                completion_time=updated.completed_at,
            )
        elif reopening:
            await self._record(task_id, TaskHistoryAction.REOPENED, user_id)

        if changed_fields:
            await self._record(
                task_id,
                TaskHistoryAction.UPDATED,
                user_id,
                notes="Changed: " + ", ".join(changed_fields),
            )

        if completing:
            await self.recurrence_service.handle_completion(updated)
        return updated

    async def toggle_completion(self, user_id: UUID, task_id: UUID) -> Task:
        task = await self.get_accessible_task(user_id, task_id)
        return await self.update_task(
            user_id, task_id, TaskUpdate(is_completed=not task.is_completed)
        )

    async def move_task(self, user_id: UUID, task_id: UUID, due_date: datetime) -> Task:
        """Reschedule a task to a new due date."""
        return await self.update_task(user_id, task_id, TaskUpdate(due_date=due_date))

    async def delete_task(self, user_id: UUID, task_id: UUID) -> None:
        """
        Delete a task.

        Household tasks need an owner or admin role; personal tasks only their owner.
        """
        task = await self.get_accessible_task(user_id, task_id)
        if task.household_id:
            access = await get_household_access(user_id, task.household_id, self.household_repo)
            ensure_household_action(access, HouseholdAction.TASK_DELETE)
        elif task.user_id != user_id:
            raise ForbiddenError("Only the owner can delete this task")

        await self.task_repo.delete(task_id)
        logger.info(f"Task {task_id} deleted by {user_id}")

    async def get_task_detail(self, user_id: UUID, task_id: UUID) -> TaskDetail:
        task = await self.get_accessible_task(user_id, task_id)
        subtasks = await self.task_repo.list_subtasks(task_id)
        history = await self.history_repo.list_for_task(task_id, limit=DETAIL_HISTORY_LIMIT)
        rule = await self.rule_repo.get_by_task(task.series_id)
        return TaskDetail(
            **task.model_dump(),
            subtasks=subtasks,
            history=history,
            recurrence_rule=rule,
        )

    async def list_history(
        self, user_id: UUID, task_id: UUID, limit: int = 50
    ) -> list[TaskHistory]:
        await self.get_accessible_task(user_id, task_id)
        return await self.history_repo.list_for_task(task_id, limit=limit)

    async def _ensure_no_cycle(self, task_id: UUID, parent_id: UUID) -> None:
        if parent_id == task_id:
            raise BusinessLogicError("A task cannot be its own parent")
        ancestors = await self.task_repo.get_ancestor_ids(parent_id)
        if task_id in ancestors:
            raise BusinessLogicError("Moving the task under its own subtask would create a cycle")

    async def _record(
        self,
        task_id: UUID,
        action: TaskHistoryAction,
        user_id: Optional[UUID],
        completion_time: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> TaskHistory:
        return await self.history_repo.create(
            TaskHistoryCreate(
                task_id=task_id,
                action=action,
                completed_by=str(user_id) if user_id else None,
                completion_time=completion_time,
                notes=notes,
            )
        )
