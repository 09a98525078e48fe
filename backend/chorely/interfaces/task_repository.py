"""
Task repository interface.

Defines the contract for task persistence operations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from chorely.models.enums import TaskPriority, TaskStatusFilter
from chorely.models.stats import CategoryBreakdown
from chorely.models.task import Task, TaskCreate, TaskUpdate


class ITaskRepository(ABC):
    """Abstract interface for task persistence."""

    @abstractmethod
    async def create(self, task: TaskCreate, user_id: Optional[UUID]) -> Task:
        """
        Create a new task.

        Args:
            task: Task creation data
            user_id: Owner, None for household tasks

        Returns:
            Task: Created task with category attached
        """
        pass

    @abstractmethod
    async def get(self, task_id: UUID) -> Optional[Task]:
        """Get a task by ID without access checks (system use)."""
        pass

    @abstractmethod
    async def get_accessible(self, user_id: UUID, task_id: UUID) -> Optional[Task]:
        """Get a task if it is the user's own or belongs to one of their households."""
        pass

    @abstractmethod
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
        """
        List accessible tasks with filters.

        Ordered pending first, then by due date, priority (high first) and newest.

        Returns:
            tuple: (page of tasks, total count matching the filters)
        """
        pass

    @abstractmethod
    async def update(self, task_id: UUID, update: TaskUpdate) -> Task:
        """
        Update an existing task.

        Raises:
            NotFoundError: If task not found
        """
        pass

    @abstractmethod
    async def delete(self, task_id: UUID) -> bool:
        """Delete a task with its rule, history, subtasks and generated instances."""
        pass

    @abstractmethod
    async def list_subtasks(self, task_id: UUID) -> list[Task]:
        pass

    @abstractmethod
    async def get_ancestor_ids(self, task_id: UUID) -> list[UUID]:
        """Walk parent_task_id upwards; returns parent first, root last."""
        pass

    @abstractmethod
    async def list_series_instances(self, root_id: UUID) -> list[Task]:
        """Instances generated from a series root, ordered by due date."""
        pass

    @abstractmethod
    async def list_series_roots(self, user_id: Optional[UUID] = None) -> list[Task]:
        """Tasks that own a recurrence rule, limited to those accessible to ``user_id`` when given."""
        pass

    @abstractmethod
    async def list_due_between(
        self, user_id: UUID, due_from: datetime, due_before: datetime
    ) -> list[Task]:
        """All accessible tasks due in ``[due_from, due_before)``, by due date."""
        pass

    @abstractmethod
    async def count(
        self,
        user_id: UUID,
        is_completed: Optional[bool] = None,
        due_from: Optional[datetime] = None,
        due_before: Optional[datetime] = None,
        completed_from: Optional[datetime] = None,
        completed_before: Optional[datetime] = None,
    ) -> int:
        """Count accessible tasks matching the given filters."""
        pass

    @abstractmethod
    async def category_breakdown(self, user_id: UUID) -> list[CategoryBreakdown]:
        """Total/completed counts of accessible tasks per category."""
        pass
