"""
Task history repository interface.

History is append-only: there is no update or delete.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from chorely.models.task_history import TaskHistory, TaskHistoryCreate


class ITaskHistoryRepository(ABC):
    @abstractmethod
    async def create(self, entry: TaskHistoryCreate) -> TaskHistory:
        pass

    @abstractmethod
    async def list_for_task(self, task_id: UUID, limit: int = 10) -> list[TaskHistory]:
        """List entries for a task, newest first."""
        pass
