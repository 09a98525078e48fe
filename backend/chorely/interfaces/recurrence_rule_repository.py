"""
Recurrence rule repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from chorely.models.recurrence_rule import RecurrenceRule, RecurrenceRuleCreate, RecurrenceRuleUpdate


class IRecurrenceRuleRepository(ABC):
    """Abstract interface for recurrence rule persistence."""

    @abstractmethod
    async def create(self, task_id: UUID, rule: RecurrenceRuleCreate) -> RecurrenceRule:
        """Attach a rule to a task. Raises DuplicateError if the task already has one."""
        pass

    @abstractmethod
    async def get_by_task(self, task_id: UUID) -> Optional[RecurrenceRule]:
        pass

    @abstractmethod
    async def update(self, task_id: UUID, update: RecurrenceRuleUpdate) -> RecurrenceRule:
        pass

    @abstractmethod
    async def delete_by_task(self, task_id: UUID) -> bool:
        pass

    @abstractmethod
    async def list_all(self) -> list[RecurrenceRule]:
        """List all rules (for background processes)."""
        pass
