"""
Task model definitions.

Tasks are the core entity: a chore with a due date and exactly one category. Tasks
form a tree through parent_task_id, and recurring series through source_task_id.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from chorely.models.enums import TaskPriority
from chorely.models.recurrence_rule import RecurrenceRule
from chorely.models.task_history import TaskHistory
from chorely.utils.datetime_utils import to_naive_utc


class CategoryRef(BaseModel):
    """Category summary embedded in task responses."""

    id: UUID
    name: str
    emoji: Optional[str] = None
    color: Optional[str] = None


class TaskBase(BaseModel):
    """Base task fields shared across create/read."""

    title: str = Field(..., min_length=1, max_length=500, description="Task title")
    description: Optional[str] = Field(None, max_length=2000)
    due_date: datetime = Field(..., description="When the task is due")
    estimated_minutes: Optional[int] = Field(None, ge=1, description="Estimated effort in minutes")
    priority: TaskPriority = Field(TaskPriority.MEDIUM)
    category_id: UUID = Field(..., description="Every task has exactly one category")
    household_id: Optional[UUID] = Field(None, description="Household the task belongs to (None = personal)")
    assigned_to_id: Optional[str] = Field(
        None, max_length=255, description="Loose user reference, not enforced by a relation"
    )
    parent_task_id: Optional[UUID] = Field(None, description="Parent task (for subtasks)")

    @field_validator("due_date")
    @classmethod
    def _normalize_due_date(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class TaskCreate(TaskBase):
    """Schema for creating a new task."""

    source_task_id: Optional[UUID] = Field(
        None, description="Series root this task was generated from"
    )


class TaskUpdate(BaseModel):
    """Schema for updating an existing task."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = Field(None, max_length=2000)
    is_completed: Optional[bool] = None
    due_date: Optional[datetime] = None
    estimated_minutes: Optional[int] = Field(None, ge=1)
    actual_minutes: Optional[int] = Field(None, ge=0)
    priority: Optional[TaskPriority] = None
    category_id: Optional[UUID] = None
    assigned_to_id: Optional[str] = Field(None, max_length=255)
    parent_task_id: Optional[UUID] = None

    @field_validator("due_date")
    @classmethod
    def _normalize_due_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class TaskPatch(TaskUpdate):
    """Internal update that may also set completion bookkeeping."""

    completed_at: Optional[datetime] = None


class Task(TaskBase):
    """Complete task model with all fields."""

    id: UUID
    user_id: Optional[UUID] = Field(None, description="Owner (None for household tasks)")
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    actual_minutes: Optional[int] = None
    source_task_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime
    category: Optional[CategoryRef] = None

    class Config:
        from_attributes = True

    @property
    def series_id(self) -> UUID:
        """Id of the series root (the task itself when not generated)."""
        return self.source_task_id or self.id


class TaskListResponse(BaseModel):
    """Paginated task listing."""

    tasks: list[Task]
    total_count: int
    has_more: bool


class UpcomingTask(BaseModel):
    """Pending task formatted for the dashboard."""

    id: UUID
    title: str
    description: Optional[str] = None
    due_date: datetime
    due_label: str
    priority: TaskPriority
    category: Optional[str] = None
    category_color: Optional[str] = None
    category_emoji: Optional[str] = None
    estimated_minutes: Optional[int] = None
    is_overdue: bool


class TaskDetail(Task):
    """Task with subtasks, recent history and its recurrence rule."""

    subtasks: list[Task] = Field(default_factory=list)
    history: list[TaskHistory] = Field(default_factory=list)
    recurrence_rule: Optional[RecurrenceRule] = None


class TaskEstimate(BaseModel):
    """Typical duration of a chore."""

    minutes: int = Field(..., ge=1)
    tips: Optional[str] = None


class TaskSuggestions(BaseModel):
    category_id: UUID
    suggestions: list[str] = Field(default_factory=list)
