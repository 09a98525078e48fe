"""
Task history models (append-only audit log).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from chorely.models.enums import TaskHistoryAction
from chorely.utils.datetime_utils import to_naive_utc


class TaskHistoryCreate(BaseModel):
    task_id: UUID
    action: TaskHistoryAction
    completed_by: Optional[str] = Field(None, max_length=255, description="Acting user id")
    completion_time: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("completion_time")
    @classmethod
    def _normalize_completion_time(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class TaskHistory(TaskHistoryCreate):
    """Recorded history entry."""

    id: UUID
    created_at: datetime

    class Config:
        from_attributes = True
