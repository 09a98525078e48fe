"""
Recurrence rule models.

A rule belongs to exactly one task (the series root) and describes how that task repeats.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from chorely.models.enums import RecurrenceFrequency, Weekday


def _dedupe_days(value: Optional[list[Weekday]]) -> Optional[list[Weekday]]:
    if value is None:
        return None
    return sorted(set(value), key=lambda day: day.index)


class RecurrenceRuleBase(BaseModel):
    """Base fields for recurrence rules."""

    frequency: RecurrenceFrequency = RecurrenceFrequency.WEEKLY
    interval: int = Field(1, ge=1, le=365, description="Repeat every N periods")
    days_of_week: list[Weekday] = Field(
        default_factory=list, description="Weekdays to repeat on (WEEKLY only)"
    )
    day_of_month: Optional[int] = Field(
        None, ge=1, le=31, description="Day of month anchor (MONTHLY/YEARLY), clamped in short months"
    )
    end_date: Optional[date] = Field(None, description="Last calendar day an occurrence may fall on")
    occurrences: Optional[int] = Field(
        None, ge=1, description="Total occurrences including the series root"
    )

    @field_validator("days_of_week")
    @classmethod
    def _normalize_days(cls, value):
        return _dedupe_days(value)


class RecurrenceRuleCreate(RecurrenceRuleBase):
    """Create (or replace) the rule of a task."""

    pass


class RecurrenceRuleUpdate(BaseModel):
    """Update recurrence rule fields."""

    frequency: Optional[RecurrenceFrequency] = None
    interval: Optional[int] = Field(None, ge=1, le=365)
    days_of_week: Optional[list[Weekday]] = None
    day_of_month: Optional[int] = Field(None, ge=1, le=31)
    end_date: Optional[date] = None
    occurrences: Optional[int] = Field(None, ge=1)
    last_generated_date: Optional[datetime] = None

    @field_validator("days_of_week")
    @classmethod
    def _normalize_days(cls, value):
        return _dedupe_days(value)


class RecurrenceRule(RecurrenceRuleBase):
    """Recurrence rule with metadata."""

    id: UUID
    task_id: UUID
    last_generated_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RecurrencePreview(BaseModel):
    """Upcoming occurrence dates of a series."""

    task_id: UUID
    occurrences: list[datetime]
