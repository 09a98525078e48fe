"""
Enum definitions for the application.

These enums are used across models and provide type-safe status/priority values.
Values are lowercase strings because that is how they are persisted.
"""

from enum import Enum


class TaskPriority(str, Enum):
    """Priority level of a task."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank, higher is more important."""
        return {"high": 3, "medium": 2, "low": 1}[self.value]


class TaskStatusFilter(str, Enum):
    """Completion filter for task listings."""

    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"


class HouseholdRole(str, Enum):
    """Role of a member within a household."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class RecurrenceFrequency(str, Enum):
    """How often a recurring task repeats."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Weekday(str, Enum):
    """Day of week, Monday first (index matches date.weekday())."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def index(self) -> int:
        return list(Weekday).index(self)


class TaskHistoryAction(str, Enum):
    """Audit log actions recorded for a task."""

    CREATED = "created"
    UPDATED = "updated"
    COMPLETED = "completed"
    REOPENED = "reopened"
    GENERATED = "generated"
    RECURRENCE_SET = "recurrence_set"
    RECURRENCE_REMOVED = "recurrence_removed"
