"""
Dashboard statistics models.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class DailyProgress(BaseModel):
    """Completion of the tasks due on one day."""

    day: date
    name: str = Field(..., description="Short weekday name, e.g. Mon")
    completed: int = 0
    total: int = 0
    score: int = Field(100, ge=0, le=100)


class CleanlinessMetrics(BaseModel):
    """
    How well the household keeps up with its chores.

    ``overall_score`` weighs the last seven days, with cleaning, laundry and
    maintenance chores counting more. ``streak`` counts consecutive days, back
    from today, on which at least 80% of the due tasks were completed; days
    without tasks are skipped.
    """

    overall_score: int = Field(100, ge=0, le=100)
    weekly_score: int = Field(100, ge=0, le=100)
    streak: int = 0
    completed_today: int = 0
    completed_this_week: int = 0
    total_tasks: int = 0
    label: str
    label_emoji: str
    message: str
    daily_progress: list[DailyProgress] = Field(default_factory=list)


class DashboardStats(BaseModel):
    """Headline counters for the dashboard."""

    active_tasks: int = 0
    overdue_tasks: int = 0
    due_today: int = 0
    completed_this_week: int = 0
    completed_last_week: int = 0
    completed_change_percent: int = Field(
        0, description="Week-over-week change of completed tasks, rounded"
    )
    cleanliness: Optional[CleanlinessMetrics] = None


class CategoryBreakdown(BaseModel):
    category_id: Optional[UUID] = None
    name: str
    color: Optional[str] = None
    emoji: Optional[str] = None
    total: int = 0
    completed: int = 0


class TaskStats(BaseModel):
    """Completion statistics over all accessible tasks."""

    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0
    completion_rate: int = Field(0, ge=0, le=100, description="Percent of tasks completed")
    by_category: list[CategoryBreakdown] = Field(default_factory=list)
