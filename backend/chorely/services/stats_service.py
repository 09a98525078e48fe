"""
Dashboard statistics service.
"""

from __future__ import annotations

import math
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Optional
from uuid import UUID

from chorely.interfaces.task_repository import ITaskRepository
from chorely.models.enums import TaskStatusFilter
from chorely.models.stats import CleanlinessMetrics, DailyProgress, DashboardStats, TaskStats
from chorely.models.task import Task, UpcomingTask
from chorely.utils.datetime_utils import now_utc, start_of_day, start_of_week


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def week_over_week_change(this_week: int, last_week: int) -> int:
    """Percentage change of completions; 100 when last week had none but this week has some."""
    if last_week > 0:
        return _round_half_up((this_week - last_week) / last_week * 100)
    return 100 if this_week > 0 else 0


def _time_label(value: datetime) -> str:
    return value.strftime("%I:%M %p").lstrip("0")


def format_due_label(due_date: datetime, now: datetime) -> str:
    """
    Human label for a due date relative to ``now``.

    Examples:
        "Today, 3:00 PM", "Tomorrow, 9:30 AM", "Overdue (Mon, Mar 3)",
        "Friday, Mar 7, 10:00 AM"
    """
    today = start_of_day(now)
    tomorrow = today + timedelta(days=1)
    if due_date < today:
        return f"Overdue ({due_date.strftime('%a, %b')} {due_date.day})"
    if due_date < tomorrow:
        return f"Today, {_time_label(due_date)}"
    if due_date < tomorrow + timedelta(days=1):
        return f"Tomorrow, {_time_label(due_date)}"
    return f"{due_date.strftime('%A, %b')} {due_date.day}, {_time_label(due_date)}"


# Chores that count extra towards the overall cleanliness score
CLEANING_CATEGORY_NAMES = {"cleaning", "laundry", "maintenance"}
GOOD_DAY_RATE = 0.8
STREAK_MAX_DAYS = 30
PROGRESS_DAYS = 7

_CLEANLINESS_LABELS = [
    (90, "Sparkling Clean!", "✨"),
    (80, "Very Clean", "🌟"),
    (70, "Pretty Clean", "😊"),
    (60, "Getting There", "🔄"),
    (40, "Needs Work", "💪"),
]


def cleanliness_label(score: int) -> tuple[str, str]:
    """Label and emoji for a cleanliness score."""
    for threshold, label, emoji in _CLEANLINESS_LABELS:
        if score >= threshold:
            return label, emoji
    return "Time to Clean!", "🧹"


def motivational_message(score: int, streak: int) -> str:
    if score >= 90 and streak >= 7:
        return "You're absolutely crushing it! Your home is a sanctuary! 🏠✨"
    if score >= 80:
        return "Fantastic work! You're maintaining such a clean and organized space! 🌟"
    if score >= 70:
        return "Great job keeping up with your tasks! Your effort is paying off! 💪"
    if score >= 60:
        return "You're on the right track! Keep building those healthy habits! 🚀"
    if streak >= 3:
        return f"Amazing {streak}-day streak! You're building something great! 🔥"
    return "Every small step counts! You've got this! 💕"


def _completion_rate(tasks: list[Task]) -> float:
    """Share of completed tasks; an empty list counts as fully done."""
    if not tasks:
        return 1.0
    return sum(1 for task in tasks if task.is_completed) / len(tasks)


def calculate_cleanliness(tasks: list[Task], now: datetime, total_tasks: int) -> CleanlinessMetrics:
    """
    Cleanliness metrics from the tasks due around ``now``.

    ``tasks`` must cover the streak window (the last 30 days) and the current week.
    """
    today = start_of_day(now).date()
    by_day: dict[date, list[Task]] = defaultdict(list)
    for task in tasks:
        by_day[task.due_date.date()].append(task)

    recent = [task for task in tasks if now - timedelta(days=7) <= task.due_date <= now]
    week_start = start_of_week(now)
    week = [task for task in tasks if week_start <= task.due_date < week_start + timedelta(weeks=1)]
    cleaning = [
        task
        for task in recent
        if task.category and task.category.name.lower() in CLEANING_CATEGORY_NAMES
    ]

    daily_progress = []
    for offset in range(PROGRESS_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_tasks = by_day.get(day, [])
        daily_progress.append(
            DailyProgress(
                day=day,
                name=day.strftime("%a"),
                completed=sum(1 for task in day_tasks if task.is_completed),
                total=len(day_tasks),
                score=_round_half_up(_completion_rate(day_tasks) * 100),
            )
        )

    streak = 0
    for offset in range(STREAK_MAX_DAYS):
        day_tasks = by_day.get(today - timedelta(days=offset))
        if not day_tasks:
            continue
        if _completion_rate(day_tasks) < GOOD_DAY_RATE:
            break
        streak += 1

    overall = _round_half_up(
        (_completion_rate(recent) * 0.4 + _completion_rate(cleaning) * 0.6) * 100
    )
    label, emoji = cleanliness_label(overall)
    return CleanlinessMetrics(
        overall_score=overall,
        weekly_score=_round_half_up(_completion_rate(week) * 100),
        streak=streak,
        completed_today=sum(1 for task in by_day.get(today, []) if task.is_completed),
        completed_this_week=sum(1 for task in week if task.is_completed),
        total_tasks=total_tasks,
        label=label,
        label_emoji=emoji,
        message=motivational_message(overall, streak),
        daily_progress=daily_progress,
    )


class StatsService:
    def __init__(self, task_repo: ITaskRepository):
        self.task_repo = task_repo

    async def dashboard_stats(self, user_id: UUID, now: Optional[datetime] = None) -> DashboardStats:
        now = now or now_utc()
        today = start_of_day(now)
        week_start = start_of_week(now)
        last_week_start = week_start - timedelta(weeks=1)

        active = await self.task_repo.count(user_id, is_completed=False)
        overdue = await self.task_repo.count(user_id, is_completed=False, due_before=now)
        due_today = await self.task_repo.count(
            user_id, is_completed=False, due_from=today, due_before=today + timedelta(days=1)
        )
        this_week = await self.task_repo.count(
            user_id, is_completed=True, completed_from=week_start
        )
        last_week = await self.task_repo.count(
            user_id,
            is_completed=True,
            completed_from=last_week_start,
            completed_before=week_start,
        )
        return DashboardStats(
            active_tasks=active,
            overdue_tasks=overdue,
            due_today=due_today,
            completed_this_week=this_week,
            completed_last_week=last_week,
            completed_change_percent=week_over_week_change(this_week, last_week),
            cleanliness=await self.cleanliness(user_id, now=now),
        )

    async def cleanliness(self, user_id: UUID, now: Optional[datetime] = None) -> CleanlinessMetrics:
        now = now or now_utc()
        today = start_of_day(now)
        tasks = await self.task_repo.list_due_between(
            user_id,
            due_from=today - timedelta(days=STREAK_MAX_DAYS - 1),
            due_before=start_of_week(now) + timedelta(weeks=1),
        )
        total = await self.task_repo.count(user_id)
        return calculate_cleanliness(tasks, now, total_tasks=total)

    async def task_stats(self, user_id: UUID, now: Optional[datetime] = None) -> TaskStats:
        now = now or now_utc()
        total = await self.task_repo.count(user_id)
        completed = await self.task_repo.count(user_id, is_completed=True)
        overdue = await self.task_repo.count(user_id, is_completed=False, due_before=now)
        return TaskStats(
            total=total,
            completed=completed,
            pending=total - completed,
            overdue=overdue,
            completion_rate=round(completed / total * 100) if total else 0,
            by_category=await self.task_repo.category_breakdown(user_id),
        )

    async def upcoming_tasks(
        self, user_id: UUID, limit: int = 10, now: Optional[datetime] = None
    ) -> list[UpcomingTask]:
        """Pending tasks by due date, then priority."""
        now = now or now_utc()
        tasks, _ = await self.task_repo.list_accessible(
            user_id, status=TaskStatusFilter.PENDING, limit=limit
        )
        return [self._to_upcoming(task, now) for task in tasks]

    @staticmethod
    def _to_upcoming(task: Task, now: datetime) -> UpcomingTask:
        return UpcomingTask(
            id=task.id,
            title=task.title,
            description=task.description,
            due_date=task.due_date,
            due_label=format_due_label(task.due_date, now),
            priority=task.priority,
            category=task.category.name if task.category else None,
            category_color=task.category.color if task.category else None,
            category_emoji=task.category.emoji if task.category else None,
            estimated_minutes=task.estimated_minutes,
            is_overdue=task.due_date < now,
        )
