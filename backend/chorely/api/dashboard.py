"""
Dashboard API endpoints.
"""

from fastapi import APIRouter

from chorely.api.deps import CurrentUserId, StatsServiceDep
from chorely.models.stats import CleanlinessMetrics, DashboardStats, TaskStats

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(user_id: CurrentUserId, service: StatsServiceDep):
    return await service.dashboard_stats(user_id)


@router.get("/task-stats", response_model=TaskStats)
async def task_stats(user_id: CurrentUserId, service: StatsServiceDep):
    """Completion statistics and per-category breakdown."""
    return await service.task_stats(user_id)


@router.get("/cleanliness", response_model=CleanlinessMetrics)
async def cleanliness(user_id: CurrentUserId, service: StatsServiceDep):
    """Cleanliness score, streak and the last seven days of progress."""
    return await service.cleanliness(user_id)
