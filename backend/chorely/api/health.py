"""
Per-user health check endpoint.
"""

from uuid import UUID

from fastapi import APIRouter

from chorely.api.deps import CategoryRepo, CurrentUser, HouseholdRepo, TaskRepo
from chorely.utils.datetime_utils import now_utc

router = APIRouter()


@router.get("/health")
async def user_health(
    user: CurrentUser,
    task_repo: TaskRepo,
    category_repo: CategoryRepo,
    household_repo: HouseholdRepo,
):
    """Database round trip with the counts of the user's data."""
    user_id = UUID(user.id)
    households = await household_repo.list_for_user(user_id)
    return {
        "status": "healthy",
        "user": user.model_dump(),
        "data": {
            "tasks": await task_repo.count(user_id),
            "categories": await category_repo.count_accessible(user_id),
            "households": len(households),
        },
        "timestamp": now_utc().isoformat(),
    }
