"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the SQLite
infrastructure implementations and the services built on top of them.
"""

from functools import lru_cache
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from chorely.core.config import Settings, get_settings
from chorely.core.exceptions import AuthenticationError
from chorely.interfaces.auth_provider import IAuthProvider, User
from chorely.interfaces.category_repository import ICategoryRepository
from chorely.interfaces.household_repository import IHouseholdRepository
from chorely.interfaces.recurrence_rule_repository import IRecurrenceRuleRepository
from chorely.interfaces.task_history_repository import ITaskHistoryRepository
from chorely.interfaces.task_repository import ITaskRepository
from chorely.interfaces.user_repository import IUserRepository
from chorely.services.category_service import CategoryService
from chorely.services.household_service import HouseholdService
from chorely.services.recurrence_service import RecurrenceService
from chorely.services.stats_service import StatsService
from chorely.services.task_service import TaskService


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_user_repository() -> IUserRepository:
    """Get user repository instance."""
    from chorely.infrastructure.local.user_repository import SqliteUserRepository
    return SqliteUserRepository()


@lru_cache()
def get_household_repository() -> IHouseholdRepository:
    """Get household repository instance."""
    from chorely.infrastructure.local.household_repository import SqliteHouseholdRepository
    return SqliteHouseholdRepository()


@lru_cache()
def get_category_repository() -> ICategoryRepository:
    """Get category repository instance."""
    from chorely.infrastructure.local.category_repository import SqliteCategoryRepository
    return SqliteCategoryRepository()


@lru_cache()
def get_task_repository() -> ITaskRepository:
    """Get task repository instance."""
    from chorely.infrastructure.local.task_repository import SqliteTaskRepository
    return SqliteTaskRepository()


@lru_cache()
def get_recurrence_rule_repository() -> IRecurrenceRuleRepository:
    """Get recurrence rule repository instance."""
    from chorely.infrastructure.local.recurrence_rule_repository import (
        SqliteRecurrenceRuleRepository,
    )
    return SqliteRecurrenceRuleRepository()


@lru_cache()
def get_task_history_repository() -> ITaskHistoryRepository:
    """Get task history repository instance."""
    from chorely.infrastructure.local.task_history_repository import SqliteTaskHistoryRepository
    return SqliteTaskHistoryRepository()


UserRepo = Annotated[IUserRepository, Depends(get_user_repository)]
HouseholdRepo = Annotated[IHouseholdRepository, Depends(get_household_repository)]
CategoryRepo = Annotated[ICategoryRepository, Depends(get_category_repository)]
TaskRepo = Annotated[ITaskRepository, Depends(get_task_repository)]
RecurrenceRuleRepo = Annotated[IRecurrenceRuleRepository, Depends(get_recurrence_rule_repository)]
TaskHistoryRepo = Annotated[ITaskHistoryRepository, Depends(get_task_history_repository)]


# ===========================================
# Service Dependencies
# ===========================================


def get_recurrence_service(
    rule_repo: RecurrenceRuleRepo,
    task_repo: TaskRepo,
    history_repo: TaskHistoryRepo,
    settings: Settings = Depends(get_settings),
) -> RecurrenceService:
    return RecurrenceService(
        rule_repo, task_repo, history_repo, lookahead_days=settings.RECURRENCE_LOOKAHEAD_DAYS
    )


def get_task_service(
    task_repo: TaskRepo,
    category_repo: CategoryRepo,
    household_repo: HouseholdRepo,
    history_repo: TaskHistoryRepo,
    rule_repo: RecurrenceRuleRepo,
    recurrence_service: RecurrenceService = Depends(get_recurrence_service),
) -> TaskService:
    return TaskService(
        task_repo,
        category_repo,
        household_repo,
        history_repo,
        rule_repo,
        recurrence_service=recurrence_service,
    )


def get_category_service(
    category_repo: CategoryRepo, household_repo: HouseholdRepo
) -> CategoryService:
    return CategoryService(category_repo, household_repo)


def get_household_service(
    household_repo: HouseholdRepo, user_repo: UserRepo
) -> HouseholdService:
    return HouseholdService(household_repo, user_repo)


def get_stats_service(task_repo: TaskRepo) -> StatsService:
    return StatsService(task_repo)


RecurrenceServiceDep = Annotated[RecurrenceService, Depends(get_recurrence_service)]
TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
HouseholdServiceDep = Annotated[HouseholdService, Depends(get_household_service)]
StatsServiceDep = Annotated[StatsService, Depends(get_stats_service)]


# ===========================================
# Authentication
# ===========================================


def get_auth_provider(
    user_repo: UserRepo,
    settings: Settings = Depends(get_settings),
) -> IAuthProvider:
    """Get the authentication provider."""
    from chorely.infrastructure.auth.local_auth import LocalAuthProvider
    return LocalAuthProvider(settings, user_repo)


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> User:
    """Get current authenticated user from the bearer token."""
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
        )

    # Extract token from "Bearer <token>"
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid scheme")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    try:
        return await auth_provider.verify_token(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        )


def get_current_user_id(user: User = Depends(get_current_user)) -> UUID:
    return UUID(user.id)


CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]
