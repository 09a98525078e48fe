"""Abstract interfaces for infrastructure abstraction."""

from chorely.interfaces.auth_provider import IAuthProvider
from chorely.interfaces.category_repository import ICategoryRepository
from chorely.interfaces.household_repository import IHouseholdRepository
from chorely.interfaces.recurrence_rule_repository import IRecurrenceRuleRepository
from chorely.interfaces.task_history_repository import ITaskHistoryRepository
from chorely.interfaces.task_repository import ITaskRepository
from chorely.interfaces.user_repository import IUserRepository

__all__ = [
    "IAuthProvider",
    "ICategoryRepository",
    "IHouseholdRepository",
    "IRecurrenceRuleRepository",
    "ITaskHistoryRepository",
    "ITaskRepository",
    "IUserRepository",
]
