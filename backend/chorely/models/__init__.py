"""Pydantic models (schemas) for the application."""

from chorely.models.enums import (
    HouseholdRole,
    RecurrenceFrequency,
    TaskHistoryAction,
    TaskPriority,
    TaskStatusFilter,
    Weekday,
)
from chorely.models.user import UserAccount, UserCreate, UserSummary, UserUpdate
from chorely.models.household import (
    Household,
    HouseholdCreate,
    HouseholdMember,
    HouseholdMemberCreate,
    HouseholdUpdate,
    HouseholdWithStats,
)
from chorely.models.category import Category, CategoryCreate, CategoryUpdate, CategoryWithStats
from chorely.models.task import Task, TaskCreate, TaskPatch, TaskUpdate
from chorely.models.recurrence_rule import RecurrenceRule, RecurrenceRuleCreate, RecurrenceRuleUpdate
from chorely.models.task_history import TaskHistory, TaskHistoryCreate
from chorely.models.stats import DashboardStats, TaskStats

__all__ = [
    # Enums
    "HouseholdRole",
    "RecurrenceFrequency",
    "TaskHistoryAction",
    "TaskPriority",
    "TaskStatusFilter",
    "Weekday",
    # User
    "UserAccount",
    "UserCreate",
    "UserSummary",
    "UserUpdate",
    # Household
    "Household",
    "HouseholdCreate",
    "HouseholdMember",
    "HouseholdMemberCreate",
    "HouseholdUpdate",
    "HouseholdWithStats",
    # Category
    "Category",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryWithStats",
    # Task
    "Task",
    "TaskCreate",
    "TaskPatch",
    "TaskUpdate",
    # Recurrence
    "RecurrenceRule",
    "RecurrenceRuleCreate",
    "RecurrenceRuleUpdate",
    # History
    "TaskHistory",
    "TaskHistoryCreate",
    # Stats
    "DashboardStats",
    "TaskStats",
]
