"""
Shared fixtures: an in-memory SQLite database and repositories bound to it.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")

from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from chorely.infrastructure.local.category_repository import SqliteCategoryRepository
from chorely.infrastructure.local.database import create_engine_for_url, init_db
from chorely.infrastructure.local.household_repository import SqliteHouseholdRepository
from chorely.infrastructure.local.recurrence_rule_repository import (
    SqliteRecurrenceRuleRepository,
)
from chorely.infrastructure.local.task_history_repository import SqliteTaskHistoryRepository
from chorely.infrastructure.local.task_repository import SqliteTaskRepository
from chorely.infrastructure.local.user_repository import SqliteUserRepository
from chorely.models.category import CategoryCreate
from chorely.models.enums import TaskPriority
from chorely.models.task import TaskCreate
from chorely.models.user import UserCreate


@pytest.fixture
async def engine():
    engine = create_engine_for_url(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def user_repo(session_factory):
    return SqliteUserRepository(session_factory=session_factory)


@pytest.fixture
def household_repo(session_factory):
    return SqliteHouseholdRepository(session_factory=session_factory)


@pytest.fixture
def category_repo(session_factory):
    return SqliteCategoryRepository(session_factory=session_factory)


@pytest.fixture
def task_repo(session_factory):
    return SqliteTaskRepository(session_factory=session_factory)


@pytest.fixture
def rule_repo(session_factory):
    return SqliteRecurrenceRuleRepository(session_factory=session_factory)


@pytest.fixture
def history_repo(session_factory):
    return SqliteTaskHistoryRepository(session_factory=session_factory)


@pytest.fixture
async def user(user_repo):
    return await user_repo.create(
        UserCreate(email="alex@example.com", name="Alex", password_hash="x")
    )


@pytest.fixture
async def other_user(user_repo):
    return await user_repo.create(
        UserCreate(email="sam@example.com", name="Sam", password_hash="x")
    )


@pytest.fixture
async def category(category_repo, user):
    return await category_repo.create(
        CategoryCreate(name="Cleaning", emoji="🧹", color="#3B82F6", user_id=user.id)
    )


@pytest.fixture
def task_data(category):
    """Build a TaskCreate in the user's personal category."""

    def _build(**overrides) -> TaskCreate:
        data = {
            "title": "Vacuum the living room",
            "due_date": datetime(2030, 1, 1, 9, 0),
            "priority": TaskPriority.MEDIUM,
            "category_id": category.id,
            "estimated_minutes": 30,
        }
        data.update(overrides)
        return TaskCreate(**data)

    return _build


@pytest.fixture
def create_task(task_repo, task_data, user):
    """Insert a task directly through the repository."""

    async def _create(**overrides):
        data = task_data(**overrides)
        owner_id = None if data.household_id else user.id
        return await task_repo.create(data, owner_id)

    return _create
