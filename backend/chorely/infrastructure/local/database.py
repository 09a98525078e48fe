"""
SQLite database configuration and ORM models.

This module defines the SQLAlchemy ORM models and database initialization.
Referential actions live in the schema (ON DELETE CASCADE), so foreign keys are
switched on for every SQLite connection.
"""

from functools import lru_cache
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    event,
)
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from chorely.core.config import get_settings
from chorely.utils.datetime_utils import now_utc


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


def _uuid() -> str:
    return str(uuid4())


# ===========================================
# ORM Models
# ===========================================


class UserORM(Base):
    """User account ORM model."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=now_utc)
    updated_at = Column(DateTime, default=now_utc, onupdate=now_utc)


class HouseholdORM(Base):
    """Household ORM model."""

    __tablename__ = "households"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=now_utc)
    updated_at = Column(DateTime, default=now_utc, onupdate=now_utc)


class HouseholdMemberORM(Base):
    """Household membership ORM model."""

    __tablename__ = "household_members"
    __table_args__ = (UniqueConstraint("user_id", "household_id", name="uq_household_member"),)

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    household_id = Column(
        String(36), ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role = Column(String(20), nullable=False, default="member")
    joined_at = Column(DateTime, default=now_utc)


class CategoryORM(Base):
    """Category ORM model."""

    __tablename__ = "categories"
    # NULL owners never collide, so each constraint only applies within its scope
    __table_args__ = (
        UniqueConstraint("name", "user_id", name="uq_category_name_user"),
        UniqueConstraint("name", "household_id", name="uq_category_name_household"),
    )

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(100), nullable=False)
    emoji = Column(String(16), nullable=True)
    color = Column(String(20), nullable=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    household_id = Column(
        String(36), ForeignKey("households.id", ondelete="CASCADE"), nullable=True, index=True
    )
    created_at = Column(DateTime, default=now_utc)
    updated_at = Column(DateTime, default=now_utc, onupdate=now_utc)


class TaskORM(Base):
    """Task ORM model."""

    __tablename__ = "tasks"
    __table_args__ = (UniqueConstraint("source_task_id", "due_date", name="uq_task_series_due"),)

    id = Column(String(36), primary_key=True, default=_uuid)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    is_completed = Column(Boolean, default=False, nullable=False, index=True)
    completed_at = Column(DateTime, nullable=True)
    due_date = Column(DateTime, nullable=False, index=True)
    estimated_minutes = Column(Integer, nullable=True)
    actual_minutes = Column(Integer, nullable=True)
    priority = Column(String(10), nullable=False, default="medium")
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=False, index=True)
    household_id = Column(
        String(36), ForeignKey("households.id", ondelete="CASCADE"), nullable=True, index=True
    )
    assigned_to_id = Column(String(255), nullable=True)
    parent_task_id = Column(
        String(36), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=True, index=True
    )
    source_task_id = Column(
        String(36), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=True, index=True
    )
    created_at = Column(DateTime, default=now_utc)
    updated_at = Column(DateTime, default=now_utc, onupdate=now_utc)


class RecurrenceRuleORM(Base):
    """Recurrence rule ORM model (one per task)."""

    __tablename__ = "recurrence_rules"

    id = Column(String(36), primary_key=True, default=_uuid)
    task_id = Column(
        String(36), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    frequency = Column(String(10), nullable=False)
    interval = Column(Integer, nullable=False, default=1)
    days_of_week = Column(JSON, nullable=False, default=list)
    day_of_month = Column(Integer, nullable=True)
    end_date = Column(Date, nullable=True)
    occurrences = Column(Integer, nullable=True)
    last_generated_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=now_utc)
    updated_at = Column(DateTime, default=now_utc, onupdate=now_utc)


class TaskHistoryORM(Base):
    """Task history ORM model (append-only)."""

    __tablename__ = "task_history"

    id = Column(String(36), primary_key=True, default=_uuid)
    task_id = Column(String(36), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    action = Column(String(30), nullable=False)
    completed_by = Column(String(255), nullable=True)
    completion_time = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=now_utc, index=True)


# ===========================================
# Engine / session helpers
# ===========================================


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_for_url(url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    """Create an async engine; SQLite connections get foreign keys enabled."""
    engine = create_async_engine(url, echo=echo, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


@lru_cache()
def get_engine() -> AsyncEngine:
    """Get async engine instance."""
    settings = get_settings()
    return create_engine_for_url(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)


@lru_cache()
def get_session_factory():
    """Get async session factory."""
    engine = get_engine()
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine | None = None):
    """Initialize database tables."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

