"""
Shared query helpers for the SQLite repositories.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from chorely.core.exceptions import DuplicateError, InfrastructureError, ValidationError
from chorely.infrastructure.local.database import HouseholdMemberORM


def member_household_ids(user_id: UUID):
    """Subquery of household ids the user belongs to."""
    return select(HouseholdMemberORM.household_id).where(
        HouseholdMemberORM.user_id == str(user_id)
    )


def accessible_to(orm_cls, user_id: UUID):
    """Rows owned by the user or by one of the user's households."""
    return or_(
        orm_cls.user_id == str(user_id),
        orm_cls.household_id.in_(member_household_ids(user_id)),
    )


async def commit_or_raise(
    session: AsyncSession,
    duplicate_message: str,
    reference_message: str = "Referenced record does not exist",
) -> None:
    """Commit, translating constraint violations into domain errors."""
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        text = str(exc.orig)
        if "UNIQUE" in text.upper():
            raise DuplicateError(duplicate_message, details=text) from exc
        raise ValidationError(reference_message, details=text) from exc
    except OperationalError as exc:
        await session.rollback()
        raise InfrastructureError("Database is unavailable", details=str(exc.orig)) from exc
