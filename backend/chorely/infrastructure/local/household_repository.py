"""
SQLite implementation of household repository.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import and_, func, select

from chorely.core.exceptions import NotFoundError
from chorely.infrastructure.local.database import (
    CategoryORM,
    HouseholdMemberORM,
    HouseholdORM,
    TaskORM,
    UserORM,
    get_session_factory,
)
from chorely.infrastructure.local.query_utils import commit_or_raise, member_household_ids
from chorely.interfaces.household_repository import IHouseholdRepository
from chorely.models.enums import HouseholdRole
from chorely.models.household import (
    Household,
    HouseholdCreate,
    HouseholdMember,
    HouseholdMemberCreate,
    HouseholdUpdate,
)
from chorely.models.user import UserSummary
from chorely.utils.datetime_utils import now_utc


class SqliteHouseholdRepository(IHouseholdRepository):
    """SQLite implementation of household repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: HouseholdORM) -> Household:
        return Household(
            id=UUID(orm.id),
            name=orm.name,
            description=orm.description,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    def _member_to_model(
        self, orm: HouseholdMemberORM, user: Optional[UserORM] = None
    ) -> HouseholdMember:
        return HouseholdMember(
            id=UUID(orm.id),
            user_id=UUID(orm.user_id),
            household_id=UUID(orm.household_id),
            role=HouseholdRole(orm.role),
            joined_at=orm.joined_at,
            user=UserSummary(id=UUID(user.id), name=user.name, email=user.email) if user else None,
        )

    async def create(
        self,
        household: HouseholdCreate,
        creator_id: UUID,
        creator_role: HouseholdRole = HouseholdRole.ADMIN,
    ) -> Household:
        async with self._session_factory() as session:
            orm = HouseholdORM(
                id=str(uuid4()),
                name=household.name,
                description=household.description,
            )
            session.add(orm)
            await session.flush()
            session.add(
                HouseholdMemberORM(
                    id=str(uuid4()),
                    user_id=str(creator_id),
                    household_id=orm.id,
                    role=creator_role.value,
                )
            )
            await commit_or_raise(session, "Household member already exists")
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def get(self, household_id: UUID) -> Optional[Household]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(HouseholdORM).where(HouseholdORM.id == str(household_id))
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def list_for_user(self, user_id: UUID) -> list[Household]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(HouseholdORM)
                .where(HouseholdORM.id.in_(member_household_ids(user_id)))
                .order_by(HouseholdORM.name)
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def update(self, household_id: UUID, update: HouseholdUpdate) -> Household:
        async with self._session_factory() as session:
            result = await session.execute(
                select(HouseholdORM).where(HouseholdORM.id == str(household_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                raise NotFoundError(f"Household {household_id} not found")

            update_data = update.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                if value is None and field == "name":
                    continue
                setattr(orm, field, value)

            orm.updated_at = now_utc()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def delete(self, household_id: UUID) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                select(HouseholdORM).where(HouseholdORM.id == str(household_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                return False
            await session.delete(orm)
            await commit_or_raise(
                session,
                "Household could not be deleted",
                reference_message="Household categories are still used by tasks outside the household",
            )
            return True

    # ===========================================
    # Members
    # ===========================================

    async def add_member(
        self, household_id: UUID, member: HouseholdMemberCreate
    ) -> HouseholdMember:
        async with self._session_factory() as session:
            orm = HouseholdMemberORM(
                id=str(uuid4()),
                user_id=str(member.user_id),
                household_id=str(household_id),
                role=member.role.value,
            )
            session.add(orm)
            await commit_or_raise(session, "This user is already a member of the household")
            await session.refresh(orm)
            user = await session.get(UserORM, orm.user_id)
            return self._member_to_model(orm, user)

    async def get_member(self, household_id: UUID, user_id: UUID) -> Optional[HouseholdMember]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(HouseholdMemberORM, UserORM)
                .join(UserORM, UserORM.id == HouseholdMemberORM.user_id)
                .where(
                    and_(
                        HouseholdMemberORM.household_id == str(household_id),
                        HouseholdMemberORM.user_id == str(user_id),
                    )
                )
            )
            row = result.first()
            return self._member_to_model(row[0], row[1]) if row else None

    async def get_member_by_id(self, member_id: UUID) -> Optional[HouseholdMember]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(HouseholdMemberORM, UserORM)
                .join(UserORM, UserORM.id == HouseholdMemberORM.user_id)
                .where(HouseholdMemberORM.id == str(member_id))
            )
            row = result.first()
            return self._member_to_model(row[0], row[1]) if row else None

    async def list_members(self, household_id: UUID) -> list[HouseholdMember]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(HouseholdMemberORM, UserORM)
                .join(UserORM, UserORM.id == HouseholdMemberORM.user_id)
                .where(HouseholdMemberORM.household_id == str(household_id))
                .order_by(HouseholdMemberORM.joined_at)
            )
            return [self._member_to_model(member, user) for member, user in result.all()]

    async def update_member_role(self, member_id: UUID, role: HouseholdRole) -> HouseholdMember:
        async with self._session_factory() as session:
            orm = await session.get(HouseholdMemberORM, str(member_id))
            if not orm:
                raise NotFoundError(f"Household member {member_id} not found")
            orm.role = role.value
            await session.commit()
            await session.refresh(orm)
            user = await session.get(UserORM, orm.user_id)
            return self._member_to_model(orm, user)

    async def remove_member(self, member_id: UUID) -> bool:
        async with self._session_factory() as session:
            orm = await session.get(HouseholdMemberORM, str(member_id))
            if not orm:
                return False
            await session.delete(orm)
            await session.commit()
            return True

    # ===========================================
    # Counters
    # ===========================================

    async def count_active_tasks(self, household_id: UUID) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count(TaskORM.id)).where(
                    and_(
                        TaskORM.household_id == str(household_id),
                        TaskORM.is_completed.is_(False),
                    )
                )
            )
            return result.scalar_one()

    async def count_categories(self, household_id: UUID) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count(CategoryORM.id)).where(
                    CategoryORM.household_id == str(household_id)
                )
            )
            return result.scalar_one()
