from datetime import datetime
from uuid import UUID, uuid4

import pytest

from chorely.core.exceptions import ForbiddenError, NotFoundError
from chorely.models.enums import HouseholdRole
from chorely.models.household import Household, HouseholdMember
from chorely.services.household_permissions import (
    HouseholdAccess,
    HouseholdAction,
    ensure_household_action,
    get_household_access,
    role_allows,
)


class FakeHouseholdRepo:
    def __init__(self, household: Household | None, member: HouseholdMember | None):
        self._household = household
        self._member = member

    async def get(self, household_id: UUID) -> Household | None:
        if not self._household or self._household.id != household_id:
            return None
        return self._household

    async def get_member(self, household_id: UUID, user_id: UUID) -> HouseholdMember | None:
        if not self._member:
            return None
        if self._member.household_id != household_id or self._member.user_id != user_id:
            return None
        return self._member


def _make_household() -> Household:
    now = datetime(2030, 1, 1)
    return Household(id=uuid4(), name="Home", description=None, created_at=now, updated_at=now)


def _make_member(household_id: UUID, user_id: UUID, role: HouseholdRole) -> HouseholdMember:
    return HouseholdMember(
        id=uuid4(),
        user_id=user_id,
        household_id=household_id,
        role=role,
        joined_at=datetime(2030, 1, 1),
    )


@pytest.mark.asyncio
async def test_access_for_member():
    household = _make_household()
    user_id = uuid4()
    member = _make_member(household.id, user_id, HouseholdRole.MEMBER)
    repo = FakeHouseholdRepo(household, member)

    access = await get_household_access(user_id, household.id, repo)

    assert access.role == HouseholdRole.MEMBER
    assert access.household.id == household.id


@pytest.mark.asyncio
async def test_access_missing_household():
    repo = FakeHouseholdRepo(None, None)
    with pytest.raises(NotFoundError):
        await get_household_access(uuid4(), uuid4(), repo)


@pytest.mark.asyncio
async def test_access_for_non_member():
    household = _make_household()
    repo = FakeHouseholdRepo(household, None)
    with pytest.raises(ForbiddenError):
        await get_household_access(uuid4(), household.id, repo)


def test_member_can_write_but_not_delete_tasks():
    household = _make_household()
    access = HouseholdAccess(
        household=household,
        member=_make_member(household.id, uuid4(), HouseholdRole.MEMBER),
    )

    ensure_household_action(access, HouseholdAction.TASK_WRITE)
    with pytest.raises(ForbiddenError):
        ensure_household_action(access, HouseholdAction.TASK_DELETE)


@pytest.mark.parametrize("role", [HouseholdRole.OWNER, HouseholdRole.ADMIN])
def test_admins_manage_members(role):
    assert role_allows(HouseholdAction.MEMBER_MANAGE, role)
    assert role_allows(HouseholdAction.MEMBER_INVITE, role)
    assert role_allows(HouseholdAction.TASK_DELETE, role)


def test_member_cannot_invite():
    assert not role_allows(HouseholdAction.MEMBER_INVITE, HouseholdRole.MEMBER)
    assert not role_allows(HouseholdAction.HOUSEHOLD_DELETE, HouseholdRole.MEMBER)
