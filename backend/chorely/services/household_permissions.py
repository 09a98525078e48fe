from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from chorely.core.exceptions import ForbiddenError, NotFoundError
from chorely.core.logger import setup_logger
from chorely.interfaces.household_repository import IHouseholdRepository
from chorely.models.enums import HouseholdRole
from chorely.models.household import Household, HouseholdMember

logger = setup_logger(__name__)


class HouseholdAction(str, Enum):
    HOUSEHOLD_READ = "household.read"
    HOUSEHOLD_UPDATE = "household.update"
    HOUSEHOLD_DELETE = "household.delete"
    MEMBER_INVITE = "member.invite"
    MEMBER_MANAGE = "member.manage"
    TASK_READ = "task.read"
    TASK_WRITE = "task.write"
    TASK_DELETE = "task.delete"
    CATEGORY_MANAGE = "category.manage"


ALL_HOUSEHOLD_ROLES = {HouseholdRole.OWNER, HouseholdRole.ADMIN, HouseholdRole.MEMBER}
ADMIN_HOUSEHOLD_ROLES = {HouseholdRole.OWNER, HouseholdRole.ADMIN}

HOUSEHOLD_ROLE_MATRIX: dict[HouseholdAction, set[HouseholdRole]] = {
    HouseholdAction.HOUSEHOLD_READ: ALL_HOUSEHOLD_ROLES,
    HouseholdAction.HOUSEHOLD_UPDATE: ADMIN_HOUSEHOLD_ROLES,
    HouseholdAction.HOUSEHOLD_DELETE: ADMIN_HOUSEHOLD_ROLES,
    HouseholdAction.MEMBER_INVITE: ADMIN_HOUSEHOLD_ROLES,
    HouseholdAction.MEMBER_MANAGE: ADMIN_HOUSEHOLD_ROLES,
    HouseholdAction.TASK_READ: ALL_HOUSEHOLD_ROLES,
    HouseholdAction.TASK_WRITE: ALL_HOUSEHOLD_ROLES,
    HouseholdAction.TASK_DELETE: ADMIN_HOUSEHOLD_ROLES,
    HouseholdAction.CATEGORY_MANAGE: ALL_HOUSEHOLD_ROLES,
}


@dataclass(frozen=True)
class HouseholdAccess:
    household: Household
    member: HouseholdMember

    @property
    def role(self) -> HouseholdRole:
        return self.member.role


def roles_for_action(action: HouseholdAction) -> set[HouseholdRole]:
    return set(HOUSEHOLD_ROLE_MATRIX.get(action, set()))


def role_allows(action: HouseholdAction, role: HouseholdRole) -> bool:
    return role in roles_for_action(action)


def ensure_household_action(access: HouseholdAccess, action: HouseholdAction) -> HouseholdAccess:
    if not role_allows(action, access.role):
        logger.warning(
            f"Denied {action.value} for role {access.role.value} in household {access.household.id}"
        )
        raise ForbiddenError("Insufficient household role")
    return access


async def get_household_access(
    user_id: UUID,
    household_id: UUID,
    household_repo: IHouseholdRepository,
) -> HouseholdAccess:
    household = await household_repo.get(household_id)
    if not household:
        raise NotFoundError(f"Household {household_id} not found")

    member = await household_repo.get_member(household_id, user_id)
    if not member:
        raise ForbiddenError("User is not a member of this household")

    return HouseholdAccess(household=household, member=member)
