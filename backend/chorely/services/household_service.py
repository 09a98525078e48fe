"""
Household service.

Household creation, membership management and per-member household views.
"""

from __future__ import annotations

from uuid import UUID

from chorely.core.exceptions import BusinessLogicError, ForbiddenError, NotFoundError, ValidationError
from chorely.core.logger import setup_logger
from chorely.core.security import is_valid_email, normalize_email
from chorely.interfaces.household_repository import IHouseholdRepository
from chorely.interfaces.user_repository import IUserRepository
from chorely.models.enums import HouseholdRole
from chorely.models.household import (
    Household,
    HouseholdCreate,
    HouseholdMember,
    HouseholdMemberCreate,
    HouseholdStats,
    HouseholdUpdate,
    HouseholdWithStats,
)
from chorely.services.household_permissions import (
    ADMIN_HOUSEHOLD_ROLES,
    HouseholdAction,
    ensure_household_action,
    get_household_access,
)

logger = setup_logger(__name__)


class HouseholdService:
    def __init__(self, household_repo: IHouseholdRepository, user_repo: IUserRepository):
        self.household_repo = household_repo
        self.user_repo = user_repo

    async def _with_stats(self, household: Household, user_id: UUID) -> HouseholdWithStats:
        members = await self.household_repo.list_members(household.id)
        membership = next((member for member in members if member.user_id == user_id), None)
        return HouseholdWithStats(
            **household.model_dump(),
            user_role=membership.role if membership else HouseholdRole.MEMBER,
            user_joined_at=membership.joined_at if membership else None,
            members=members,
            stats=HouseholdStats(
                active_tasks=await self.household_repo.count_active_tasks(household.id),
                categories=await self.household_repo.count_categories(household.id),
                members=len(members),
            ),
        )

    async def list_households(self, user_id: UUID) -> list[HouseholdWithStats]:
        households = await self.household_repo.list_for_user(user_id)
        return [await self._with_stats(household, user_id) for household in households]

    async def create_household(self, user_id: UUID, data: HouseholdCreate) -> HouseholdWithStats:
        """Create a household; the creator joins as admin."""
        household = await self.household_repo.create(data, creator_id=user_id)
        logger.info(f"Household {household.id} created by {user_id}")
        return await self._with_stats(household, user_id)

    async def update_household(
        self, user_id: UUID, household_id: UUID, data: HouseholdUpdate
    ) -> Household:
        access = await get_household_access(user_id, household_id, self.household_repo)
        ensure_household_action(access, HouseholdAction.HOUSEHOLD_UPDATE)
        return await self.household_repo.update(household_id, data)

    async def delete_household(self, user_id: UUID, household_id: UUID) -> None:
        access = await get_household_access(user_id, household_id, self.household_repo)
        ensure_household_action(access, HouseholdAction.HOUSEHOLD_DELETE)
        await self.household_repo.delete(household_id)
        logger.info(f"Household {household_id} deleted by {user_id}")

    async def invite_member(
        self,
        user_id: UUID,
        household_id: UUID,
        email: str,
        role: HouseholdRole = HouseholdRole.MEMBER,
    ) -> HouseholdMember:
        """
        Add an existing user to a household by email.

        Raises:
            ValidationError: Malformed email
            ForbiddenError: Inviter is not an owner/admin
            NotFoundError: No account uses the email
            DuplicateError: The user is already a member
        """
        email = normalize_email(email)
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")

        access = await get_household_access(user_id, household_id, self.household_repo)
        ensure_household_action(access, HouseholdAction.MEMBER_INVITE)
        if role == HouseholdRole.OWNER and access.role != HouseholdRole.OWNER:
            raise ForbiddenError("Only an owner can grant the owner role")

        invitee = await self.user_repo.get_by_email(email)
        if not invitee:
            raise NotFoundError(
                "No account uses this email. Ask the person to register first, then invite them."
            )

        member = await self.household_repo.add_member(
            household_id, HouseholdMemberCreate(user_id=invitee.id, role=role)
        )
        logger.info(f"User {invitee.id} added to household {household_id} as {role.value}")
        return member

    async def update_member_role(
        self, user_id: UUID, household_id: UUID, member_id: UUID, role: HouseholdRole
    ) -> HouseholdMember:
        access = await get_household_access(user_id, household_id, self.household_repo)
        ensure_household_action(access, HouseholdAction.MEMBER_MANAGE)
        member = await self._get_member(household_id, member_id)

        if HouseholdRole.OWNER in (role, member.role) and access.role != HouseholdRole.OWNER:
            raise ForbiddenError("Only an owner can grant or revoke the owner role")
        if member.role in ADMIN_HOUSEHOLD_ROLES and role not in ADMIN_HOUSEHOLD_ROLES:
            await self._ensure_not_last_admin(household_id, member)

        return await self.household_repo.update_member_role(member_id, role)

    async def remove_member(self, user_id: UUID, household_id: UUID, member_id: UUID) -> None:
        """Remove a member; any member may remove themselves (leave)."""
        access = await get_household_access(user_id, household_id, self.household_repo)
        member = await self._get_member(household_id, member_id)
        if member.user_id != user_id:
            ensure_household_action(access, HouseholdAction.MEMBER_MANAGE)
            if member.role == HouseholdRole.OWNER and access.role != HouseholdRole.OWNER:
                raise ForbiddenError("Only an owner can remove an owner")
        if member.role in ADMIN_HOUSEHOLD_ROLES:
            await self._ensure_not_last_admin(household_id, member)

        await self.household_repo.remove_member(member_id)

    async def _get_member(self, household_id: UUID, member_id: UUID) -> HouseholdMember:
        member = await self.household_repo.get_member_by_id(member_id)
        if not member or member.household_id != household_id:
            raise NotFoundError(f"Household member {member_id} not found")
        return member

    async def _ensure_not_last_admin(self, household_id: UUID, member: HouseholdMember) -> None:
        members = await self.household_repo.list_members(household_id)
        admins = [
            other
            for other in members
            if other.role in ADMIN_HOUSEHOLD_ROLES and other.id != member.id
        ]
        if not admins:
            raise BusinessLogicError("A household needs at least one owner or admin")
