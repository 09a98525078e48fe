"""
Household repository interface.

Memberships are owned by the household aggregate, so member operations live here too.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from chorely.models.enums import HouseholdRole
from chorely.models.household import (
    Household,
    HouseholdCreate,
    HouseholdMember,
    HouseholdMemberCreate,
    HouseholdUpdate,
)


class IHouseholdRepository(ABC):
    """Abstract interface for household and membership persistence."""

    @abstractmethod
    async def create(
        self,
        household: HouseholdCreate,
        creator_id: UUID,
        creator_role: HouseholdRole = HouseholdRole.ADMIN,
    ) -> Household:
        """Create a household and add its creator as a member in one transaction."""
        pass

    @abstractmethod
    async def get(self, household_id: UUID) -> Optional[Household]:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: UUID) -> list[Household]:
        """List households the user is a member of, ordered by name."""
        pass

    @abstractmethod
    async def update(self, household_id: UUID, update: HouseholdUpdate) -> Household:
        pass

    @abstractmethod
    async def delete(self, household_id: UUID) -> bool:
        """Delete a household together with its members, categories and tasks."""
        pass

    @abstractmethod
    async def add_member(
        self, household_id: UUID, member: HouseholdMemberCreate
    ) -> HouseholdMember:
        """Add a member. Raises DuplicateError if the user already joined."""
        pass

    @abstractmethod
    async def get_member(self, household_id: UUID, user_id: UUID) -> Optional[HouseholdMember]:
        """Get the membership of a user in a household."""
        pass

    @abstractmethod
    async def get_member_by_id(self, member_id: UUID) -> Optional[HouseholdMember]:
        pass

    @abstractmethod
    async def list_members(self, household_id: UUID) -> list[HouseholdMember]:
        """List members with their user summary attached."""
        pass

    @abstractmethod
    async def update_member_role(self, member_id: UUID, role: HouseholdRole) -> HouseholdMember:
        pass

    @abstractmethod
    async def remove_member(self, member_id: UUID) -> bool:
        pass

    @abstractmethod
    async def count_active_tasks(self, household_id: UUID) -> int:
        """Count tasks of the household that are not completed."""
        pass

    @abstractmethod
    async def count_categories(self, household_id: UUID) -> int:
        pass
