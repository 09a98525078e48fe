"""
Household and membership models.

A household groups users (members with a role) and owns shared categories and tasks.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from chorely.models.enums import HouseholdRole
from chorely.models.user import UserSummary


class HouseholdBase(BaseModel):
    """Base fields for households."""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)


class HouseholdCreate(HouseholdBase):
    """Create a new household."""

    pass


class HouseholdUpdate(BaseModel):
    """Update household fields."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)


class Household(HouseholdBase):
    """Household with metadata."""

    id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class HouseholdMemberCreate(BaseModel):
    """Add a user to a household."""

    user_id: UUID
    role: HouseholdRole = HouseholdRole.MEMBER


class HouseholdMember(BaseModel):
    """Membership link between a user and a household."""

    id: UUID
    user_id: UUID
    household_id: UUID
    role: HouseholdRole = HouseholdRole.MEMBER
    joined_at: datetime
    user: Optional[UserSummary] = None

    class Config:
        from_attributes = True


class HouseholdStats(BaseModel):
    active_tasks: int = 0
    categories: int = 0
    members: int = 0


class HouseholdWithStats(Household):
    """Household as seen by one of its members."""

    user_role: HouseholdRole
    user_joined_at: Optional[datetime] = None
    members: list[HouseholdMember] = Field(default_factory=list)
    stats: HouseholdStats = Field(default_factory=HouseholdStats)
