"""
Category models.

A category is personal (user_id set), household-scoped (household_id set) or unscoped.
Names are unique per owning scope.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class CategoryBase(BaseModel):
    """Base fields for categories."""

    name: str = Field(..., min_length=1, max_length=100)
    emoji: Optional[str] = Field(None, max_length=16)
    color: Optional[str] = Field(None, max_length=20, description="Hex colour, e.g. #3B82F6")


class CategoryCreate(CategoryBase):
    """Create a new category."""

    user_id: Optional[UUID] = None
    household_id: Optional[UUID] = None


class CategoryUpdate(BaseModel):
    """Update category fields."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    emoji: Optional[str] = Field(None, max_length=16)
    color: Optional[str] = Field(None, max_length=20)


class Category(CategoryBase):
    """Category with metadata."""

    id: UUID
    user_id: Optional[UUID] = None
    household_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class HouseholdRef(BaseModel):
    id: UUID
    name: str


class CategoryWithStats(Category):
    """Category listing entry with task count and scope info."""

    task_count: int = 0
    is_personal: bool = False
    household: Optional[HouseholdRef] = None
