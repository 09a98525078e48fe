"""
User account models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Create a user account. ``password_hash`` is already hashed."""

    email: str = Field(..., min_length=3, max_length=255)
    name: Optional[str] = Field(None, max_length=255)
    password_hash: str = Field(..., min_length=1, max_length=255)


class UserUpdate(BaseModel):
    """Update user account fields."""

    email: Optional[str] = Field(None, min_length=3, max_length=255)
    name: Optional[str] = Field(None, max_length=255)
    password_hash: Optional[str] = Field(None, max_length=255)


class UserAccount(BaseModel):
    """User account stored in the database."""

    id: UUID
    email: str
    name: Optional[str] = None
    password_hash: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    """Public user info embedded in other responses."""

    id: UUID
    name: Optional[str] = None
    email: str
