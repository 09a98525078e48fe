"""
User repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from chorely.models.user import UserAccount, UserCreate, UserUpdate


class IUserRepository(ABC):
    """Abstract interface for user account persistence."""

    @abstractmethod
    async def create(self, user: UserCreate) -> UserAccount:
        """Create a user account. Raises DuplicateError if the email is taken."""
        pass

    @abstractmethod
    async def get(self, user_id: UUID) -> Optional[UserAccount]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[UserAccount]:
        """Get a user by email (case-insensitive)."""
        pass

    @abstractmethod
    async def update(self, user_id: UUID, update: UserUpdate) -> UserAccount:
        pass

    @abstractmethod
    async def delete(self, user_id: UUID) -> bool:
        """Delete a user together with memberships, personal categories and tasks."""
        pass

    @abstractmethod
    async def list_all(self) -> list[UserAccount]:
        pass
