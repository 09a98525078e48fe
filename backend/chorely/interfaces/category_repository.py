"""
Category repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from chorely.models.category import Category, CategoryCreate, CategoryUpdate


class ICategoryRepository(ABC):
    """Abstract interface for category persistence."""

    @abstractmethod
    async def create(self, category: CategoryCreate) -> Category:
        """Create a category. Raises DuplicateError if the name is taken in its scope."""
        pass

    @abstractmethod
    async def create_many(self, categories: list[CategoryCreate]) -> list[Category]:
        """Create several categories in one transaction."""
        pass

    @abstractmethod
    async def get(self, category_id: UUID) -> Optional[Category]:
        pass

    @abstractmethod
    async def get_accessible(self, user_id: UUID, category_id: UUID) -> Optional[Category]:
        """Get a category if it is personal to the user or belongs to one of their households."""
        pass

    @abstractmethod
    async def get_by_name(
        self,
        name: str,
        user_id: Optional[UUID] = None,
        household_id: Optional[UUID] = None,
    ) -> Optional[Category]:
        pass

    @abstractmethod
    async def list_accessible(self, user_id: UUID) -> list[Category]:
        """List personal and household categories of the user, ordered by name."""
        pass

    @abstractmethod
    async def count_accessible(self, user_id: UUID) -> int:
        pass

    @abstractmethod
    async def update(self, category_id: UUID, update: CategoryUpdate) -> Category:
        pass

    @abstractmethod
    async def delete(self, category_id: UUID) -> bool:
        pass

    @abstractmethod
    async def count_tasks(self, category_id: UUID, user_id: Optional[UUID] = None) -> int:
        """Count tasks in a category; restricted to tasks accessible to ``user_id`` when given."""
        pass
