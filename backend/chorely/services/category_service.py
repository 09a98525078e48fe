"""
Category service.

Personal and household categories, the default set for new users, and the
rule that a category in use cannot be deleted.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from chorely.core.exceptions import BusinessLogicError, ForbiddenError, NotFoundError
from chorely.core.logger import setup_logger
from chorely.interfaces.category_repository import ICategoryRepository
from chorely.interfaces.household_repository import IHouseholdRepository
from chorely.models.category import (
    Category,
    CategoryBase,
    CategoryCreate,
    CategoryUpdate,
    CategoryWithStats,
    HouseholdRef,
)
from chorely.models.task import TaskSuggestions
from chorely.services.household_permissions import (
    HouseholdAction,
    ensure_household_action,
    get_household_access,
)
from chorely.services.task_estimates import get_task_suggestions

logger = setup_logger(__name__)

DEFAULT_CATEGORIES: list[dict[str, str]] = [
    {"name": "Cleaning", "emoji": "🧹", "color": "#3B82F6"},
    {"name": "Kitchen", "emoji": "🍳", "color": "#10B981"},
    {"name": "Laundry", "emoji": "👕", "color": "#8B5CF6"},
    {"name": "Shopping", "emoji": "🛒", "color": "#F59E0B"},
    {"name": "Maintenance", "emoji": "🔧", "color": "#6B7280"},
    {"name": "Outdoor", "emoji": "🌳", "color": "#059669"},
    {"name": "Organizing", "emoji": "📦", "color": "#EC4899"},
    {"name": "Pet Care", "emoji": "🐾", "color": "#F97316"},
    {"name": "Other", "emoji": "📌", "color": "#64748B"},
]


class CategoryService:
    def __init__(
        self,
        category_repo: ICategoryRepository,
        household_repo: IHouseholdRepository,
    ):
        self.category_repo = category_repo
        self.household_repo = household_repo

    async def list_categories(self, user_id: UUID) -> list[CategoryWithStats]:
        """Accessible categories with the number of accessible tasks in each."""
        categories = await self.category_repo.list_accessible(user_id)
        household_names: dict[UUID, Optional[str]] = {}
        result = []
        for category in categories:
            household = None
            if category.household_id:
                if category.household_id not in household_names:
                    found = await self.household_repo.get(category.household_id)
                    household_names[category.household_id] = found.name if found else None
                name = household_names[category.household_id]
                if name is not None:
                    household = HouseholdRef(id=category.household_id, name=name)

            task_count = await self.category_repo.count_tasks(category.id, user_id)
            result.append(
                CategoryWithStats(
                    **category.model_dump(),
                    task_count=task_count,
                    is_personal=category.user_id is not None,
                    household=household,
                )
            )
        return result

    async def create_category(
        self, user_id: UUID, data: CategoryBase, household_id: Optional[UUID] = None
    ) -> Category:
        if household_id:
            access = await get_household_access(user_id, household_id, self.household_repo)
            ensure_household_action(access, HouseholdAction.CATEGORY_MANAGE)

        return await self.category_repo.create(
            CategoryCreate(
                name=data.name,
                emoji=data.emoji or None,
                color=data.color or None,
                user_id=None if household_id else user_id,
                household_id=household_id,
            )
        )

    async def initialize_defaults(self, user_id: UUID) -> list[Category]:
        """
        Create the default personal categories.

        Nothing is created when the user can already see any category.
        """
        if await self.category_repo.count_accessible(user_id) > 0:
            return []
        created = await self.category_repo.create_many(
            [CategoryCreate(user_id=user_id, **entry) for entry in DEFAULT_CATEGORIES]
        )
        logger.info(f"Created {len(created)} default categories for user {user_id}")
        return sorted(created, key=lambda category: category.name)

    async def get_category(self, user_id: UUID, category_id: UUID) -> Category:
        category = await self.category_repo.get_accessible(user_id, category_id)
        if not category:
            raise NotFoundError("Category not found or access denied")
        return category

    async def suggest_tasks(self, user_id: UUID, category_id: UUID) -> TaskSuggestions:
        """Known chores for the category, matched by its name."""
        category = await self.get_category(user_id, category_id)
        return TaskSuggestions(
            category_id=category.id, suggestions=get_task_suggestions(category.name)
        )

    async def update_category(
        self, user_id: UUID, category_id: UUID, update: CategoryUpdate
    ) -> Category:
        await self._ensure_manageable(user_id, category_id)
        return await self.category_repo.update(category_id, update)

    async def delete_category(self, user_id: UUID, category_id: UUID) -> None:
        await self._ensure_manageable(user_id, category_id)
        in_use = await self.category_repo.count_tasks(category_id)
        if in_use:
            raise BusinessLogicError(
                f"Category is used by {in_use} task(s); move or delete them first"
            )
        await self.category_repo.delete(category_id)

    async def _ensure_manageable(self, user_id: UUID, category_id: UUID) -> Category:
        category = await self.get_category(user_id, category_id)
        if category.household_id:
            access = await get_household_access(user_id, category.household_id, self.household_repo)
            ensure_household_action(access, HouseholdAction.CATEGORY_MANAGE)
        elif category.user_id != user_id:
            raise ForbiddenError("Only the owner can change this category")
        return category
