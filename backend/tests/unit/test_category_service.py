"""
Tests for CategoryService.
"""

import pytest

from chorely.core.exceptions import BusinessLogicError, ForbiddenError, NotFoundError
from chorely.models.category import CategoryBase, CategoryCreate, CategoryUpdate
from chorely.models.household import HouseholdCreate, HouseholdMemberCreate
from chorely.services.category_service import DEFAULT_CATEGORIES, CategoryService


@pytest.fixture
def service(category_repo, household_repo):
    return CategoryService(category_repo, household_repo)


@pytest.mark.asyncio
async def test_initialize_defaults(service, user):
    created = await service.initialize_defaults(user.id)

    assert len(created) == len(DEFAULT_CATEGORIES)
    names = [category.name for category in created]
    assert names == sorted(names)
    assert all(category.user_id == user.id for category in created)


@pytest.mark.asyncio
async def test_initialize_defaults_only_once(service, user):
    await service.initialize_defaults(user.id)
    assert await service.initialize_defaults(user.id) == []


@pytest.mark.asyncio
async def test_initialize_skipped_when_household_category_visible(
    service, household_repo, category_repo, user
):
    household = await household_repo.create(HouseholdCreate(name="Home"), creator_id=user.id)
    await category_repo.create(CategoryCreate(name="Garden", household_id=household.id))

    assert await service.initialize_defaults(user.id) == []


@pytest.mark.asyncio
async def test_list_categories_with_counts(service, household_repo, create_task, category, user):
    household = await household_repo.create(HouseholdCreate(name="Home"), creator_id=user.id)
    shared = await service.create_category(
        user.id, CategoryBase(name="Garden", emoji="🌳"), household_id=household.id
    )
    await create_task()
    await create_task()

    listed = {item.name: item for item in await service.list_categories(user.id)}

    assert listed["Cleaning"].task_count == 2
    assert listed["Cleaning"].is_personal is True
    assert listed["Cleaning"].household is None
    assert listed["Garden"].id == shared.id
    assert listed["Garden"].is_personal is False
    assert listed["Garden"].household.name == "Home"


@pytest.mark.asyncio
async def test_household_category_requires_membership(service, household_repo, user, other_user):
    household = await household_repo.create(HouseholdCreate(name="Home"), creator_id=other_user.id)

    with pytest.raises(ForbiddenError):
        await service.create_category(user.id, CategoryBase(name="Garden"), household_id=household.id)


@pytest.mark.asyncio
async def test_update_category(service, category, user):
    updated = await service.update_category(user.id, category.id, CategoryUpdate(name="Tidying"))
    assert updated.name == "Tidying"


@pytest.mark.asyncio
async def test_cannot_update_invisible_category(service, category, other_user):
    with pytest.raises(NotFoundError):
        await service.update_category(other_user.id, category.id, CategoryUpdate(name="Mine"))


@pytest.mark.asyncio
async def test_member_can_manage_household_category(
    service, household_repo, user, other_user
):
    household = await household_repo.create(HouseholdCreate(name="Home"), creator_id=user.id)
    await household_repo.add_member(household.id, HouseholdMemberCreate(user_id=other_user.id))
    shared = await service.create_category(
        user.id, CategoryBase(name="Garden"), household_id=household.id
    )

    updated = await service.update_category(other_user.id, shared.id, CategoryUpdate(color="#059669"))

    assert updated.color == "#059669"


@pytest.mark.asyncio
async def test_delete_category_in_use(service, create_task, category, category_repo, user):
    task = await create_task()

    with pytest.raises(BusinessLogicError):
        await service.delete_category(user.id, category.id)

    assert await category_repo.get(category.id) is not None
    assert task.category_id == category.id


@pytest.mark.asyncio
async def test_delete_unused_category(service, category, category_repo, user):
    await service.delete_category(user.id, category.id)
    assert await category_repo.get(category.id) is None


@pytest.mark.asyncio
async def test_suggest_tasks_by_category_name(service, category, user, other_user):
    suggestions = await service.suggest_tasks(user.id, category.id)

    assert suggestions.category_id == category.id
    assert suggestions.suggestions[0] == "vacuum living room"
    assert len(suggestions.suggestions) == 5

    with pytest.raises(NotFoundError):
        await service.suggest_tasks(other_user.id, category.id)
