"""
Tests for the SQLite repositories: constraints, access scoping and cascades.
"""

from datetime import date, datetime
from uuid import uuid4

import pytest

from chorely.core.exceptions import DuplicateError, NotFoundError, ValidationError
from chorely.models.category import CategoryCreate, CategoryUpdate
from chorely.models.enums import (
    HouseholdRole,
    RecurrenceFrequency,
    TaskHistoryAction,
    TaskPriority,
    TaskStatusFilter,
)
from chorely.models.household import HouseholdCreate, HouseholdMemberCreate
from chorely.models.recurrence_rule import RecurrenceRuleCreate, RecurrenceRuleUpdate
from chorely.models.task import TaskUpdate
from chorely.models.task_history import TaskHistoryCreate
from chorely.models.user import UserCreate, UserUpdate


# ===========================================
# Users
# ===========================================


@pytest.mark.asyncio
async def test_user_email_is_normalized(user_repo):
    created = await user_repo.create(
        UserCreate(email="  Jo@Example.COM ", name="Jo", password_hash="x")
    )

    assert created.email == "jo@example.com"
    found = await user_repo.get_by_email("JO@example.com")
    assert found is not None
    assert found.id == created.id


@pytest.mark.asyncio
async def test_user_email_is_unique(user_repo, user):
    with pytest.raises(DuplicateError):
        await user_repo.create(
            UserCreate(email="ALEX@example.com", name="Alex 2", password_hash="x")
        )


@pytest.mark.asyncio
async def test_user_update(user_repo, user, other_user):
    updated = await user_repo.update(user.id, UserUpdate(email=" Alexander@Example.com", name=None))

    assert updated.email == "alexander@example.com"
    assert updated.name is None
    assert updated.password_hash == user.password_hash

    with pytest.raises(DuplicateError):
        await user_repo.update(other_user.id, UserUpdate(email="alexander@example.com"))
    with pytest.raises(NotFoundError):
        await user_repo.update(uuid4(), UserUpdate(name="Nobody"))


@pytest.mark.asyncio
async def test_user_delete_removes_owned_categories(user_repo, category_repo, category, user, other_user):
    assert await user_repo.delete(user.id) is True

    assert await user_repo.get(user.id) is None
    assert await category_repo.get(category.id) is None
    assert {account.id for account in await user_repo.list_all()} == {other_user.id}
    assert await user_repo.delete(user.id) is False


# ===========================================
# Households
# ===========================================


@pytest.mark.asyncio
async def test_household_creator_becomes_admin(household_repo, user):
    household = await household_repo.create(HouseholdCreate(name="Home"), creator_id=user.id)

    members = await household_repo.list_members(household.id)

    assert len(members) == 1
    assert members[0].user_id == user.id
    assert members[0].role == HouseholdRole.ADMIN
    assert members[0].user.email == "alex@example.com"


@pytest.mark.asyncio
async def test_household_member_is_unique(household_repo, user, other_user):
    household = await household_repo.create(HouseholdCreate(name="Home"), creator_id=user.id)
    await household_repo.add_member(household.id, HouseholdMemberCreate(user_id=other_user.id))

    with pytest.raises(DuplicateError):
        await household_repo.add_member(
            household.id, HouseholdMemberCreate(user_id=other_user.id)
        )


@pytest.mark.asyncio
async def test_household_delete_cascades(household_repo, category_repo, create_task, task_repo, user):
    household = await household_repo.create(HouseholdCreate(name="Home"), creator_id=user.id)
    shared = await category_repo.create(
        CategoryCreate(name="Garden", household_id=household.id)
    )
    task = await create_task(household_id=household.id, category_id=shared.id)

    assert await household_repo.delete(household.id) is True

    assert await household_repo.list_for_user(user.id) == []
    assert await household_repo.list_members(household.id) == []
    assert await category_repo.get(shared.id) is None
    assert await task_repo.get(task.id) is None


@pytest.mark.asyncio
async def test_household_delete_blocked_by_outside_task(
    household_repo, category_repo, create_task, user
):
    household = await household_repo.create(HouseholdCreate(name="Home"), creator_id=user.id)
    shared = await category_repo.create(CategoryCreate(name="Garden", household_id=household.id))
    # Personal task filed under the household's category
    await create_task(category_id=shared.id)

    with pytest.raises(ValidationError):
        await household_repo.delete(household.id)

    assert await household_repo.get(household.id) is not None


# ===========================================
# Categories
# ===========================================


@pytest.mark.asyncio
async def test_category_name_unique_per_owner(category_repo, category, user, other_user):
    with pytest.raises(DuplicateError):
        await category_repo.create(CategoryCreate(name="Cleaning", user_id=user.id))

    # Another user may reuse the name
    other = await category_repo.create(CategoryCreate(name="Cleaning", user_id=other_user.id))
    assert other.user_id == other_user.id


@pytest.mark.asyncio
async def test_category_get_by_name_is_scoped(household_repo, category_repo, category, user, other_user):
    household = await household_repo.create(HouseholdCreate(name="Home"), creator_id=user.id)
    shared = await category_repo.create(CategoryCreate(name="Cleaning", household_id=household.id))

    assert (await category_repo.get_by_name("Cleaning", user_id=user.id)).id == category.id
    assert (await category_repo.get_by_name("Cleaning", household_id=household.id)).id == shared.id
    assert await category_repo.get_by_name("Cleaning", user_id=other_user.id) is None


@pytest.mark.asyncio
async def test_household_categories_are_visible_to_members(
    household_repo, category_repo, user, other_user
):
    household = await household_repo.create(HouseholdCreate(name="Home"), creator_id=user.id)
    shared = await category_repo.create(CategoryCreate(name="Garden", household_id=household.id))

    assert await category_repo.get_accessible(other_user.id, shared.id) is None

    await household_repo.add_member(household.id, HouseholdMemberCreate(user_id=other_user.id))

    visible = await category_repo.list_accessible(other_user.id)
    assert [found.id for found in visible] == [shared.id]


@pytest.mark.asyncio
async def test_category_update_keeps_name_when_not_given(category_repo, category):
    updated = await category_repo.update(category.id, CategoryUpdate(color="#000000"))

    assert updated.name == "Cleaning"
    assert updated.color == "#000000"


# ===========================================
# Tasks
# ===========================================


@pytest.mark.asyncio
async def test_task_create_includes_category(create_task, category):
    task = await create_task()

    assert task.category is not None
    assert task.category.name == category.name
    assert task.is_completed is False


@pytest.mark.asyncio
async def test_task_with_unknown_category_is_rejected(create_task):
    with pytest.raises(ValidationError):
        await create_task(category_id=uuid4())


@pytest.mark.asyncio
async def test_task_update_missing_task(task_repo):
    with pytest.raises(NotFoundError):
        await task_repo.update(uuid4(), TaskUpdate(title="Nope"))


@pytest.mark.asyncio
async def test_list_orders_by_due_date_then_priority(create_task, task_repo, user):
    due = datetime(2030, 1, 5, 9, 0)
    await create_task(title="low", due_date=due, priority=TaskPriority.LOW)
    await create_task(title="high", due_date=due, priority=TaskPriority.HIGH)
    await create_task(title="early", due_date=datetime(2030, 1, 2, 9, 0))
    done = await create_task(title="done", due_date=datetime(2029, 12, 1, 9, 0))
    await task_repo.update(done.id, TaskUpdate(is_completed=True))

    tasks, total = await task_repo.list_accessible(user.id)

    assert total == 4
    assert [task.title for task in tasks] == ["early", "high", "low", "done"]


@pytest.mark.asyncio
async def test_list_filters_and_pagination(create_task, task_repo, user):
    for index in range(5):
        await create_task(title=f"Task {index}", due_date=datetime(2030, 1, 1 + index, 9, 0))

    tasks, total = await task_repo.list_accessible(
        user.id, status=TaskStatusFilter.PENDING, limit=2, offset=2
    )

    assert total == 5
    assert [task.title for task in tasks] == ["Task 2", "Task 3"]

    tasks, total = await task_repo.list_accessible(
        user.id, due_from=datetime(2030, 1, 4), due_to=datetime(2030, 1, 5)
    )
    assert total == 1
    assert tasks[0].title == "Task 3"


@pytest.mark.asyncio
async def test_household_task_visibility(household_repo, create_task, task_repo, user, other_user):
    household = await household_repo.create(HouseholdCreate(name="Home"), creator_id=user.id)
    task = await create_task(household_id=household.id)

    assert task.user_id is None
    assert await task_repo.get_accessible(other_user.id, task.id) is None

    await household_repo.add_member(household.id, HouseholdMemberCreate(user_id=other_user.id))

    assert await task_repo.get_accessible(other_user.id, task.id) is not None


@pytest.mark.asyncio
async def test_task_delete_cascades_subtasks_and_history(create_task, task_repo, history_repo):
    parent = await create_task(title="Spring cleaning")
    child = await create_task(title="Windows", parent_task_id=parent.id)
    await history_repo.create(
        TaskHistoryCreate(task_id=parent.id, action=TaskHistoryAction.CREATED)
    )

    assert await task_repo.delete(parent.id) is True

    assert await task_repo.get(child.id) is None
    assert await history_repo.list_for_task(parent.id) == []


@pytest.mark.asyncio
async def test_ancestor_ids(create_task, task_repo):
    root = await create_task(title="root")
    middle = await create_task(title="middle", parent_task_id=root.id)
    leaf = await create_task(title="leaf", parent_task_id=middle.id)

    assert await task_repo.get_ancestor_ids(leaf.id) == [middle.id, root.id]


@pytest.mark.asyncio
async def test_series_due_date_is_unique(create_task):
    root = await create_task()
    due = datetime(2030, 1, 2, 9, 0)
    await create_task(source_task_id=root.id, due_date=due)

    with pytest.raises(DuplicateError):
        await create_task(source_task_id=root.id, due_date=due)


@pytest.mark.asyncio
async def test_category_breakdown(create_task, task_repo, category, user):
    first = await create_task()
    await create_task()
    await task_repo.update(first.id, TaskUpdate(is_completed=True))

    breakdown = await task_repo.category_breakdown(user.id)

    assert len(breakdown) == 1
    assert breakdown[0].category_id == category.id
    assert breakdown[0].total == 2
    assert breakdown[0].completed == 1


# ===========================================
# Recurrence rules and history
# ===========================================


@pytest.mark.asyncio
async def test_one_rule_per_task(rule_repo, create_task):
    task = await create_task()
    await rule_repo.create(task.id, RecurrenceRuleCreate(frequency=RecurrenceFrequency.DAILY))

    with pytest.raises(DuplicateError):
        await rule_repo.create(task.id, RecurrenceRuleCreate())


@pytest.mark.asyncio
async def test_rule_update_can_clear_end_date(rule_repo, create_task):
    task = await create_task()
    await rule_repo.create(
        task.id,
        RecurrenceRuleCreate(frequency=RecurrenceFrequency.DAILY, end_date=date(2030, 6, 1)),
    )

    updated = await rule_repo.update(task.id, RecurrenceRuleUpdate(end_date=None))

    assert updated.end_date is None
    assert updated.frequency == RecurrenceFrequency.DAILY


@pytest.mark.asyncio
async def test_rule_deleted_with_task(rule_repo, task_repo, create_task):
    task = await create_task()
    await rule_repo.create(task.id, RecurrenceRuleCreate())

    await task_repo.delete(task.id)

    assert await rule_repo.get_by_task(task.id) is None


@pytest.mark.asyncio
async def test_history_newest_first_with_limit(history_repo, create_task):
    task = await create_task()
    for action in (
        TaskHistoryAction.CREATED,
        TaskHistoryAction.UPDATED,
        TaskHistoryAction.COMPLETED,
    ):
        await history_repo.create(TaskHistoryCreate(task_id=task.id, action=action))

    history = await history_repo.list_for_task(task.id, limit=2)

    assert len(history) == 2
    assert history[0].action == TaskHistoryAction.COMPLETED
