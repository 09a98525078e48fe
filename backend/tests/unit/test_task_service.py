"""
Tests for TaskService lifecycle rules.
"""

from datetime import datetime

import pytest

from chorely.core.exceptions import (
    BusinessLogicError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from chorely.models.category import CategoryCreate
from chorely.models.enums import (
    HouseholdRole,
    RecurrenceFrequency,
    TaskHistoryAction,
)
from chorely.models.household import HouseholdCreate, HouseholdMemberCreate
from chorely.models.recurrence_rule import RecurrenceRuleCreate
from chorely.models.task import TaskUpdate
from chorely.services.recurrence_service import RecurrenceService
from chorely.services.task_service import TaskService


@pytest.fixture
def recurrence_service(rule_repo, task_repo, history_repo):
    return RecurrenceService(rule_repo, task_repo, history_repo)


@pytest.fixture
def service(task_repo, category_repo, household_repo, history_repo, rule_repo, recurrence_service):
    return TaskService(
        task_repo,
        category_repo,
        household_repo,
        history_repo,
        rule_repo,
        recurrence_service=recurrence_service,
    )


async def _actions(history_repo, task_id) -> list[TaskHistoryAction]:
    return [entry.action for entry in await history_repo.list_for_task(task_id, limit=50)]


@pytest.mark.asyncio
async def test_create_task_records_history(service, task_data, history_repo, user):
    task = await service.create_task(user.id, task_data())

    assert task.user_id == user.id
    assert await _actions(history_repo, task.id) == [TaskHistoryAction.CREATED]


@pytest.mark.asyncio
async def test_create_task_ignores_source_task_id(service, task_data, create_task, user):
    other = await create_task()

    task = await service.create_task(user.id, task_data(source_task_id=other.id))

    assert task.source_task_id is None


@pytest.mark.asyncio
async def test_create_task_requires_accessible_category(
    service, category_repo, task_data, other_user, user
):
    foreign = await category_repo.create(CategoryCreate(name="Theirs", user_id=other_user.id))

    with pytest.raises(ForbiddenError):
        await service.create_task(user.id, task_data(category_id=foreign.id))


@pytest.mark.asyncio
async def test_create_household_task_requires_membership(
    service, household_repo, task_data, user, other_user
):
    household = await household_repo.create(HouseholdCreate(name="Home"), creator_id=other_user.id)

    with pytest.raises(ForbiddenError):
        await service.create_task(user.id, task_data(household_id=household.id))


@pytest.mark.asyncio
async def test_household_task_has_no_owner(service, household_repo, category_repo, task_data, user):
    household = await household_repo.create(HouseholdCreate(name="Home"), creator_id=user.id)
    shared = await category_repo.create(CategoryCreate(name="Garden", household_id=household.id))

    task = await service.create_task(
        user.id, task_data(household_id=household.id, category_id=shared.id)
    )

    assert task.user_id is None
    assert task.household_id == household.id


@pytest.mark.asyncio
async def test_task_category_must_match_task_scope(
    service, household_repo, category_repo, task_data, category, user
):
    household = await household_repo.create(HouseholdCreate(name="Home"), creator_id=user.id)
    shared = await category_repo.create(CategoryCreate(name="Garden", household_id=household.id))

    with pytest.raises(ValidationError):
        await service.create_task(user.id, task_data(category_id=shared.id))
    with pytest.raises(ValidationError):
        await service.create_task(
            user.id, task_data(household_id=household.id, category_id=category.id)
        )

    personal = await service.create_task(user.id, task_data())
    with pytest.raises(ValidationError):
        await service.update_task(user.id, personal.id, TaskUpdate(category_id=shared.id))


@pytest.mark.asyncio
async def test_missing_estimate_is_filled_in(service, task_data, user):
    known = await service.create_task(user.id, task_data(title="Mow lawn", estimated_minutes=None))
    unknown = await service.create_task(
        user.id, task_data(title="Scrub tiles", estimated_minutes=None)
    )
    given = await service.create_task(user.id, task_data(title="Mow lawn", estimated_minutes=5))

    assert known.estimated_minutes == 45
    assert unknown.estimated_minutes == 20
    assert given.estimated_minutes == 5


@pytest.mark.asyncio
async def test_completing_sets_completion_fields(service, task_data, history_repo, user):
    task = await service.create_task(user.id, task_data(estimated_minutes=25))

    completed = await service.update_task(user.id, task.id, TaskUpdate(is_completed=True))

    assert completed.is_completed is True
    assert completed.completed_at is not None
    assert completed.actual_minutes == 25
    history = await history_repo.list_for_task(task.id, limit=50)
    completion = [entry for entry in history if entry.action == TaskHistoryAction.COMPLETED]
    assert len(completion) == 1
    assert completion[0].completion_time == completed.completed_at
    assert TaskHistoryAction.UPDATED not in [entry.action for entry in history]


@pytest.mark.asyncio
async def test_reopening_clears_completed_at(service, task_data, history_repo, user):
    task = await service.create_task(user.id, task_data())
    await service.update_task(user.id, task.id, TaskUpdate(is_completed=True))

    reopened = await service.toggle_completion(user.id, task.id)

    assert reopened.is_completed is False
    assert reopened.completed_at is None
    assert TaskHistoryAction.REOPENED in await _actions(history_repo, task.id)


@pytest.mark.asyncio
async def test_update_records_changed_fields(service, task_data, history_repo, user):
    task = await service.create_task(user.id, task_data())

    await service.update_task(user.id, task.id, TaskUpdate(title="Mop", description="Kitchen"))

    history = await history_repo.list_for_task(task.id, limit=50)
    updates = [entry for entry in history if entry.action == TaskHistoryAction.UPDATED]
    assert updates[0].notes == "Changed: description, title"


@pytest.mark.asyncio
async def test_move_task(service, task_data, user):
    task = await service.create_task(user.id, task_data())

    moved = await service.move_task(user.id, task.id, datetime(2030, 2, 1, 18, 0))

    assert moved.due_date == datetime(2030, 2, 1, 18, 0)


@pytest.mark.asyncio
async def test_completing_series_task_generates_next(
    service, recurrence_service, task_data, task_repo, user
):
    root = await service.create_task(user.id, task_data(due_date=datetime(2030, 1, 1, 9, 0)))
    await recurrence_service.set_rule(
        root, RecurrenceRuleCreate(frequency=RecurrenceFrequency.WEEKLY), user.id
    )

    await service.update_task(user.id, root.id, TaskUpdate(is_completed=True))

    instances = await task_repo.list_series_instances(root.id)
    assert [task.due_date for task in instances] == [datetime(2030, 1, 8, 9, 0)]


@pytest.mark.asyncio
async def test_parent_cycle_is_rejected(service, task_data, user):
    parent = await service.create_task(user.id, task_data(title="parent"))
    child = await service.create_task(user.id, task_data(title="child", parent_task_id=parent.id))

    with pytest.raises(BusinessLogicError):
        await service.update_task(user.id, parent.id, TaskUpdate(parent_task_id=child.id))
    with pytest.raises(BusinessLogicError):
        await service.update_task(user.id, parent.id, TaskUpdate(parent_task_id=parent.id))


@pytest.mark.asyncio
async def test_task_of_other_user_is_not_found(service, task_data, user, other_user):
    task = await service.create_task(user.id, task_data())

    with pytest.raises(NotFoundError):
        await service.get_task_detail(other_user.id, task.id)


@pytest.mark.asyncio
async def test_member_cannot_delete_household_task(
    service, household_repo, category_repo, task_data, user, other_user
):
    household = await household_repo.create(HouseholdCreate(name="Home"), creator_id=user.id)
    await household_repo.add_member(
        household.id, HouseholdMemberCreate(user_id=other_user.id, role=HouseholdRole.MEMBER)
    )
    shared = await category_repo.create(CategoryCreate(name="Garden", household_id=household.id))
    task = await service.create_task(
        user.id, task_data(household_id=household.id, category_id=shared.id)
    )

    with pytest.raises(ForbiddenError):
        await service.delete_task(other_user.id, task.id)

    await service.delete_task(user.id, task.id)
    with pytest.raises(NotFoundError):
        await service.get_accessible_task(user.id, task.id)


@pytest.mark.asyncio
async def test_task_detail(service, recurrence_service, task_data, user):
    root = await service.create_task(user.id, task_data())
    await service.create_task(user.id, task_data(title="sub", parent_task_id=root.id))
    await recurrence_service.set_rule(root, RecurrenceRuleCreate(), user.id)

    detail = await service.get_task_detail(user.id, root.id)

    assert [sub.title for sub in detail.subtasks] == ["sub"]
    assert detail.recurrence_rule is not None
    assert detail.history[0].action == TaskHistoryAction.RECURRENCE_SET
