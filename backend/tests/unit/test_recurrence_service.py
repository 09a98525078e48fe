"""
Tests for RecurrenceService against the SQLite repositories.
"""

from datetime import datetime, timedelta

import pytest

from chorely.core.exceptions import BusinessLogicError, ValidationError
from chorely.models.enums import RecurrenceFrequency, TaskHistoryAction
from chorely.models.recurrence_rule import RecurrenceRuleCreate
from chorely.services.recurrence_service import RecurrenceService

NOW = datetime(2030, 1, 1, 12, 0)


@pytest.fixture
def service(rule_repo, task_repo, history_repo):
    return RecurrenceService(rule_repo, task_repo, history_repo, lookahead_days=7)


@pytest.mark.asyncio
async def test_set_rule_records_history(service, create_task, history_repo, user):
    root = await create_task()

    rule = await service.set_rule(
        root, RecurrenceRuleCreate(frequency=RecurrenceFrequency.DAILY, interval=2), user.id
    )

    assert rule.task_id == root.id
    assert rule.interval == 2
    history = await history_repo.list_for_task(root.id)
    assert history[0].action == TaskHistoryAction.RECURRENCE_SET
    assert history[0].notes == "every 2 daily"
    assert history[0].completed_by == str(user.id)


@pytest.mark.asyncio
async def test_set_rule_replaces_existing_rule(service, create_task, rule_repo):
    root = await create_task()
    await service.set_rule(root, RecurrenceRuleCreate(frequency=RecurrenceFrequency.DAILY))

    await service.set_rule(
        root, RecurrenceRuleCreate(frequency=RecurrenceFrequency.MONTHLY, day_of_month=15)
    )

    rule = await rule_repo.get_by_task(root.id)
    assert rule.frequency == RecurrenceFrequency.MONTHLY
    assert rule.day_of_month == 15
    assert len(await rule_repo.list_all()) == 1


@pytest.mark.asyncio
async def test_set_rule_rejects_generated_instance(service, create_task):
    root = await create_task()
    instance = await create_task(
        source_task_id=root.id, due_date=root.due_date + timedelta(days=1)
    )

    with pytest.raises(BusinessLogicError):
        await service.set_rule(instance, RecurrenceRuleCreate())


@pytest.mark.asyncio
async def test_set_rule_rejects_end_before_due_date(service, create_task):
    root = await create_task(due_date=datetime(2030, 1, 10, 9, 0))

    with pytest.raises(ValidationError):
        await service.set_rule(
            root,
            RecurrenceRuleCreate(
                frequency=RecurrenceFrequency.DAILY, end_date=datetime(2030, 1, 5).date()
            ),
        )


@pytest.mark.asyncio
async def test_remove_rule(service, create_task, rule_repo, history_repo):
    root = await create_task()
    await service.set_rule(root, RecurrenceRuleCreate(frequency=RecurrenceFrequency.DAILY))

    assert await service.remove_rule(root) is True
    assert await rule_repo.get_by_task(root.id) is None
    assert await service.remove_rule(root) is False

    actions = [entry.action for entry in await history_repo.list_for_task(root.id)]
    assert actions.count(TaskHistoryAction.RECURRENCE_REMOVED) == 1


@pytest.mark.asyncio
async def test_preview_without_rule_is_empty(service, create_task):
    root = await create_task()
    assert await service.preview(root) == []


@pytest.mark.asyncio
async def test_preview_lists_future_dates(service, create_task):
    root = await create_task(due_date=datetime(2030, 1, 1, 9, 0))
    await service.set_rule(root, RecurrenceRuleCreate(frequency=RecurrenceFrequency.WEEKLY))

    dates = await service.preview(root, count=3, after=NOW)

    assert dates == [
        datetime(2030, 1, 8, 9, 0),
        datetime(2030, 1, 15, 9, 0),
        datetime(2030, 1, 22, 9, 0),
    ]


@pytest.mark.asyncio
async def test_ensure_upcoming_materialises_window(service, create_task, task_repo, history_repo):
    root = await create_task(due_date=datetime(2030, 1, 1, 9, 0))
    await service.set_rule(root, RecurrenceRuleCreate(frequency=RecurrenceFrequency.DAILY))

    result = await service.ensure_upcoming(lookahead_days=3, now=NOW)

    assert result["created_count"] == 3
    instances = await task_repo.list_series_instances(root.id)
    assert [task.due_date for task in instances] == [
        datetime(2030, 1, 2, 9, 0),
        datetime(2030, 1, 3, 9, 0),
        datetime(2030, 1, 4, 9, 0),
    ]
    assert all(task.source_task_id == root.id for task in instances)
    assert all(task.title == root.title for task in instances)

    history = await history_repo.list_for_task(instances[0].id)
    assert history[0].action == TaskHistoryAction.GENERATED


@pytest.mark.asyncio
async def test_ensure_upcoming_is_idempotent(service, create_task, rule_repo):
    root = await create_task(due_date=datetime(2030, 1, 1, 9, 0))
    await service.set_rule(root, RecurrenceRuleCreate(frequency=RecurrenceFrequency.DAILY))

    await service.ensure_upcoming(lookahead_days=3, now=NOW)
    second = await service.ensure_upcoming(lookahead_days=3, now=NOW)

    assert second == {"created_count": 0, "tasks": []}
    rule = await rule_repo.get_by_task(root.id)
    assert rule.last_generated_date == datetime(2030, 1, 4, 9, 0)


@pytest.mark.asyncio
async def test_ensure_upcoming_scoped_to_user(service, create_task, task_repo, user, other_user):
    root = await create_task(due_date=datetime(2030, 1, 1, 9, 0))
    await service.set_rule(root, RecurrenceRuleCreate(frequency=RecurrenceFrequency.DAILY))

    other = await service.ensure_upcoming(lookahead_days=3, now=NOW, user_id=other_user.id)
    assert other == {"created_count": 0, "tasks": []}
    assert await task_repo.list_series_instances(root.id) == []

    own = await service.ensure_upcoming(lookahead_days=3, now=NOW, user_id=user.id)
    assert own["created_count"] == 3


@pytest.mark.asyncio
async def test_ensure_upcoming_does_not_backfill(service, create_task, task_repo):
    root = await create_task(due_date=datetime(2029, 12, 25, 9, 0))
    await service.set_rule(root, RecurrenceRuleCreate(frequency=RecurrenceFrequency.DAILY))

    await service.ensure_upcoming(lookahead_days=1, now=NOW)

    instances = await task_repo.list_series_instances(root.id)
    assert [task.due_date for task in instances] == [
        datetime(2030, 1, 1, 9, 0),
        datetime(2030, 1, 2, 9, 0),
    ]


@pytest.mark.asyncio
async def test_ensure_upcoming_respects_occurrence_cap(service, create_task, task_repo):
    root = await create_task(due_date=datetime(2030, 1, 1, 9, 0))
    await service.set_rule(
        root, RecurrenceRuleCreate(frequency=RecurrenceFrequency.DAILY, occurrences=2)
    )

    result = await service.ensure_upcoming(lookahead_days=7, now=NOW)

    assert result["created_count"] == 1


@pytest.mark.asyncio
async def test_handle_completion_generates_next_instance(service, create_task, task_repo):
    root = await create_task(due_date=datetime(2030, 1, 1, 9, 0))
    await service.set_rule(root, RecurrenceRuleCreate(frequency=RecurrenceFrequency.WEEKLY))

    created = await service.handle_completion(root)

    assert created is not None
    assert created.due_date == datetime(2030, 1, 8, 9, 0)
    assert created.source_task_id == root.id


@pytest.mark.asyncio
async def test_handle_completion_waits_for_pending_instances(service, create_task):
    root = await create_task(due_date=datetime(2030, 1, 1, 9, 0))
    await service.set_rule(root, RecurrenceRuleCreate(frequency=RecurrenceFrequency.WEEKLY))
    await service.handle_completion(root)

    assert await service.handle_completion(root) is None


@pytest.mark.asyncio
async def test_handle_completion_without_rule(service, create_task):
    task = await create_task()
    assert await service.handle_completion(task) is None


@pytest.mark.asyncio
async def test_generate_next_stops_when_series_is_exhausted(service, create_task):
    root = await create_task(due_date=datetime(2030, 1, 1, 9, 0))
    await service.set_rule(
        root, RecurrenceRuleCreate(frequency=RecurrenceFrequency.DAILY, occurrences=2)
    )

    assert await service.generate_next(root) is not None
    assert await service.generate_next(root) is None


@pytest.mark.asyncio
async def test_duplicate_instance_is_skipped(service, create_task):
    root = await create_task(due_date=datetime(2030, 1, 1, 9, 0))
    due = datetime(2030, 1, 2, 9, 0)

    assert await service._create_instance(root, due) is not None
    assert await service._create_instance(root, due) is None
