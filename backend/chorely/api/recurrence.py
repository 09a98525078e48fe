"""
Recurrence API endpoints.

Rules are attached to the series root; requests for a generated instance
resolve to its root for reads.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from chorely.api.deps import CurrentUserId, RecurrenceServiceDep, TaskServiceDep
from chorely.api.errors import to_http_exception
from chorely.core.exceptions import ChorelyError
from chorely.models.recurrence_rule import RecurrencePreview, RecurrenceRule, RecurrenceRuleCreate

router = APIRouter()


@router.get("/tasks/{task_id}/recurrence", response_model=RecurrenceRule)
async def get_recurrence(
    task_id: UUID,
    user_id: CurrentUserId,
    tasks: TaskServiceDep,
    service: RecurrenceServiceDep,
):
    try:
        task = await tasks.get_accessible_task(user_id, task_id)
    except ChorelyError as e:
        raise to_http_exception(e)
    rule = await service.rule_repo.get_by_task(task.series_id)
    if not rule:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task has no recurrence rule",
        )
    return rule


@router.put("/tasks/{task_id}/recurrence", response_model=RecurrenceRule)
async def set_recurrence(
    task_id: UUID,
    data: RecurrenceRuleCreate,
    user_id: CurrentUserId,
    tasks: TaskServiceDep,
    service: RecurrenceServiceDep,
):
    """Create or replace the recurrence rule of a task."""
    try:
        task = await tasks.get_accessible_task(user_id, task_id)
        return await service.set_rule(task, data, user_id=user_id)
    except ChorelyError as e:
        raise to_http_exception(e)


@router.delete("/tasks/{task_id}/recurrence", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recurrence(
    task_id: UUID,
    user_id: CurrentUserId,
    tasks: TaskServiceDep,
    service: RecurrenceServiceDep,
):
    try:
        task = await tasks.get_accessible_task(user_id, task_id)
    except ChorelyError as e:
        raise to_http_exception(e)
    if not await service.remove_rule(task, user_id=user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task has no recurrence rule",
        )


@router.get("/tasks/{task_id}/recurrence/preview", response_model=RecurrencePreview)
async def preview_recurrence(
    task_id: UUID,
    user_id: CurrentUserId,
    tasks: TaskServiceDep,
    service: RecurrenceServiceDep,
    count: int = Query(5, ge=1, le=50),
):
    """Next occurrence dates of the task's series."""
    try:
        task = await tasks.get_accessible_task(user_id, task_id)
        root = task
        if task.source_task_id:
            root = await tasks.get_accessible_task(user_id, task.source_task_id)
    except ChorelyError as e:
        raise to_http_exception(e)
    return RecurrencePreview(
        task_id=root.id,
        occurrences=await service.preview(root, count=count),
    )


@router.post("/recurrence/generate")
async def generate_recurring_tasks(
    user_id: CurrentUserId,
    service: RecurrenceServiceDep,
    lookahead_days: Optional[int] = Query(None, ge=1, le=365),
):
    """Materialise upcoming instances of the caller's recurring series now."""
    return await service.ensure_upcoming(lookahead_days=lookahead_days, user_id=user_id)
