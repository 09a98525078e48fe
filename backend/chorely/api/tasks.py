"""
Tasks API endpoints.

CRUD operations for tasks, completion toggling and task history.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query, status
from pydantic import BaseModel

from chorely.api.deps import (
    CategoryServiceDep,
    CurrentUserId,
    StatsServiceDep,
    TaskRepo,
    TaskServiceDep,
)
from chorely.api.errors import to_http_exception
from chorely.core.exceptions import ChorelyError
from chorely.models.enums import TaskPriority, TaskStatusFilter
from chorely.models.task import (
    Task,
    TaskCreate,
    TaskDetail,
    TaskEstimate,
    TaskListResponse,
    TaskUpdate,
    UpcomingTask,
)
from chorely.models.task_history import TaskHistory
from chorely.services.task_estimates import get_task_estimate
from chorely.utils.datetime_utils import to_naive_utc

router = APIRouter()


class MoveTaskRequest(BaseModel):
    due_date: datetime


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    user_id: CurrentUserId,
    repo: TaskRepo,
    status_filter: TaskStatusFilter = Query(TaskStatusFilter.ALL, alias="status"),
    priority: Optional[TaskPriority] = Query(None),
    category_id: Optional[UUID] = Query(None),
    household_id: Optional[UUID] = Query(None),
    due_from: Optional[datetime] = Query(None, description="Due on or after"),
    due_to: Optional[datetime] = Query(None, description="Due before"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """List personal and household tasks, pending first."""
    tasks, total = await repo.list_accessible(
        user_id,
        status=status_filter,
        priority=priority,
        category_id=category_id,
        household_id=household_id,
        due_from=to_naive_utc(due_from),
        due_to=to_naive_utc(due_to),
        limit=limit,
        offset=offset,
    )
    return TaskListResponse(
        tasks=tasks,
        total_count=total,
        has_more=offset + len(tasks) < total,
    )


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(task: TaskCreate, user_id: CurrentUserId, service: TaskServiceDep):
    """Create a new task."""
    try:
        return await service.create_task(user_id, task)
    except ChorelyError as e:
        raise to_http_exception(e)


@router.get("/upcoming", response_model=list[UpcomingTask])
async def upcoming_tasks(
    user_id: CurrentUserId,
    service: StatsServiceDep,
    limit: int = Query(10, ge=1, le=100),
):
    """Pending tasks ordered by due date with display labels."""
    return await service.upcoming_tasks(user_id, limit=limit)


@router.get("/estimate", response_model=TaskEstimate)
async def estimate_task(
    user_id: CurrentUserId,
    categories: CategoryServiceDep,
    title: str = Query(..., min_length=1, max_length=500),
    category_id: Optional[UUID] = Query(None),
):
    """Typical duration for a chore title, falling back to the category default."""
    category_name = None
    if category_id:
        try:
            category_name = (await categories.get_category(user_id, category_id)).name
        except ChorelyError as e:
            raise to_http_exception(e)
    return get_task_estimate(title, category_name)


@router.get("/{task_id}", response_model=TaskDetail)
async def get_task(task_id: UUID, user_id: CurrentUserId, service: TaskServiceDep):
    """Get a task with subtasks, recent history and recurrence rule."""
    try:
        return await service.get_task_detail(user_id, task_id)
    except ChorelyError as e:
        raise to_http_exception(e)


@router.patch("/{task_id}", response_model=Task)
async def update_task(
    task_id: UUID,
    update: TaskUpdate,
    user_id: CurrentUserId,
    service: TaskServiceDep,
):
    """Update a task."""
    try:
        return await service.update_task(user_id, task_id, update)
    except ChorelyError as e:
        raise to_http_exception(e)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: UUID, user_id: CurrentUserId, service: TaskServiceDep):
    """Delete a task with its subtasks, history and generated instances."""
    try:
        await service.delete_task(user_id, task_id)
    except ChorelyError as e:
        raise to_http_exception(e)


@router.post("/{task_id}/toggle", response_model=Task)
async def toggle_task(task_id: UUID, user_id: CurrentUserId, service: TaskServiceDep):
    """Flip the completion state of a task."""
    try:
        return await service.toggle_completion(user_id, task_id)
    except ChorelyError as e:
        raise to_http_exception(e)


@router.post("/{task_id}/move", response_model=Task)
async def move_task(
    task_id: UUID,
    data: MoveTaskRequest,
    user_id: CurrentUserId,
    service: TaskServiceDep,
):
    """Reschedule a task."""
    try:
        return await service.move_task(user_id, task_id, to_naive_utc(data.due_date))
    except ChorelyError as e:
        raise to_http_exception(e)


@router.get("/{task_id}/history", response_model=list[TaskHistory])
async def task_history(
    task_id: UUID,
    user_id: CurrentUserId,
    service: TaskServiceDep,
    limit: int = Query(50, ge=1, le=200),
):
    try:
        return await service.list_history(user_id, task_id, limit=limit)
    except ChorelyError as e:
        raise to_http_exception(e)
