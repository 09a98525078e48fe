"""
Categories API endpoints.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from chorely.api.deps import CategoryServiceDep, CurrentUserId
from chorely.api.errors import to_http_exception
from chorely.core.exceptions import ChorelyError
from chorely.models.category import Category, CategoryBase, CategoryUpdate, CategoryWithStats
from chorely.models.task import TaskSuggestions

router = APIRouter()


class CategoryCreateRequest(CategoryBase):
    household_id: Optional[UUID] = None


class InitializeCategoriesResponse(BaseModel):
    message: str
    categories: list[Category]
    count: int


@router.get("", response_model=list[CategoryWithStats])
async def list_categories(user_id: CurrentUserId, service: CategoryServiceDep):
    """Personal and household categories with task counts."""
    return await service.list_categories(user_id)


@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreateRequest,
    user_id: CurrentUserId,
    service: CategoryServiceDep,
):
    try:
        return await service.create_category(user_id, data, household_id=data.household_id)
    except ChorelyError as e:
        raise to_http_exception(e)


@router.post("/initialize", response_model=InitializeCategoriesResponse)
async def initialize_categories(
    response: Response,
    user_id: CurrentUserId,
    service: CategoryServiceDep,
):
    """Create the default categories for a user without any."""
    created = await service.initialize_defaults(user_id)
    if not created:
        return InitializeCategoriesResponse(
            message="User already has categories", categories=[], count=0
        )
    response.status_code = status.HTTP_201_CREATED
    return InitializeCategoriesResponse(
        message="Default categories created successfully",
        categories=created,
        count=len(created),
    )


@router.patch("/{category_id}", response_model=Category)
async def update_category(
    category_id: UUID,
    update: CategoryUpdate,
    user_id: CurrentUserId,
    service: CategoryServiceDep,
):
    try:
        return await service.update_category(user_id, category_id, update)
    except ChorelyError as e:
        raise to_http_exception(e)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: UUID,
    user_id: CurrentUserId,
    service: CategoryServiceDep,
):
    """Delete a category that no task uses."""
    try:
        await service.delete_category(user_id, category_id)
    except ChorelyError as e:
        raise to_http_exception(e)


@router.get("/{category_id}/suggestions", response_model=TaskSuggestions)
async def category_suggestions(
    category_id: UUID,
    user_id: CurrentUserId,
    service: CategoryServiceDep,
):
    """Common chores for the category."""
    try:
        return await service.suggest_tasks(user_id, category_id)
    except ChorelyError as e:
        raise to_http_exception(e)
