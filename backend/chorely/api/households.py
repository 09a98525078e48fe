"""
Households API endpoints.

Households, their members and member roles.
"""

from uuid import UUID

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from chorely.api.deps import CurrentUserId, HouseholdServiceDep
from chorely.api.errors import to_http_exception
from chorely.core.exceptions import ChorelyError
from chorely.models.enums import HouseholdRole
from chorely.models.household import (
    Household,
    HouseholdCreate,
    HouseholdMember,
    HouseholdUpdate,
    HouseholdWithStats,
)

router = APIRouter()


class InviteMemberRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    role: HouseholdRole = HouseholdRole.MEMBER


class MemberRoleUpdate(BaseModel):
    role: HouseholdRole


@router.get("", response_model=list[HouseholdWithStats])
async def list_households(user_id: CurrentUserId, service: HouseholdServiceDep):
    """Households the user belongs to, with members and counters."""
    return await service.list_households(user_id)


@router.post("", response_model=HouseholdWithStats, status_code=status.HTTP_201_CREATED)
async def create_household(
    data: HouseholdCreate,
    user_id: CurrentUserId,
    service: HouseholdServiceDep,
):
    try:
        return await service.create_household(user_id, data)
    except ChorelyError as e:
        raise to_http_exception(e)


@router.patch("/{household_id}", response_model=Household)
async def update_household(
    household_id: UUID,
    data: HouseholdUpdate,
    user_id: CurrentUserId,
    service: HouseholdServiceDep,
):
    try:
        return await service.update_household(user_id, household_id, data)
    except ChorelyError as e:
        raise to_http_exception(e)


@router.delete("/{household_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_household(
    household_id: UUID,
    user_id: CurrentUserId,
    service: HouseholdServiceDep,
):
    try:
        await service.delete_household(user_id, household_id)
    except ChorelyError as e:
        raise to_http_exception(e)


@router.post(
    "/{household_id}/invite",
    response_model=HouseholdMember,
    status_code=status.HTTP_201_CREATED,
)
async def invite_member(
    household_id: UUID,
    data: InviteMemberRequest,
    user_id: CurrentUserId,
    service: HouseholdServiceDep,
):
    """Add an existing user to the household by email."""
    try:
        return await service.invite_member(user_id, household_id, data.email, data.role)
    except ChorelyError as e:
        raise to_http_exception(e)


@router.patch("/{household_id}/members/{member_id}", response_model=HouseholdMember)
async def update_member(
    household_id: UUID,
    member_id: UUID,
    data: MemberRoleUpdate,
    user_id: CurrentUserId,
    service: HouseholdServiceDep,
):
    try:
        return await service.update_member_role(user_id, household_id, member_id, data.role)
    except ChorelyError as e:
        raise to_http_exception(e)


@router.delete(
    "/{household_id}/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_member(
    household_id: UUID,
    member_id: UUID,
    user_id: CurrentUserId,
    service: HouseholdServiceDep,
):
    try:
        await service.remove_member(user_id, household_id, member_id)
    except ChorelyError as e:
        raise to_http_exception(e)
