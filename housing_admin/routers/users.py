"""
User management endpoints: search, create, edit, delete and per-user records.
"""

from fastapi import APIRouter, Body, Depends, Path, Query, status
from typing import Any, Dict, List, Optional

from housing_admin.schemas.common import MessageResponse, ResourceListResponse
from housing_admin.schemas.error import (
    get_crud_error_responses,
    get_delete_error_responses,
    get_read_error_responses
)
from housing_admin.schemas.house import HouseResponse
from housing_admin.schemas.report import ReportResponse
from housing_admin.schemas.user import UserResponse
from housing_admin.services.accounts import AccountService
from housing_admin.services.base import ResourceService
from housing_admin.utils.dependencies import get_account_service, get_user_service


router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=ResourceListResponse[UserResponse],
    summary="List users",
    description="All users, narrowed by a case-insensitive search over name, email, address and phone.",
    responses=get_read_error_responses()
)
async def list_users(
    search: Optional[str] = Query(None, description="Search term"),
    user_service: ResourceService = Depends(get_user_service)
) -> ResourceListResponse:
    """
    List users matching the search term.

    Args:
        search: Case-insensitive substring
        user_service: User resource service

    Returns:
        Matching rows with totals
    """
    return await user_service.list(search=search)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user",
    responses=get_read_error_responses()
)
async def get_user(
    user_id: str = Path(..., description="User ID"),
    user_service: ResourceService = Depends(get_user_service)
) -> UserResponse:
    return await user_service.get(user_id)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    description="Validate the user form and create the account. Password must be at least 6 characters.",
    responses=get_crud_error_responses()
)
async def create_user(
    data: Dict[str, Any] = Body(..., description="User form fields"),
    user_service: ResourceService = Depends(get_user_service)
) -> UserResponse:
    """
    Create a user.

    Args:
        data: firstName, lastName, email, contactNumber, address, password
        user_service: User resource service

    Returns:
        Created user with its backend-generated ID

    Raises:
        ValidationError: If any field is invalid; nothing is sent
    """
    return await user_service.create(data)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update user",
    description="Edit a user. A blank password leaves the current password unchanged.",
    responses=get_crud_error_responses()
)
async def update_user(
    user_id: str = Path(..., description="User ID"),
    data: Dict[str, Any] = Body(..., description="Changed user form fields"),
    user_service: ResourceService = Depends(get_user_service)
) -> UserResponse:
    return await user_service.update(user_id, data)


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Delete user",
    description="Delete a user. Requires confirm=true.",
    responses=get_delete_error_responses()
)
async def delete_user(
    user_id: str = Path(..., description="User ID"),
    confirm: bool = Query(False, description="Explicit confirmation of the delete"),
    user_service: ResourceService = Depends(get_user_service)
) -> MessageResponse:
    await user_service.delete(user_id, confirm)
    return MessageResponse(message="User deleted")


@router.get(
    "/{user_id}/houses",
    response_model=List[HouseResponse],
    summary="User's house registrations",
    responses=get_read_error_responses()
)
async def get_user_houses(
    user_id: str = Path(..., description="User ID"),
    account_service: AccountService = Depends(get_account_service)
) -> List[HouseResponse]:
    return await account_service.user_houses(user_id)


@router.get(
    "/{user_id}/reports",
    response_model=List[ReportResponse],
    summary="User's reports",
    responses=get_read_error_responses()
)
async def get_user_reports(
    user_id: str = Path(..., description="User ID"),
    account_service: AccountService = Depends(get_account_service)
) -> List[ReportResponse]:
    return await account_service.user_reports(user_id)
