"""
Admin account endpoints, including the logged-in admin's own profile.
"""

from fastapi import APIRouter, Body, Depends, Path, Query
from typing import Any, Dict, Optional

from housing_admin.schemas.common import MessageResponse, ResourceListResponse
from housing_admin.schemas.error import (
    get_crud_error_responses,
    get_delete_error_responses,
    get_read_error_responses
)
from housing_admin.schemas.user import AdminResponse, PasswordChangeRequest
from housing_admin.services.accounts import AccountService
from housing_admin.services.base import ResourceService
from housing_admin.utils.dependencies import get_account_service, get_admin_service


router = APIRouter(prefix="/admins", tags=["Admins"])


@router.get(
    "",
    response_model=ResourceListResponse[AdminResponse],
    summary="List admins",
    responses=get_read_error_responses()
)
async def list_admins(
    search: Optional[str] = Query(None, description="Search term"),
    admin_service: ResourceService = Depends(get_admin_service)
) -> ResourceListResponse:
    return await admin_service.list(search=search)


@router.get(
    "/me",
    response_model=AdminResponse,
    summary="Current admin profile",
    description="Profile of the admin identified by the session token.",
    responses=get_read_error_responses()
)
async def get_profile(account_service: AccountService = Depends(get_account_service)) -> AdminResponse:
    return await account_service.profile()


@router.put(
    "/me",
    response_model=AdminResponse,
    summary="Update current admin profile",
    responses=get_crud_error_responses()
)
async def update_profile(
    data: Dict[str, Any] = Body(..., description="Changed profile fields"),
    account_service: AccountService = Depends(get_account_service)
) -> AdminResponse:
    return await account_service.update_profile(data)


@router.put(
    "/me/password",
    response_model=MessageResponse,
    summary="Change current admin password",
    description="Requires the current password; the new password must be at least 6 characters and match its confirmation.",
    responses=get_crud_error_responses()
)
async def change_password(
    request: PasswordChangeRequest,
    account_service: AccountService = Depends(get_account_service)
) -> MessageResponse:
    """
    Change the logged-in admin's password.

    Args:
        request: Current, new and confirmation passwords
        account_service: Account service for the session

    Returns:
        Confirmation message

    Raises:
        ValidationError: If the current password is wrong
    """
    await account_service.change_password(request)
    return MessageResponse(message="Password updated")


@router.get(
    "/{admin_id}",
    response_model=AdminResponse,
    summary="Get admin",
    responses=get_read_error_responses()
)
async def get_admin(
    admin_id: str = Path(..., description="Admin ID"),
    admin_service: ResourceService = Depends(get_admin_service)
) -> AdminResponse:
    return await admin_service.get(admin_id)


@router.put(
    "/{admin_id}",
    response_model=AdminResponse,
    summary="Update admin",
    description="Edit an admin. A blank password leaves the current password unchanged.",
    responses=get_crud_error_responses()
)
async def update_admin(
    admin_id: str = Path(..., description="Admin ID"),
    data: Dict[str, Any] = Body(..., description="Changed admin form fields"),
    admin_service: ResourceService = Depends(get_admin_service)
) -> AdminResponse:
    return await admin_service.update(admin_id, data)


@router.delete(
    "/{admin_id}",
    response_model=MessageResponse,
    summary="Delete admin",
    description="Delete an admin. Requires confirm=true.",
    responses=get_delete_error_responses()
)
async def delete_admin(
    admin_id: str = Path(..., description="Admin ID"),
    confirm: bool = Query(False, description="Explicit confirmation of the delete"),
    admin_service: ResourceService = Depends(get_admin_service)
) -> MessageResponse:
    await admin_service.delete(admin_id, confirm)
    return MessageResponse(message="Admin deleted")
