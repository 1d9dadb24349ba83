"""
Console authentication endpoints: admin login, logout, signup and session.
"""

from fastapi import APIRouter, Body, Depends, status
from typing import Any, Dict

from housing_admin.schemas.auth import LoginRequest, LoginResponse, SessionResponse
from housing_admin.schemas.common import MessageResponse
from housing_admin.schemas.error import get_crud_error_responses, get_error_responses
from housing_admin.services.accounts import AccountService
from housing_admin.utils.dependencies import get_account_service, get_auth_service


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Admin login",
    description="Log in against the backend admin route and keep the issued token for later calls.",
    responses=get_error_responses(400, 401, 502)
)
async def login(
    credentials: LoginRequest,
    account_service: AccountService = Depends(get_auth_service)
) -> LoginResponse:
    """
    Log in as an admin.

    Args:
        credentials: Email and password
        account_service: Account service bound to the token store

    Returns:
        Backend login response including the token
    """
    return await account_service.login(credentials)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Admin logout",
    description="Forget the stored admin token."
)
async def logout(account_service: AccountService = Depends(get_auth_service)) -> MessageResponse:
    account_service.logout()
    return MessageResponse(message="Logged out")


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    summary="Admin signup",
    description="Register a new admin account. Fields are validated before anything is sent.",
    responses=get_crud_error_responses()
)
async def signup(
    data: Dict[str, Any] = Body(..., description="Signup form: firstName, lastName, email, contactNumber, address, password, confirmPassword"),
    account_service: AccountService = Depends(get_auth_service)
) -> Dict[str, Any]:
    return await account_service.signup(data)


@router.get(
    "/session",
    response_model=SessionResponse,
    summary="Current session",
    description="Subject, expiry and claims of the token the console would use for this request."
)
async def session_info(account_service: AccountService = Depends(get_account_service)) -> SessionResponse:
    return account_service.session_info()
