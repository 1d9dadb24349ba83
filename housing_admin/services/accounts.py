"""
Account service: admin login/logout/signup, session introspection, the
admin's own profile and password, and per-user related records.
"""

import logging
from typing import Any, Dict, List, Mapping

from housing_admin.clients import ConsoleClients
from housing_admin.schemas.auth import LoginRequest, LoginResponse, SessionResponse
from housing_admin.schemas.house import HouseResponse
from housing_admin.schemas.report import ReportResponse
from housing_admin.schemas.user import AdminResponse, PasswordChangeRequest
from housing_admin.services.base import ResourceService, normalize_form_data
from housing_admin.services.resources import ADMINS
from housing_admin.utils.exceptions import BackendError, UnauthorizedError, ValidationError
from housing_admin.utils.session import SessionContext
from housing_admin.utils.validators import raise_for_errors

logger = logging.getLogger(__name__)


class AccountService:
    """
    Admin account operations for the console's own session.
    """

    def __init__(self, clients: ConsoleClients, session: SessionContext):
        self.clients = clients
        self.session = session
        self.admins = ResourceService(clients, ADMINS)

    async def login(self, credentials: LoginRequest) -> LoginResponse:
        """
        Log in as admin; the token is stored under the admin key.

        Raises:
            BackendError: If the backend rejects the credentials
        """
        return await self.clients.admins.login(credentials)

    def logout(self) -> None:
        self.clients.admins.logout()

    async def signup(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Register a new admin through the signup route.

        Returns:
            The created admin when the backend echoes it, else an empty mapping

        Raises:
            ValidationError: If the signup form is invalid; nothing is sent
            BackendError: If the backend rejects the signup
        """
        form = self.admins.new_form()
        form.open_create()
        form.update_fields(normalize_form_data(data))
        raise_for_errors(form.validate())
        payload = form.build_payload()

        admin = await self.clients.admins.signup(payload)
        form.close()
        logger.info(f"Admin signed up: {payload.email}")
        return admin.model_dump(by_alias=True, mode="json") if admin else {}

    def session_info(self) -> SessionResponse:
        """Current session as read from the stored token."""
        return SessionResponse(
            authenticated=self.session.is_authenticated,
            role=self.session.role.value,
            subject=self.session.subject,
            expires_at=self.session.expires_at,
            expired=self.session.is_expired(),
            claims=self.session.claims(),
        )

    def _current_admin_id(self) -> str:
        subject = self.session.subject
        if not subject:
            raise UnauthorizedError("Log in as an admin to manage the profile")
        return subject

    async def profile(self) -> AdminResponse:
        """
        The logged-in admin's record.

        Raises:
            UnauthorizedError: If the session carries no admin identity
        """
        return await self.clients.admins.get_by_id(self._current_admin_id())

    async def update_profile(self, data: Mapping[str, Any]) -> AdminResponse:
        """
        Edit the logged-in admin's profile; a blank password is left unchanged.

        Raises:
            UnauthorizedError: If the session carries no admin identity
            ValidationError: If the profile form is invalid
        """
        return await self.admins.update(self._current_admin_id(), data)

    async def change_password(self, request: PasswordChangeRequest) -> None:
        """
        Change the logged-in admin's password.

        The current password is checked by logging in with it before the
        new one is sent.

        Raises:
            UnauthorizedError: If the session carries no admin identity
            ValidationError: If the current password is wrong
            BackendError: If the backend rejects the update
        """
        admin = await self.profile()
        try:
            await self.clients.admins.login(
                LoginRequest(email=admin.email, password=request.current_password),
                remember=False
            )
        except (BackendError, UnauthorizedError) as e:
            if isinstance(e, BackendError) and e.backend_status not in (400, 401, 403, 404):
                raise
            logger.warning(f"Password change rejected for admin {admin.id}: {e.detail}")
            raise ValidationError(
                "Current password is incorrect",
                field_errors=[{"field": "current_password", "message": "Current password is incorrect"}]
            )

        await self.clients.admins.update(admin.id, {"password": request.new_password})
        logger.info(f"Password changed for admin {admin.id}")

    async def user_houses(self, user_id: str) -> List[HouseResponse]:
        """House registrations owned by a user."""
        return await self.clients.houses.get_by_user(user_id)

    async def user_reports(self, user_id: str) -> List[ReportResponse]:
        """Reports uploaded for a user."""
        return await self.clients.reports.get_by_user(user_id)
