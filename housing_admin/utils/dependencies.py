"""
FastAPI dependency injection utilities.
Builds the session, the backend clients and the per-request services.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import httpx

from housing_admin.clients import ConsoleClients, build_clients
from housing_admin.config import Settings, get_settings
from housing_admin.services.accounts import AccountService
from housing_admin.services.base import ResourceService
from housing_admin.services.listings import ListingService
from housing_admin.services.registration import RegistrationService
from housing_admin.services.reports import ReportService
from housing_admin.services.resources import ADMINS, USERS
from housing_admin.services.status import StatusLifecycle
from housing_admin.services.uploads import UploadService
from housing_admin.utils.session import SessionContext, TokenRole, TokenStore


# HTTP Bearer token security scheme; a header overrides the stored token
security = HTTPBearer(auto_error=False)


def get_app_settings() -> Settings:
    return get_settings()


def get_token_store(request: Request) -> TokenStore:
    """Token store opened in the application lifespan."""
    return request.app.state.token_store


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared outbound HTTP client opened in the application lifespan."""
    return request.app.state.http_client


def get_session_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    store: TokenStore = Depends(get_token_store)
) -> SessionContext:
    """
    Session for the current request.

    A bearer token on the request is forwarded as-is; otherwise the admin
    token saved by the last console login is used.

    Returns:
        SessionContext for the backend clients
    """
    if credentials:
        return SessionContext.from_token(credentials.credentials, TokenRole.ADMIN)
    return SessionContext(store, TokenRole.ADMIN)


def get_clients(
    http: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_app_settings),
    session: SessionContext = Depends(get_session_context)
) -> ConsoleClients:
    return build_clients(http, settings, session)


def get_status_lifecycle(settings: Settings = Depends(get_app_settings)) -> StatusLifecycle:
    return StatusLifecycle.from_settings(settings)


def get_upload_service(
    clients: ConsoleClients = Depends(get_clients),
    settings: Settings = Depends(get_app_settings)
) -> UploadService:
    return UploadService(clients.storage, settings)


def get_user_service(clients: ConsoleClients = Depends(get_clients)) -> ResourceService:
    return ResourceService(clients, USERS)


def get_admin_service(clients: ConsoleClients = Depends(get_clients)) -> ResourceService:
    return ResourceService(clients, ADMINS)


def get_registration_service(
    clients: ConsoleClients = Depends(get_clients),
    uploads: UploadService = Depends(get_upload_service),
    lifecycle: StatusLifecycle = Depends(get_status_lifecycle)
) -> RegistrationService:
    return RegistrationService(clients, uploads, lifecycle)


def get_listing_service(
    clients: ConsoleClients = Depends(get_clients),
    uploads: UploadService = Depends(get_upload_service)
) -> ListingService:
    return ListingService(clients, uploads)


def get_report_service(
    clients: ConsoleClients = Depends(get_clients),
    uploads: UploadService = Depends(get_upload_service)
) -> ReportService:
    return ReportService(clients, uploads)


def get_account_service(
    clients: ConsoleClients = Depends(get_clients),
    session: SessionContext = Depends(get_session_context)
) -> AccountService:
    return AccountService(clients, session)


def get_stored_session(store: TokenStore = Depends(get_token_store)) -> SessionContext:
    """Admin session backed by the token store, ignoring request headers."""
    return SessionContext(store, TokenRole.ADMIN)


def get_auth_service(
    http: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_app_settings),
    session: SessionContext = Depends(get_stored_session)
) -> AccountService:
    """Account service whose login/logout write the console's token store."""
    return AccountService(build_clients(http, settings, session), session)
