"""
HTTP clients for the housing backend and object storage.
"""

from dataclasses import dataclass

import httpx

from housing_admin.config import Settings
from housing_admin.utils.session import SessionContext

from .base import ResourceClient
from .accounts import AccountClient
from .admin import AdminClient
from .user import UserClient
from .house import HouseClient
from .listing import ListingClient
from .report import ReportClient
from .storage import ObjectStorageClient


@dataclass
class ConsoleClients:
    """Every client one console request may need, sharing one session."""

    admins: AdminClient
    users: UserClient
    houses: HouseClient
    listings: ListingClient
    reports: ReportClient
    storage: ObjectStorageClient


def build_clients(http: httpx.AsyncClient, settings: Settings, session: SessionContext) -> ConsoleClients:
    """Build the resource clients for the configured backend routes."""
    return ConsoleClients(
        admins=AdminClient(http, settings.route_url(settings.admin_route), session),
        users=UserClient(http, settings.route_url(settings.user_route), session),
        houses=HouseClient(http, settings.route_url(settings.housing_route), session),
        listings=ListingClient(http, settings.route_url(settings.property_listings_route), session),
        reports=ReportClient(http, settings.route_url(settings.reports_route), session),
        storage=ObjectStorageClient(http, settings.storage_url, settings.storage_api_key),
    )


__all__ = [
    "ResourceClient",
    "AccountClient",
    "AdminClient",
    "UserClient",
    "HouseClient",
    "ListingClient",
    "ReportClient",
    "ObjectStorageClient",
    "ConsoleClients",
    "build_clients",
]
