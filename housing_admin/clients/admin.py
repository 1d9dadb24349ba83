"""
Client for the admin_route collection.
"""

from housing_admin.clients.accounts import AccountClient
from housing_admin.schemas.user import AdminResponse
from housing_admin.utils.session import TokenRole


class AdminClient(AccountClient[AdminResponse]):
    model = AdminResponse
    resource_name = "admin"
    plural = "admins"
    role = TokenRole.ADMIN
