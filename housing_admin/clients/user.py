"""
Client for the user_route collection.
"""

from housing_admin.clients.accounts import AccountClient
from housing_admin.schemas.user import UserResponse
from housing_admin.utils.session import TokenRole


class UserClient(AccountClient[UserResponse]):
    model = UserResponse
    resource_name = "user"
    plural = "users"
    role = TokenRole.USER
