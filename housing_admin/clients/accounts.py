"""
Shared account calls for the admin and user routes: signup, login, logout.
"""

import logging
from typing import Optional

from housing_admin.clients.base import EntityT, Payload, ResourceClient
from housing_admin.schemas.auth import LoginRequest, LoginResponse
from housing_admin.utils.exceptions import UnauthorizedError
from housing_admin.utils.session import TokenRole

logger = logging.getLogger(__name__)


class AccountClient(ResourceClient[EntityT]):
    """Resource client for routes that also issue tokens."""

    role: TokenRole = TokenRole.ADMIN

    async def signup(self, payload: Payload) -> Optional[EntityT]:
        """
        Register a new account. Sent without a bearer token.

        Returns:
            The created account when the backend echoes it
        """
        body = await self._request(
            "POST", "signup", f"sign up {self.resource_name}", json=self._dump(payload), auth=False
        )
        account = self._parse_entity(body)
        logger.info(f"Signed up {self.resource_name}")
        return account

    async def login(self, credentials: LoginRequest, remember: bool = True) -> LoginResponse:
        """
        Log in and store the issued token under this role's key.

        Args:
            credentials: Email and password
            remember: Store the token; False only checks the credentials

        Raises:
            BackendError: If the backend rejects the credentials
            UnauthorizedError: If the backend answers without a token
        """
        body = await self._request(
            "POST", "login", f"log in {self.resource_name}", json=credentials.model_dump(), auth=False
        )
        result = LoginResponse.model_validate(body if isinstance(body, dict) else {})
        if not result.token:
            logger.warning(f"{self.resource_name.capitalize()} login returned no token")
            raise UnauthorizedError("Login response did not include a token")

        if remember:
            self.session.save_token(result.token, self.role)
        logger.info(f"{self.resource_name.capitalize()} logged in: {credentials.email}")
        return result

    def logout(self) -> None:
        """Forget this role's stored token."""
        self.session.clear(self.role)
        logger.info(f"{self.resource_name.capitalize()} logged out")
