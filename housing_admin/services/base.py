"""
Generic resource service used by the console routers.
Wires one resource definition to a manager and a form for the span of a
request.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from pydantic.alias_generators import to_snake

from housing_admin.clients import ConsoleClients
from housing_admin.schemas.common import ResourceListResponse
from housing_admin.services.form import FormController
from housing_admin.services.resource_manager import ResourceManager
from housing_admin.services.resources import ResourceDefinition
from housing_admin.services.status import StatusLifecycle
from housing_admin.utils.exceptions import ConfirmationRequiredError

logger = logging.getLogger(__name__)


def normalize_form_data(data: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Accept camelCase or snake_case form keys; drafts are keyed by attribute name."""
    normalized = {}
    for key, value in (data or {}).items():
        if key in ("_id", "id"):
            continue
        normalized[to_snake(key)] = value
    return normalized


class ResourceService:
    """
    List, create, edit and delete one resource.

    Every operation goes through the resource's manager, so forms,
    optimistic updates and rollbacks behave the same for every collection.
    """

    def __init__(
        self,
        clients: ConsoleClients,
        definition: ResourceDefinition,
        lifecycle: Optional[StatusLifecycle] = None
    ):
        self.clients = clients
        self.definition = definition
        self.manager: ResourceManager = definition.build_manager(clients, lifecycle)

    @property
    def resource_name(self) -> str:
        return self.manager.client.resource_name

    def new_form(self) -> FormController:
        return self.definition.build_form(self.manager)

    async def list(self, search: Optional[str] = None, filter_value: Optional[str] = None) -> ResourceListResponse:
        """
        Load the collection and apply search and filter.

        Args:
            search: Case-insensitive substring over the search fields
            filter_value: Exact filter value; 'All' or empty disables it

        Returns:
            Visible rows with totals and counts
        """
        await self.manager.load()
        self.manager.set_search(search)
        self.manager.set_filter(filter_value)
        view = self.manager.snapshot()
        logger.debug(f"{self.manager.name}: {view.visible} of {view.total} rows visible")
        return view

    async def get(self, id: str):
        return await self.manager.client.get_by_id(id)

    async def create(self, data: Mapping[str, Any]):
        """
        Fill a create form and submit it.

        Raises:
            ValidationError: If the form is invalid; nothing is sent
            BackendError: If the backend rejects the payload
        """
        form = self.new_form()
        form.open_create()
        form.update_fields(normalize_form_data(data))
        return await form.submit()

    async def update(self, id: str, data: Mapping[str, Any]):
        """
        Fill an edit form from the current entity and submit the changes.

        Raises:
            NotFoundError: If the entity does not exist
            ValidationError: If the form is invalid; nothing is sent
            BackendError: If the backend rejects the update
        """
        entity = await self.manager.ensure(id)
        form = self.new_form()
        form.open_edit(entity)
        form.update_fields(normalize_form_data(data))
        return await form.submit()

    async def delete(self, id: str, confirmed: bool) -> None:
        """
        Delete when the caller confirmed it.

        Raises:
            ConfirmationRequiredError: If not confirmed; nothing is sent
            BackendError: If the backend rejects the delete
        """
        deleted = await self.manager.delete(id, confirm=lambda _id: confirmed)
        if not deleted:
            raise ConfirmationRequiredError(f"delete {self.resource_name}")

    def dispose(self) -> None:
        self.manager.dispose()
