"""
Resource manager: page-lifetime state for one backend collection.
Holds the loaded rows plus search, filter, selection and unconfirmed
mutations, and applies optimistic changes that are reconciled with the
backend or rolled back.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Sequence, Tuple, Union
import logging

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from housing_admin.clients.base import EntityT, ResourceClient
from housing_admin.schemas.common import ResourceListResponse
from housing_admin.services.status import StatusLifecycle
from housing_admin.utils.exceptions import BackendError, BadRequestError, NotFoundError

logger = logging.getLogger(__name__)

ALL_SENTINELS = ("all", "")

Changes = Union[BaseModel, Mapping[str, Any]]


def is_all(value: Optional[str]) -> bool:
    """True when a filter value means "no filter"."""
    return value is None or str(value).strip().lower() in ALL_SENTINELS


def resolve_path(entity: Any, path: str) -> Any:
    """Follow a dotted attribute path such as 'user.name'; None when a step is missing."""
    value = entity
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return getattr(value, "value", value)


@dataclass
class PendingMutation:
    """A local change the backend has not confirmed yet."""

    kind: str
    id: str
    previous: Optional[BaseModel]
    index: Optional[int]


class ResourceManager(Generic[EntityT]):
    """
    State store for one resource collection.

    Every load takes a generation number; results from an older generation,
    or arriving after `dispose()`, are dropped.
    """

    def __init__(
        self,
        client: ResourceClient[EntityT],
        search_fields: Sequence[str] = (),
        filter_field: Optional[str] = None,
        filter_values: Sequence[str] = (),
        lifecycle: Optional[StatusLifecycle] = None,
        status_field: str = "status"
    ):
        self.client = client
        self.search_fields = list(search_fields)
        self.filter_field = filter_field
        self.filter_values = [getattr(v, "value", v) for v in filter_values]
        self.lifecycle = lifecycle
        self.status_field = status_field

        self.items: List[EntityT] = []
        self.loading = False
        self.error: Optional[str] = None
        self.search_term: str = ""
        self.filter_value: Optional[str] = None
        self.selected_id: Optional[str] = None
        self.pending: Dict[str, PendingMutation] = {}

        self._generation = 0
        self._disposed = False

    @property
    def name(self) -> str:
        return self.client.plural

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _is_current(self, generation: int) -> bool:
        return not self._disposed and generation == self._generation

    # Loading

    async def load(self) -> List[EntityT]:
        """
        Fetch the collection and replace the local rows.

        Returns:
            The loaded rows (unchanged rows when the result went stale)

        Raises:
            BackendError: If the fetch fails and its result is still current
        """
        self._generation += 1
        generation = self._generation
        self.loading = True
        self.error = None

        try:
            items = await self.client.get_all()
        except BackendError as e:
            if not self._is_current(generation):
                logger.debug(f"Discarding stale {self.name} load error (generation {generation})")
                return self.items
            self.loading = False
            self.error = e.message
            logger.error(f"Failed to load {self.name}: {e.message}")
            raise

        if not self._is_current(generation):
            logger.debug(f"Discarding stale {self.name} load result (generation {generation})")
            return self.items

        self.items = list(items)
        self.loading = False
        logger.debug(f"Loaded {len(self.items)} {self.name}")
        return self.items

    async def retry(self) -> List[EntityT]:
        """Manual retry after a failed load."""
        return await self.load()

    def dispose(self) -> None:
        """Stop accepting results; in-flight calls finish but change nothing."""
        self._disposed = True
        self._generation += 1
        self.loading = False

    # Derived views

    def matches(self, entity: EntityT) -> bool:
        """Search term on any search field AND exact filter match, both case-insensitive."""
        term = (self.search_term or "").strip().lower()
        if term:
            found = False
            for path in self.search_fields:
                value = resolve_path(entity, path)
                if value is not None and term in str(value).lower():
                    found = True
                    break
            if not found:
                return False

        if self.filter_field and not is_all(self.filter_value):
            value = resolve_path(entity, self.filter_field)
            wanted = str(getattr(self.filter_value, "value", self.filter_value)).strip().lower()
            if value is None or str(value).lower() != wanted:
                return False

        return True

    def visible(self) -> List[EntityT]:
        """Rows matching the current search term and filter."""
        return [entity for entity in self.items if self.matches(entity)]

    def counts(self) -> Dict[str, int]:
        """Loaded rows per filter value, plus 'All'."""
        counts: Dict[str, int] = {"All": len(self.items)}
        if not self.filter_field:
            return counts
        for value in self.filter_values:
            counts[str(value)] = 0
        for entity in self.items:
            value = resolve_path(entity, self.filter_field)
            if value is None or value == "":
                continue
            counts[str(value)] = counts.get(str(value), 0) + 1
        return counts

    def snapshot(self) -> ResourceListResponse:
        """Table view: visible rows with totals and filter counts."""
        rows = self.visible()
        return ResourceListResponse(
            items=rows,
            total=len(self.items),
            visible=len(rows),
            counts=self.counts(),
        )

    def set_search(self, term: Optional[str]) -> None:
        self.search_term = term or ""

    def set_filter(self, value: Optional[str]) -> None:
        self.filter_value = value

    # Selection

    def find(self, id: str) -> Tuple[Optional[int], Optional[EntityT]]:
        for index, entity in enumerate(self.items):
            if getattr(entity, "id", None) == id:
                return index, entity
        return None, None

    def select(self, id: str) -> EntityT:
        """
        Select a loaded row for the detail view.

        Raises:
            NotFoundError: If the row is not loaded
        """
        _, entity = self.find(id)
        if entity is None:
            raise NotFoundError(self.client.resource_name.capitalize(), id)
        self.selected_id = id
        return entity

    def clear_selection(self) -> None:
        self.selected_id = None

    @property
    def selected(self) -> Optional[EntityT]:
        if self.selected_id is None:
            return None
        return self.find(self.selected_id)[1]

    def is_unconfirmed(self, id: str) -> bool:
        return id in self.pending

    async def ensure(self, id: str) -> EntityT:
        """Loaded row for `id`, fetching and adding it when missing."""
        _, entity = self.find(id)
        if entity is None:
            entity = self.add(await self.client.get_by_id(id))
        return entity

    # Mutations

    def add(self, entity: EntityT) -> EntityT:
        """Append a confirmed entity."""
        if not self._disposed:
            self.items.append(entity)
        return entity

    async def create(self, payload: Changes) -> EntityT:
        """
        Create through the backend, then append the returned entity.

        Raises:
            BackendError: If the backend rejects the payload
        """
        self.error = None
        try:
            entity = await self.client.create(payload)
        except BackendError as e:
            self.error = e.message
            raise
        return self.add(entity)

    async def delete(self, id: str, confirm: Callable[[str], bool]) -> bool:
        """
        Delete after explicit confirmation.

        The row disappears locally at once and comes back at its old
        position if the backend call fails.

        Args:
            id: Row to delete
            confirm: Asked with the id; nothing is sent unless it returns True

        Returns:
            True when deleted, False when the confirmation was declined

        Raises:
            BackendError: If the backend rejects the delete
        """
        if not confirm(id):
            logger.info(f"Delete of {self.client.resource_name} {id} not confirmed")
            return False

        self.error = None
        index, previous = self.find(id)
        if index is not None:
            del self.items[index]
        self.pending[id] = PendingMutation("delete", id, previous, index)

        try:
            await self.client.delete(id)
        except BackendError as e:
            self.pending.pop(id, None)
            if previous is not None and not self._disposed and self.find(id)[1] is None:
                self.items.insert(min(index, len(self.items)), previous)
            self.error = e.message
            logger.warning(f"Rolled back delete of {self.client.resource_name} {id}: {e.message}")
            raise

        self.pending.pop(id, None)
        if self.selected_id == id:
            self.selected_id = None
        return True

    async def patch(self, id: str, changes: Changes) -> Optional[EntityT]:
        """
        Update optimistically, then reconcile with the backend.

        Args:
            id: Row to update
            changes: Schema instance (unset fields skipped) or camelCase mapping

        Returns:
            The confirmed entity: the backend's echo, or the merged local
            copy when nothing is echoed; None when the row was never loaded
            and the backend echoed nothing

        Raises:
            BackendError: If the backend rejects the update
        """
        payload = self._payload(changes)
        self.error = None
        index, previous = self.find(id)
        if previous is not None:
            self.items[index] = self._merge(previous, payload)
            self.pending[id] = PendingMutation("update", id, previous, index)

        try:
            echoed = await self.client.update(id, payload)
        except BackendError as e:
            self.pending.pop(id, None)
            if previous is not None and not self._disposed:
                self._replace(id, previous)
            self.error = e.message
            logger.warning(f"Rolled back update of {self.client.resource_name} {id}: {e.message}")
            raise

        self.pending.pop(id, None)
        confirmed = echoed
        if confirmed is None and previous is not None:
            confirmed = self._merge(previous, payload)
        if confirmed is not None and not self._disposed:
            self._replace(id, confirmed)
        return confirmed

    async def transition(self, id: str, new_status: str) -> Optional[EntityT]:
        """
        Move a row to a new status: one lifecycle check, one update.

        Raises:
            BadRequestError: If this resource has no status lifecycle
            StatusTransitionError: If the lifecycle forbids the change
            BackendError: If the backend rejects the update
        """
        if self.lifecycle is None:
            raise BadRequestError(f"{self.name.capitalize()} have no status lifecycle")

        entity = await self.ensure(id)
        current = resolve_path(entity, self.status_field)
        target = getattr(new_status, "value", new_status)
        self.lifecycle.check(current, target)

        logger.info(f"Changing {self.client.resource_name} {id} status: {current} -> {target}")
        return await self.patch(id, {self.status_field: target})

    # Helpers

    @staticmethod
    def _payload(changes: Changes) -> Dict[str, Any]:
        if isinstance(changes, BaseModel):
            dump = getattr(changes, "to_payload", None)
            if dump is not None:
                return dump(exclude_unset=True)
            return changes.model_dump(mode="json", by_alias=True, exclude_unset=True)
        return {
            (to_camel(key) if "_" in key.strip("_") else key): value
            for key, value in changes.items()
        }

    @staticmethod
    def _merge(entity: EntityT, payload: Mapping[str, Any]) -> EntityT:
        data = entity.model_dump(by_alias=True)
        data.update(payload)
        return type(entity).model_validate(data)

    def _replace(self, id: str, entity: EntityT) -> None:
        index, _ = self.find(id)
        if index is not None:
            self.items[index] = entity
