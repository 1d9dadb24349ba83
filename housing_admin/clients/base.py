"""
Base resource client with the common CRUD calls against the housing backend.
Every resource route exposes the same verbs; subclasses only name the route
and the entity model.
"""

import httpx
from typing import TypeVar, Generic, Optional, List, Dict, Any, Type, Tuple, Union
from pydantic import BaseModel, ValidationError as PydanticValidationError
import logging

from housing_admin.utils.exceptions import BackendError, NotFoundError
from housing_admin.utils.session import SessionContext

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)

Payload = Union[BaseModel, Dict[str, Any]]


class ResourceClient(Generic[EntityT]):
    """
    Base client providing the CRUD verbs of one backend route.

    The bearer token is read from the session on every call; a missing token
    only omits the header and leaves the rejection to the backend.
    """

    model: Type[EntityT]
    resource_name: str = "record"
    plural: str = "records"
    # Extra keys the backend may wrap collections in, besides "data" and `plural`
    envelope_keys: Tuple[str, ...] = ()

    def __init__(self, http: httpx.AsyncClient, base_url: str, session: SessionContext):
        """
        Initialize client with the shared HTTP client and session.

        Args:
            http: Shared async HTTP client
            base_url: Absolute URL of the resource route
            session: Session providing the bearer token
        """
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.session = session

    async def get_all(self) -> List[EntityT]:
        """
        Fetch the whole collection.

        Returns:
            List of entities

        Raises:
            BackendError: If the backend rejects the call or cannot be reached
        """
        body = await self._request("GET", "getall", f"retrieve {self.plural}")
        items = self._parse_list(body)
        logger.debug(f"Retrieved {len(items)} {self.plural}")
        return items

    async def get_by_id(self, id: str) -> EntityT:
        """
        Fetch one entity.

        Args:
            id: Backend identifier

        Returns:
            The entity

        Raises:
            NotFoundError: If the backend answers without an entity
            BackendError: If the backend rejects the call or cannot be reached
        """
        body = await self._request("GET", f"get/{id}", f"retrieve {self.resource_name}")
        entity = self._parse_entity(body)
        if entity is None:
            raise NotFoundError(self.resource_name.capitalize(), id)
        logger.debug(f"Retrieved {self.resource_name} with id: {id}")
        return entity

    async def get_by_user(self, user_id: str) -> List[EntityT]:
        """
        Fetch the entities that belong to one user.

        Args:
            user_id: Owning user's identifier

        Returns:
            List of entities
        """
        body = await self._request("GET", f"getbyuser/{user_id}", f"retrieve user {self.plural}")
        items = self._parse_list(body)
        logger.debug(f"Retrieved {len(items)} {self.plural} for user {user_id}")
        return items

    async def create(self, payload: Payload) -> EntityT:
        """
        Create an entity.

        Args:
            payload: Schema instance or camelCase dictionary

        Returns:
            The created entity with its backend-generated id

        Raises:
            BackendError: If the backend rejects the payload or echoes no entity
        """
        operation = f"create {self.resource_name}"
        body = await self._request("POST", "create", operation, json=self._dump(payload))
        entity = self._parse_entity(body)
        if entity is None:
            raise BackendError(operation, body=body)
        logger.info(f"Created {self.resource_name} with id: {getattr(entity, 'id', None)}")
        return entity

    async def update(self, id: str, payload: Payload) -> Optional[EntityT]:
        """
        Partially update an entity.

        Args:
            id: Backend identifier
            payload: Fields to change

        Returns:
            Updated entity when the backend echoes one, None otherwise
        """
        body = await self._request(
            "PUT", f"update/{id}", f"update {self.resource_name}", json=self._dump(payload, partial=True)
        )
        entity = self._parse_entity(body)
        logger.info(f"Updated {self.resource_name} with id: {id}")
        return entity

    async def delete(self, id: str) -> None:
        """
        Delete an entity.

        Args:
            id: Backend identifier
        """
        await self._request("DELETE", f"delete/{id}", f"delete {self.resource_name}")
        logger.info(f"Deleted {self.resource_name} with id: {id}")

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        json: Optional[Dict[str, Any]] = None,
        auth: bool = True
    ) -> Any:
        """
        Send one request and return the decoded body.

        Raises:
            BackendError: On an HTTP error status (body kept verbatim) or transport failure
        """
        url = f"{self.base_url}/{path}"
        headers = self.session.auth_headers() if auth else {}
        try:
            response = await self.http.request(method, url, json=json, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error_body = self._decode(e.response)
            logger.error(
                f"Backend rejected {method} {url}: {e.response.status_code}",
                extra={"operation": operation, "status_code": e.response.status_code}
            )
            raise BackendError(operation, e.response.status_code, error_body)
        except httpx.RequestError as e:
            logger.error(f"Failed to reach backend for {method} {url}: {e}", extra={"operation": operation})
            raise BackendError(operation)
        return self._decode(response)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _dump(payload: Payload, partial: bool = False) -> Dict[str, Any]:
        if isinstance(payload, BaseModel):
            dump = getattr(payload, "to_payload", None)
            if dump is not None:
                return dump(exclude_unset=partial)
            return payload.model_dump(mode="json", by_alias=True, exclude_none=True, exclude_unset=partial)
        return dict(payload)

    def _list_keys(self) -> Tuple[str, ...]:
        return ("data", self.plural, *self.envelope_keys)

    def _entity_keys(self) -> Tuple[str, ...]:
        return ("data", self.resource_name, *self.envelope_keys)

    def _parse_list(self, body: Any) -> List[EntityT]:
        """Unwrap a bare list, {"data": [...]} or a resource-named key."""
        raw = body
        if isinstance(body, dict):
            raw = next(
                (body[key] for key in self._list_keys() if isinstance(body.get(key), list)),
                [],
            )
        if not isinstance(raw, list):
            return []

        items = []
        for record in raw:
            try:
                items.append(self.model.model_validate(record))
            except PydanticValidationError as e:
                logger.warning(f"Skipping malformed {self.resource_name} record: {e.error_count()} errors")
        return items

    def _parse_entity(self, body: Any) -> Optional[EntityT]:
        """Unwrap a bare entity, {"data": {...}} or a singular key; None when there is no entity."""
        if not isinstance(body, dict):
            return None
        for key in self._entity_keys():
            nested = body.get(key)
            if isinstance(nested, dict):
                body = nested
                break
        if "_id" not in body and "id" not in body:
            return None
        return self.model.model_validate(body)
