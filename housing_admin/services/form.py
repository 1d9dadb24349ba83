"""
Form controller for create/edit modals.
Keeps the working draft of one entity, validates it locally and submits it
through the resource manager.
"""

import copy
import logging
from typing import Any, Dict, Generic, Mapping, Optional, Sequence, Type

from pydantic import BaseModel, ValidationError as PydanticValidationError

from housing_admin.clients.base import EntityT
from housing_admin.services.resource_manager import ResourceManager
from housing_admin.utils.exceptions import BackendError, BadRequestError, ValidationError
from housing_admin.utils.validators import (
    CREATE,
    EDIT,
    Rules,
    ValidationUtils,
    field_errors_list,
    raise_for_errors,
    validate_fields
)

logger = logging.getLogger(__name__)

# Entity fields that never go into a draft
READ_ONLY_FIELDS = ("id", "created_at", "updated_at")


class FormController(Generic[EntityT]):
    """
    Working draft for one create or edit form.

    Write-only fields (passwords) start blank on edit and are left out of
    the update when still blank. Transient fields (password confirmation)
    are validated but never sent.
    """

    def __init__(
        self,
        manager: ResourceManager[EntityT],
        create_model: Type[BaseModel],
        update_model: Type[BaseModel],
        rules: Optional[Rules] = None,
        defaults: Optional[Mapping[str, Any]] = None,
        write_only: Sequence[str] = (),
        transient: Sequence[str] = ()
    ):
        self.manager = manager
        self.create_model = create_model
        self.update_model = update_model
        self.rules = rules or {}
        self.defaults = dict(defaults or {})
        self.write_only = tuple(write_only)
        self.transient = tuple(transient)

        self.mode: Optional[str] = None
        self.editing_id: Optional[str] = None
        self.draft: Dict[str, Any] = {}
        self.errors: Dict[str, str] = {}
        self.error: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.mode is not None

    def open_create(self, defaults: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Start a blank draft from the resource defaults plus `defaults`."""
        self.mode = CREATE
        self.editing_id = None
        self.draft = copy.deepcopy(self.defaults)
        self.draft.update(copy.deepcopy(dict(defaults or {})))
        for name in self.write_only + self.transient:
            self.draft.setdefault(name, "")
        self.errors = {}
        self.error = None
        return self.draft

    def open_edit(self, entity: EntityT) -> Dict[str, Any]:
        """Start a draft from an existing entity; write-only fields start blank."""
        self.mode = EDIT
        self.editing_id = entity.id
        self.draft = entity.model_dump(exclude=set(READ_ONLY_FIELDS))
        for name in self.write_only + self.transient:
            self.draft[name] = ""
        self.errors = {}
        self.error = None
        return self.draft

    def close(self) -> None:
        self.mode = None
        self.editing_id = None
        self.draft = {}
        self.errors = {}

    def set_field(self, name: str, value: Any) -> None:
        self.draft[name] = value
        self.errors.pop(name, None)

    def update_fields(self, values: Mapping[str, Any]) -> None:
        for name, value in values.items():
            self.set_field(name, value)

    def add_item(self, name: str, item: Any) -> None:
        """Append to a list field unless the item is already there."""
        items = list(self.draft.get(name) or [])
        if item not in items:
            items.append(item)
        self.draft[name] = items

    def remove_item(self, name: str, item: Any) -> None:
        items = list(self.draft.get(name) or [])
        if item in items:
            items.remove(item)
        self.draft[name] = items

    def validate(self) -> Dict[str, str]:
        """
        Check the draft against the rules of the current mode.

        Returns:
            Messages for exactly the invalid fields; also kept in `errors`
        """
        self.errors = validate_fields(self.draft, self.rules, self.mode or CREATE)
        return self.errors

    def build_payload(self) -> BaseModel:
        """
        Shape the draft through the create or update schema.

        Raises:
            ValidationError: If the schema rejects the draft
        """
        data = {name: value for name, value in self.draft.items() if name not in self.transient}
        if self.mode == EDIT:
            for name in self.write_only:
                if ValidationUtils.is_blank(data.get(name)):
                    data.pop(name, None)

        model = self.create_model if self.mode == CREATE else self.update_model
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            self.errors.update(self._schema_errors(model, e))
            raise ValidationError("Form validation failed", field_errors=field_errors_list(self.errors))

    async def submit(self) -> Optional[EntityT]:
        """
        Validate and send the draft.

        Returns:
            The created or updated entity

        Raises:
            BadRequestError: If no form is open
            ValidationError: If the draft is invalid; nothing is sent
            BackendError: If the backend rejects it; the draft is kept
        """
        if not self.is_open:
            raise BadRequestError("No form is open")

        raise_for_errors(self.validate())
        payload = self.build_payload()

        self.error = None
        try:
            if self.mode == EDIT:
                entity = await self.manager.patch(self.editing_id, payload)
            else:
                entity = await self.manager.create(payload)
        except BackendError as e:
            self.error = e.message
            logger.warning(f"Form submit failed for {self.manager.name}: {e.message}")
            raise

        logger.info(f"Submitted {self.mode} form for {self.manager.name}")
        self.close()
        return entity

    @staticmethod
    def _schema_errors(model: Type[BaseModel], error: PydanticValidationError) -> Dict[str, str]:
        aliases = {
            (info.alias or name): name
            for name, info in model.model_fields.items()
        }
        errors: Dict[str, str] = {}
        for item in error.errors():
            loc = item.get("loc") or ()
            field = str(loc[0]) if loc else "form"
            field = aliases.get(field, field)
            message = str(item.get("msg", "Invalid value"))
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
            errors.setdefault(field, message)
        return errors
