"""
Resource definitions: what differs between the managed collections.
One generic manager and form are configured per resource from these.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Type

from pydantic import BaseModel

from housing_admin.clients import ConsoleClients
from housing_admin.clients.base import ResourceClient
from housing_admin.schemas.house import (
    HouseCreate,
    HousePropertyType,
    HouseUpdate,
    RegistrationStatus
)
from housing_admin.schemas.listing import ListingCreate, ListingType, ListingUpdate
from housing_admin.schemas.report import DOCUMENT_TYPE_NAMES, ReportCreate, ReportUpdate
from housing_admin.schemas.user import UserCreate, UserUpdate
from housing_admin.services.form import FormController
from housing_admin.services.resource_manager import ResourceManager
from housing_admin.services.status import StatusLifecycle
from housing_admin.utils.validators import (
    CREATE,
    EDIT,
    FieldRule,
    email,
    matches,
    min_length,
    number,
    one_of,
    phone,
    required
)


@dataclass(frozen=True)
class ResourceDefinition:
    """Configuration of one managed collection."""

    name: str
    client: Callable[[ConsoleClients], ResourceClient]
    create_model: Type[BaseModel]
    update_model: Type[BaseModel]
    search_fields: Sequence[str] = ()
    filter_field: Optional[str] = None
    filter_values: Sequence[str] = ()
    rules: Mapping[str, Sequence[FieldRule]] = field(default_factory=dict)
    defaults: Mapping[str, Any] = field(default_factory=dict)
    write_only: Sequence[str] = ()
    transient: Sequence[str] = ()
    has_lifecycle: bool = False

    def build_manager(
        self,
        clients: ConsoleClients,
        lifecycle: Optional[StatusLifecycle] = None
    ) -> ResourceManager:
        """State store for this resource over the given clients."""
        if self.has_lifecycle and lifecycle is None:
            lifecycle = StatusLifecycle.registration()
        return ResourceManager(
            self.client(clients),
            search_fields=self.search_fields,
            filter_field=self.filter_field,
            filter_values=self.filter_values,
            lifecycle=lifecycle if self.has_lifecycle else None,
        )

    def build_form(self, manager: ResourceManager) -> FormController:
        """Create/edit form bound to `manager`."""
        return FormController(
            manager,
            create_model=self.create_model,
            update_model=self.update_model,
            rules=self.rules,
            defaults=self.defaults,
            write_only=self.write_only,
            transient=self.transient,
        )


# Users and admins share the account form; only admins confirm the password
ACCOUNT_RULES: Dict[str, Sequence[FieldRule]] = {
    "first_name": [required("First name is required")],
    "last_name": [required("Last name is required")],
    "email": [required("Email is required"), email()],
    "contact_number": [required("Contact number is required"), phone()],
    "address": [required("Address is required")],
    "password": [
        required("Password is required", on=[CREATE]),
        min_length(6, "Password must be at least 6 characters", on=[CREATE]),
        min_length(6, "Password must be at least 6 characters", allow_blank=True, on=[EDIT]),
    ],
}

ADMIN_RULES: Dict[str, Sequence[FieldRule]] = {
    **ACCOUNT_RULES,
    "confirm_password": [matches("password")],
}

USERS = ResourceDefinition(
    name="users",
    client=lambda clients: clients.users,
    create_model=UserCreate,
    update_model=UserUpdate,
    search_fields=("first_name", "last_name", "email", "address", "contact_number"),
    rules=ACCOUNT_RULES,
    write_only=("password",),
    transient=("confirm_password",),
)

ADMINS = ResourceDefinition(
    name="admins",
    client=lambda clients: clients.admins,
    create_model=UserCreate,
    update_model=UserUpdate,
    search_fields=("first_name", "last_name", "email"),
    rules=ADMIN_RULES,
    write_only=("password",),
    transient=("confirm_password",),
)

HOUSES = ResourceDefinition(
    name="houses",
    client=lambda clients: clients.houses,
    create_model=HouseCreate,
    update_model=HouseUpdate,
    search_fields=("address", "owner_name", "id", "property_type"),
    filter_field="status",
    filter_values=[status.value for status in RegistrationStatus],
    rules={
        "address": [required("Property address is required")],
        "owner_name": [required("Owner name is required")],
        "owner_phone": [required("Owner phone is required"), phone()],
        "owner_email": [email()],
        "property_type": [one_of(list(HousePropertyType), "Please choose a property type")],
        "bedrooms": [number(minimum=0, maximum=50)],
        "bathrooms": [number(minimum=0, maximum=50)],
        "area": [number(minimum=0)],
        "year_built": [number(minimum=1800, maximum=2100)],
    },
    defaults={
        "property_type": HousePropertyType.SINGLE_FAMILY_HOME.value,
        "status": RegistrationStatus.PENDING.value,
        "amenities": [],
        "photos": [],
    },
    has_lifecycle=True,
)

LISTINGS = ResourceDefinition(
    name="listings",
    client=lambda clients: clients.listings,
    create_model=ListingCreate,
    update_model=ListingUpdate,
    search_fields=("title", "location"),
    filter_field="type",
    filter_values=[listing_type.value for listing_type in ListingType],
    rules={
        "title": [required("Title is required")],
        "location": [required("Location is required")],
        "price": [required("Price is required", on=[CREATE]), number(minimum=0)],
        "bedrooms": [number(minimum=0, maximum=50)],
        "bathrooms": [number(minimum=0, maximum=50)],
        "area": [number(minimum=0)],
        "type": [one_of(list(ListingType), "Please choose a listing type")],
    },
    defaults={
        "type": ListingType.APARTMENT.value,
        "bedrooms": 0,
        "bathrooms": 0,
        "area": 0,
        "user": {"name": "", "email": "", "phone": ""},
    },
)

REPORTS = ResourceDefinition(
    name="reports",
    client=lambda clients: clients.reports,
    create_model=ReportCreate,
    update_model=ReportUpdate,
    search_fields=("title", "description", "document.name"),
    filter_field="file_kind",
    filter_values=[name.lower() for name in DOCUMENT_TYPE_NAMES.values()],
    rules={
        "title": [required("Title is required")],
        "description": [required("Description is required")],
        "user_id": [required("User is required", on=[CREATE])],
        "document": [required("Please select a file", on=[CREATE])],
    },
)

RESOURCES: Dict[str, ResourceDefinition] = {
    definition.name: definition
    for definition in (USERS, ADMINS, HOUSES, LISTINGS, REPORTS)
}


def get_resource(name: str) -> ResourceDefinition:
    """Look up a resource definition by collection name."""
    try:
        return RESOURCES[name]
    except KeyError:
        raise KeyError(f"Unknown resource '{name}'")
