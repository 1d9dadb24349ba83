"""
Test configuration and fixtures for the housing admin console.
Provides an in-memory fake of the housing backend and object storage,
test data factories, and common test utilities.
"""

import pytest
import io
import json
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httpx
from fastapi.testclient import TestClient
from jose import jwt
from PIL import Image

from housing_admin.clients import ConsoleClients, build_clients
from housing_admin.config import Settings
from housing_admin.main import app
from housing_admin.utils.dependencies import get_app_settings
from housing_admin.utils.file_utils import FileUpload
from housing_admin.utils.session import SessionContext, TokenRole, TokenStore


BACKEND_URL = "https://backend.test"
STORAGE_URL = "https://storage.test"
TOKEN_SECRET = "test-secret"

ROUTES = ("admin_route", "user_route", "housing_route", "property_listings_route", "reports_route")

# How each route wraps its getall response
LIST_ENVELOPES = {
    "admin_route": "admins",
    "user_route": "users",
    "housing_route": "houses",
    "property_listings_route": None,
    "reports_route": "data",
}


def make_token(subject: str, expires_in: int = 3600) -> str:
    """Signed JWT like the ones the backend issues."""
    return jwt.encode({"sub": subject, "exp": int(time.time()) + expires_in}, TOKEN_SECRET, algorithm="HS256")


@dataclass
class BackendCall:
    """One request received by the fake backend."""

    method: str
    route: str
    action: str
    id: Optional[str]
    json: Any
    authorization: Optional[str]


class FakeBackend:
    """
    In-memory stand-in for the housing backend and the storage service,
    served through httpx.MockTransport. Records every call it receives.
    """

    def __init__(self):
        self.collections: Dict[str, Dict[str, dict]] = {route: {} for route in ROUTES}
        self.calls: List[BackendCall] = []
        self.failures: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.echo_updates = True
        self.storage: Dict[str, bytes] = {}
        self.storage_requests: List[httpx.Request] = []
        self.rejected_storage_names: List[str] = []
        self._counter = 0

    # Test setup helpers

    def seed(self, route: str, record: Dict[str, Any]) -> Dict[str, Any]:
        record = dict(record)
        record.setdefault("_id", self._next_id(route))
        self.collections[route][record["_id"]] = record
        return record

    def fail(self, route: str, action: str, status_code: int = 500, body: Any = None) -> None:
        """Make every `action` call on `route` answer with an error."""
        self.failures[(route, action)] = (status_code, body)

    def calls_to(self, route: str, action: Optional[str] = None) -> List[BackendCall]:
        return [
            call for call in self.calls
            if call.route == route and (action is None or call.action == action)
        ]

    def _next_id(self, route: str) -> str:
        self._counter += 1
        return f"{route.split('_')[0]}-{self._counter}"

    # Transport

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.startswith("/storage/v1/object/"):
            return self._handle_storage(request)
        if not path.startswith("/api/v1/"):
            return httpx.Response(200, json={"status": "ok"})

        parts = path[len("/api/v1/"):].split("/")
        route, action = parts[0], parts[1]
        record_id = parts[2] if len(parts) > 2 else None
        body = json.loads(request.content) if request.content else None
        self.calls.append(BackendCall(
            method=request.method,
            route=route,
            action=action,
            id=record_id,
            json=body,
            authorization=request.headers.get("authorization"),
        ))

        if (route, action) in self.failures:
            status_code, error_body = self.failures[(route, action)]
            if error_body is None:
                return httpx.Response(status_code)
            if isinstance(error_body, str):
                return httpx.Response(status_code, text=error_body)
            return httpx.Response(status_code, json=error_body)

        collection = self.collections[route]

        if action == "getall":
            items = list(collection.values())
            key = LIST_ENVELOPES[route]
            return httpx.Response(200, json=items if key is None else {key: items})

        if action == "get":
            if record_id not in collection:
                return httpx.Response(404, json={"message": "Record not found"})
            return httpx.Response(200, json={"data": collection[record_id]})

        if action == "getbyuser":
            items = [r for r in collection.values() if r.get("userId") == record_id]
            return httpx.Response(200, json=items)

        if action in ("create", "signup"):
            record = self.seed(route, {key: value for key, value in body.items() if key != "password"})
            if action == "signup":
                record["password"] = body.get("password")
                return httpx.Response(201, json={"message": "Account created", "admin": _public(record)})
            return httpx.Response(201, json=record)

        if action == "update":
            if record_id not in collection:
                return httpx.Response(404, json={"message": "Record not found"})
            collection[record_id].update(body)
            if self.echo_updates:
                return httpx.Response(200, json={"data": _public(collection[record_id])})
            return httpx.Response(200, json={"message": "Updated successfully"})

        if action == "delete":
            if record_id not in collection:
                return httpx.Response(404, json={"message": "Record not found"})
            del collection[record_id]
            return httpx.Response(200, json={"message": "Deleted successfully"})

        if action == "login":
            for record in collection.values():
                if record.get("email") == body.get("email") and record.get("password") == body.get("password"):
                    return httpx.Response(200, json={"token": make_token(record["_id"]), "message": "Login successful"})
            return httpx.Response(401, json={"message": "Invalid email or password"})

        return httpx.Response(404, json={"message": "Unknown action"})

    def _handle_storage(self, request: httpx.Request) -> httpx.Response:
        self.storage_requests.append(request)
        key = request.url.path[len("/storage/v1/object/"):]
        if any(name in key for name in self.rejected_storage_names):
            return httpx.Response(400, json={"message": "Storage rejected the object"})
        self.storage[key] = request.content
        return httpx.Response(200, json={"Key": key})


def _public(record: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in record.items() if key != "password"}


# Core fixtures
@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing at the fake backend and storage."""
    return Settings(
        environment="testing",
        backend_url=BACKEND_URL,
        storage_url=STORAGE_URL,
        storage_api_key="storage-key",
    )


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def http_client(fake_backend: FakeBackend) -> httpx.AsyncClient:
    """Async HTTP client whose requests are answered by the fake backend."""
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_backend.handler))


@pytest.fixture
def admin_token() -> str:
    return make_token("admin-1")


@pytest.fixture
def token_store(admin_token: str) -> TokenStore:
    return TokenStore({TokenRole.ADMIN.storage_key: admin_token})


@pytest.fixture
def session(token_store: TokenStore) -> SessionContext:
    return SessionContext(token_store, TokenRole.ADMIN)


@pytest.fixture
def clients(http_client: httpx.AsyncClient, test_settings: Settings, session: SessionContext) -> ConsoleClients:
    return build_clients(http_client, test_settings, session)


@pytest.fixture
def api_client(http_client: httpx.AsyncClient, token_store: TokenStore, test_settings: Settings) -> TestClient:
    """Console API client wired to the fake backend."""
    app.state.http_client = http_client
    app.state.token_store = token_store
    app.dependency_overrides[get_app_settings] = lambda: test_settings
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


# Test data factories
class UserFactory:
    """Factory for user records and forms."""

    @staticmethod
    def create_user_data(
        first_name: str = "Test",
        last_name: str = "User",
        email: str = None,
        contact_number: str = "0771234567",
        address: str = "1 Test Street"
    ) -> dict:
        """Create a backend-shaped user record."""
        return {
            "firstName": first_name,
            "lastName": last_name,
            "email": email or f"test{uuid.uuid4().hex[:8]}@example.com",
            "contactNumber": contact_number,
            "address": address,
        }

    @staticmethod
    def create_user_form(password: str = "secret123", confirm_password: str = None, **overrides) -> dict:
        """Create a user form as submitted by the console."""
        data = UserFactory.create_user_data(**overrides)
        data["password"] = password
        data["confirmPassword"] = password if confirm_password is None else confirm_password
        return data


class HouseFactory:
    """Factory for house registration records."""

    @staticmethod
    def create_house_data(
        address: str = "12 Main St",
        owner_name: str = "Alice Owner",
        owner_phone: str = "0771234567",
        status: str = "Pending",
        property_type: str = "Apartment",
        user_id: str = "user-1",
        **extra
    ) -> dict:
        data = {
            "userId": user_id,
            "propertyType": property_type,
            "address": address,
            "ownerName": owner_name,
            "ownerPhone": owner_phone,
            "bedrooms": 2,
            "bathrooms": 1,
            "amenities": ["Garden"],
            "photos": [],
            "status": status,
        }
        data.update(extra)
        return data


class ListingFactory:
    """Factory for property listing records."""

    @staticmethod
    def create_listing_data(
        title: str = "Modern Downtown Apartment",
        location: str = "Downtown",
        price: float = 1200,
        listing_type: str = "Apartment"
    ) -> dict:
        return {
            "title": title,
            "price": price,
            "location": location,
            "bedrooms": 2,
            "bathrooms": 1,
            "area": 80,
            "type": listing_type,
            "user": {"name": "Agent Smith", "email": "agent@example.com", "phone": "0779999999"},
        }


class ReportFactory:
    """Factory for report records."""

    @staticmethod
    def create_report_data(
        title: str = "Quarterly Inspection",
        description: str = "Inspection results",
        user_id: str = "user-1",
        file_type: str = "application/pdf",
        name: str = "inspection.pdf"
    ) -> dict:
        return {
            "title": title,
            "description": description,
            "userId": user_id,
            "document": {"name": name, "url": f"{STORAGE_URL}/files/{name}", "fileType": file_type},
        }


def make_image_bytes(image_format: str = "PNG", size: Tuple[int, int] = (32, 32)) -> bytes:
    """Small real image encoded with Pillow."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(120, 160, 200)).save(buffer, format=image_format)
    return buffer.getvalue()


def make_image_upload(filename: str = "photo.png", image_format: str = "PNG", content_type: str = "image/png") -> FileUpload:
    return FileUpload(filename=filename, content_type=content_type, content=make_image_bytes(image_format))
