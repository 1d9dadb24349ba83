"""
End-to-end tests of the console API against the fake housing backend.
Tests complete request/response cycles through routers, services and clients.
"""

import json

from fastapi import status
from fastapi.testclient import TestClient

from housing_admin.utils.session import TokenRole, TokenStore
from tests.conftest import (
    FakeBackend,
    HouseFactory,
    ListingFactory,
    ReportFactory,
    UserFactory,
    make_image_bytes,
    make_token
)


API = "/api/v1"


def _png(name="photo.png"):
    return ("photos", (name, make_image_bytes(), "image/png"))


class TestHealthEndpoints:
    """Test root and health endpoints."""

    def test_root(self, api_client: TestClient):
        response = api_client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["api_prefix"] == API

    def test_health_reaches_backend(self, api_client: TestClient):
        response = api_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["backend"] == "reachable"

    def test_request_id_header(self, api_client: TestClient):
        response = api_client.get("/")

        assert len(response.headers["X-Request-ID"]) == 8
        assert response.headers["X-Processing-Time"].endswith("s")


class TestAuthEndpoints:
    """Test login, logout, signup and session."""

    def test_login_stores_token(self, api_client: TestClient, fake_backend: FakeBackend, token_store: TokenStore):
        fake_backend.seed("admin_route", {"_id": "admin-5", "email": "root@example.com", "password": "secret1"})

        response = api_client.post(f"{API}/auth/login", json={"email": "root@example.com", "password": "secret1"})

        assert response.status_code == status.HTTP_200_OK
        token = response.json()["token"]
        assert token_store.get(TokenRole.ADMIN.storage_key) == token

        session = api_client.get(f"{API}/auth/session").json()
        assert session["authenticated"] is True
        assert session["subject"] == "admin-5"

    def test_login_failure_passes_backend_error(self, api_client: TestClient):
        response = api_client.post(f"{API}/auth/login", json={"email": "root@example.com", "password": "wrong"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"message": "Invalid email or password"}

    def test_logout(self, api_client: TestClient, token_store: TokenStore):
        response = api_client.post(f"{API}/auth/logout")

        assert response.status_code == status.HTTP_200_OK
        assert token_store.get(TokenRole.ADMIN.storage_key) is None
        assert api_client.get(f"{API}/auth/session").json()["authenticated"] is False

    def test_signup(self, api_client: TestClient, fake_backend: FakeBackend):
        form = UserFactory.create_user_form(first_name="Root", email="root@example.com")

        response = api_client.post(f"{API}/auth/signup", json=form)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["firstName"] == "Root"
        assert "confirmPassword" not in fake_backend.calls_to("admin_route", "signup")[0].json

    def test_signup_password_mismatch(self, api_client: TestClient, fake_backend: FakeBackend):
        form = UserFactory.create_user_form(confirm_password="different")

        response = api_client.post(f"{API}/auth/signup", json=form)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        fields = [detail["field"] for detail in response.json()["error"]["details"]]
        assert fields == ["confirm_password"]
        assert fake_backend.calls == []

    def test_bearer_header_overrides_stored_token(self, api_client: TestClient, fake_backend: FakeBackend):
        api_client.get(f"{API}/users", headers={"Authorization": "Bearer from-header"})

        assert fake_backend.calls[0].authorization == "Bearer from-header"


class TestUserEndpoints:
    """Test user management endpoints."""

    def test_list_with_search(self, api_client: TestClient, fake_backend: FakeBackend):
        fake_backend.seed("user_route", UserFactory.create_user_data(first_name="Jane", last_name="Doe"))
        fake_backend.seed("user_route", UserFactory.create_user_data(first_name="Paul", last_name="Smith"))

        response = api_client.get(f"{API}/users", params={"search": "doe"})

        data = response.json()
        assert response.status_code == status.HTTP_200_OK
        assert data["total"] == 2
        assert data["visible"] == 1
        assert data["items"][0]["firstName"] == "Jane"

    def test_create_user(self, api_client: TestClient, fake_backend: FakeBackend):
        form = UserFactory.create_user_form(first_name="Jane", last_name="Doe", email="jane@x.com")

        response = api_client.post(f"{API}/users", json=form)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["id"]
        assert "password" not in response.json()
        assert len(fake_backend.calls_to("user_route", "create")) == 1

    def test_create_user_without_confirmation(self, api_client: TestClient, fake_backend: FakeBackend):
        response = api_client.post(f"{API}/users", json={
            "firstName": "Jane",
            "lastName": "Doe",
            "email": "jane@x.com",
            "contactNumber": "0771234567",
            "address": "12 Main St",
            "password": "secret1",
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["firstName"] == "Jane"
        assert len(fake_backend.calls_to("user_route", "create")) == 1

    def test_create_user_missing_fields(self, api_client: TestClient, fake_backend: FakeBackend):
        """Empty required fields: 422 naming each field, no backend call."""
        response = api_client.post(f"{API}/users", json={"firstName": "Jane"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        fields = {detail["field"] for detail in response.json()["error"]["details"]}
        assert fields == {"last_name", "email", "contact_number", "address", "password"}
        assert fake_backend.calls == []

    def test_update_user_blank_password(self, api_client: TestClient, fake_backend: FakeBackend):
        record = fake_backend.seed("user_route", UserFactory.create_user_data())

        response = api_client.put(f"{API}/users/{record['_id']}", json={"address": "5 New Road", "password": ""})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["address"] == "5 New Road"
        assert "password" not in fake_backend.calls_to("user_route", "update")[0].json

    def test_delete_requires_confirm(self, api_client: TestClient, fake_backend: FakeBackend):
        record = fake_backend.seed("user_route", UserFactory.create_user_data())

        response = api_client.delete(f"{API}/users/{record['_id']}")

        assert response.status_code == status.HTTP_428_PRECONDITION_REQUIRED
        assert response.json()["error"]["code"] == "CONFIRMATION_REQUIRED"
        assert fake_backend.calls_to("user_route", "delete") == []

        response = api_client.delete(f"{API}/users/{record['_id']}", params={"confirm": "true"})
        assert response.status_code == status.HTTP_200_OK
        assert record["_id"] not in fake_backend.collections["user_route"]

    def test_get_missing_user(self, api_client: TestClient):
        response = api_client.get(f"{API}/users/nope")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"message": "Record not found"}

    def test_user_houses_and_reports(self, api_client: TestClient, fake_backend: FakeBackend):
        fake_backend.seed("housing_route", HouseFactory.create_house_data(user_id="user-42"))
        fake_backend.seed("reports_route", ReportFactory.create_report_data(user_id="user-42"))

        houses = api_client.get(f"{API}/users/user-42/houses").json()
        reports = api_client.get(f"{API}/users/user-42/reports").json()

        assert len(houses) == 1
        assert reports[0]["document"]["fileType"] == "application/pdf"


class TestAdminEndpoints:
    """Test admin accounts and the profile."""

    def _seed_current_admin(self, fake_backend: FakeBackend):
        return fake_backend.seed("admin_route", {
            "_id": "admin-1",
            **UserFactory.create_user_data(first_name="Ada", email="ada@example.com"),
            "password": "secret1",
        })

    def test_profile(self, api_client: TestClient, fake_backend: FakeBackend):
        self._seed_current_admin(fake_backend)

        response = api_client.get(f"{API}/admins/me")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["firstName"] == "Ada"

    def test_profile_requires_identity(self, api_client: TestClient, token_store: TokenStore):
        token_store.remove(TokenRole.ADMIN.storage_key)

        response = api_client.get(f"{API}/admins/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_change_password(self, api_client: TestClient, fake_backend: FakeBackend):
        self._seed_current_admin(fake_backend)

        response = api_client.put(f"{API}/admins/me/password", json={
            "currentPassword": "secret1",
            "newPassword": "secret2",
            "confirmPassword": "secret2",
        })

        assert response.status_code == status.HTTP_200_OK
        assert fake_backend.calls_to("admin_route", "update")[0].json == {"password": "secret2"}

    def test_change_password_wrong_current(self, api_client: TestClient, fake_backend: FakeBackend):
        self._seed_current_admin(fake_backend)

        response = api_client.put(f"{API}/admins/me/password", json={
            "currentPassword": "wrong",
            "newPassword": "secret2",
            "confirmPassword": "secret2",
        })

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error"]["details"][0]["field"] == "current_password"
        assert fake_backend.calls_to("admin_route", "update") == []

    def test_change_password_keeps_session_token(self, api_client: TestClient, fake_backend: FakeBackend, token_store: TokenStore):
        """Checking the current password must not replace the console's token."""
        self._seed_current_admin(fake_backend)
        before = make_token("admin-1", expires_in=7200)
        token_store.set(TokenRole.ADMIN.storage_key, before)

        response = api_client.put(
            f"{API}/admins/me/password",
            json={"currentPassword": "secret1", "newPassword": "secret2", "confirmPassword": "secret2"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert token_store.get(TokenRole.ADMIN.storage_key) == before

    def test_list_admins(self, api_client: TestClient, fake_backend: FakeBackend):
        self._seed_current_admin(fake_backend)

        data = api_client.get(f"{API}/admins").json()

        assert data["total"] == 1
        assert "password" not in data["items"][0]


class TestHouseEndpoints:
    """Test registration endpoints."""

    def test_register_with_photos(self, api_client: TestClient, fake_backend: FakeBackend):
        """Three photos with one bad: saved with two, failure reported."""
        files = [
            _png("a.png"),
            ("photos", ("b.png", b"broken", "image/png")),
            _png("c.png"),
        ]

        response = api_client.post(
            f"{API}/houses",
            data={"payload": json.dumps(HouseFactory.create_house_data())},
            files=files
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert [photo["name"] for photo in body["house"]["photos"]] == ["a.png", "c.png"]
        assert [failure["filename"] for failure in body["failedUploads"]] == ["b.png"]

    def test_register_invalid_payload(self, api_client: TestClient, fake_backend: FakeBackend):
        response = api_client.post(f"{API}/houses", data={"payload": "[]"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert fake_backend.calls == []

    def test_list_filter_by_status(self, api_client: TestClient, fake_backend: FakeBackend):
        fake_backend.seed("housing_route", HouseFactory.create_house_data(status="Pending"))
        fake_backend.seed("housing_route", HouseFactory.create_house_data(status="Approved"))

        data = api_client.get(f"{API}/houses", params={"status": "approved"}).json()

        assert data["visible"] == 1
        assert data["counts"]["Pending"] == 1

    def test_reject_pending_registration(self, api_client: TestClient, fake_backend: FakeBackend):
        """One update call with only the new status."""
        record = fake_backend.seed("housing_route", HouseFactory.create_house_data(status="Pending"))

        response = api_client.put(f"{API}/houses/{record['_id']}/status", json={"status": "Rejected"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "Rejected"
        updates = fake_backend.calls_to("housing_route", "update")
        assert len(updates) == 1
        assert updates[0].json == {"status": "Rejected"}

    def test_unknown_status_rejected(self, api_client: TestClient, fake_backend: FakeBackend):
        record = fake_backend.seed("housing_route", HouseFactory.create_house_data())

        response = api_client.put(f"{API}/houses/{record['_id']}/status", json={"status": "Archived"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert fake_backend.calls_to("housing_route", "update") == []

    def test_detail(self, api_client: TestClient, fake_backend: FakeBackend):
        record = fake_backend.seed("housing_route", HouseFactory.create_house_data())

        data = api_client.get(f"{API}/houses/{record['_id']}/detail").json()

        assert data["owner"]["name"] == "Alice Owner"
        assert data["management"]["status"] == "Pending"

    def test_stats(self, api_client: TestClient, fake_backend: FakeBackend):
        fake_backend.seed("housing_route", HouseFactory.create_house_data())

        assert api_client.get(f"{API}/houses/stats").json()["All"] == 1

    def test_preview_photos(self, api_client: TestClient, fake_backend: FakeBackend):
        response = api_client.post(f"{API}/houses/photos/preview", files=[_png()])

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["previews"][0].startswith("data:image/png;base64,")
        assert fake_backend.storage_requests == []

    def test_backend_failure_passed_through(self, api_client: TestClient, fake_backend: FakeBackend):
        fake_backend.fail("housing_route", "getall", 500, {"message": "Database offline"})

        response = api_client.get(f"{API}/houses")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"message": "Database offline"}


class TestListingEndpoints:
    """Test property listing endpoints."""

    def test_create_listing_with_image(self, api_client: TestClient, fake_backend: FakeBackend):
        response = api_client.post(
            f"{API}/listings",
            data={"payload": json.dumps(ListingFactory.create_listing_data())},
            files={"image": ("cover.png", make_image_bytes(), "image/png")}
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert "/property-photos/Modern_Downtown_Apartment/listing_" in response.json()["image"]

    def test_filter_by_type(self, api_client: TestClient, fake_backend: FakeBackend):
        fake_backend.seed("property_listings_route", ListingFactory.create_listing_data(listing_type="Condo"))
        fake_backend.seed("property_listings_route", ListingFactory.create_listing_data(listing_type="House"))

        data = api_client.get(f"{API}/listings", params={"type": "condo"}).json()

        assert data["visible"] == 1
        assert data["items"][0]["type"] == "Condo"

    def test_update_listing(self, api_client: TestClient, fake_backend: FakeBackend):
        record = fake_backend.seed("property_listings_route", ListingFactory.create_listing_data())

        response = api_client.put(f"{API}/listings/{record['_id']}", data={"payload": json.dumps({"price": 999})})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["price"] == 999


class TestReportEndpoints:
    """Test report endpoints."""

    def test_upload_report(self, api_client: TestClient, fake_backend: FakeBackend):
        response = api_client.post(
            f"{API}/reports",
            data={"description": "Annual audit", "userId": "user-1"},
            files={"file": ("audit.pdf", b"%PDF-1.4", "application/pdf")}
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["title"] == "audit.pdf"
        assert response.json()["document"]["fileType"] == "application/pdf"

    def test_upload_unsupported_type(self, api_client: TestClient, fake_backend: FakeBackend):
        response = api_client.post(
            f"{API}/reports",
            data={"description": "Notes", "userId": "user-1"},
            files={"file": ("notes.txt", b"hello", "text/plain")}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert fake_backend.storage_requests == []

    def test_filter_by_file_type(self, api_client: TestClient, fake_backend: FakeBackend):
        fake_backend.seed("reports_route", ReportFactory.create_report_data(title="A"))
        fake_backend.seed("reports_route", ReportFactory.create_report_data(
            title="B", file_type="application/msword", name="b.doc"
        ))

        data = api_client.get(f"{API}/reports", params={"file_type": "doc"}).json()

        assert [item["title"] for item in data["items"]] == ["B"]
