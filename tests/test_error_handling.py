"""
Tests for error formatting and the custom exception classes.
"""

import json
from unittest.mock import Mock

import pytest
from fastapi import HTTPException

from housing_admin.services.error_handler import ErrorHandlerService
from housing_admin.utils.exceptions import (
    BackendError,
    ConfirmationRequiredError,
    FileSizeExceededError,
    NotFoundError,
    StatusTransitionError,
    UnauthorizedError,
    UnsupportedFileTypeError,
    ValidationError
)


def _request(request_id="req-1234", path="/api/v1/houses"):
    request = Mock()
    request.state.request_id = request_id
    request.url.path = path
    return request


class TestExceptions:
    """Test exception status codes and messages."""

    def test_not_found(self):
        error = NotFoundError("House", "h1")

        assert error.status_code == 404
        assert error.detail == "House not found with ID: h1"

    def test_unauthorized_header(self):
        error = UnauthorizedError()

        assert error.status_code == 401
        assert error.headers == {"WWW-Authenticate": "Bearer"}

    def test_confirmation_required(self):
        error = ConfirmationRequiredError("delete user")

        assert error.status_code == 428
        assert error.detail == "Confirmation required to delete user"

    def test_status_transition(self):
        error = StatusTransitionError("Approved", "Pending")

        assert error.status_code == 400
        assert error.error_code == "STATUS_TRANSITION_NOT_ALLOWED"

    def test_file_errors(self):
        assert "image/bmp" in UnsupportedFileTypeError("image/bmp", ["image/png"]).detail
        assert FileSizeExceededError(20, 10).detail.startswith("File upload error: File size 20 bytes")

    @pytest.mark.parametrize("body,message", [
        ({"message": "Email already exists"}, "Email already exists"),
        ({"error": "Bad token"}, "Bad token"),
        ("  Service down  ", "Service down"),
        ({"unexpected": True}, "Failed to update house"),
        (None, "Failed to update house"),
    ])
    def test_backend_error_message(self, body, message):
        assert BackendError("update house", 400, body).message == message


class TestErrorHandlerService:
    """Test response formatting."""

    def test_format_error_response(self):
        response = ErrorHandlerService.format_error_response(
            "NOT_FOUND", "House not found", request_id="abc"
        )

        assert response["error"]["code"] == "NOT_FOUND"
        assert response["error"]["request_id"] == "abc"
        assert response["error"]["timestamp"].endswith("Z")
        assert "details" not in response["error"]

    def test_api_exception_uses_middleware_request_id(self):
        response = ErrorHandlerService.handle_api_exception(NotFoundError("House", "h1"), _request())

        body = json.loads(response.body)
        assert response.status_code == 404
        assert body["error"]["request_id"] == "req-1234"

    def test_validation_error_has_field_details(self):
        error = ValidationError("Form validation failed", [{"field": "email", "message": "Email is required"}])

        response = ErrorHandlerService.handle_api_exception(error, _request())

        body = json.loads(response.body)
        assert response.status_code == 422
        assert body["error"]["details"] == [{"field": "email", "message": "Email is required"}]

    def test_backend_json_body_passed_through(self):
        error = BackendError("create user", 409, {"message": "Duplicate", "code": 11000})

        response = ErrorHandlerService.handle_backend_error(error, _request())

        assert response.status_code == 409
        assert json.loads(response.body) == {"message": "Duplicate", "code": 11000}

    def test_backend_text_body_passed_through(self):
        response = ErrorHandlerService.handle_backend_error(BackendError("delete house", 403, "Forbidden"))

        assert response.status_code == 403
        assert response.body == b"Forbidden"

    def test_unreachable_backend(self):
        response = ErrorHandlerService.handle_backend_error(BackendError("retrieve houses"), _request())

        body = json.loads(response.body)
        assert response.status_code == 502
        assert body["error"]["code"] == "BACKEND_ERROR"
        assert body["error"]["message"] == "Failed to retrieve houses"

    def test_request_validation_errors(self):
        errors = [{"loc": ("body", "email"), "msg": "Field required", "type": "missing"}]

        response = ErrorHandlerService.handle_validation_error(errors, _request())

        body = json.loads(response.body)
        assert response.status_code == 422
        assert body["error"]["details"] == [{"field": "email", "message": "Field required", "type": "missing"}]

    def test_http_exception(self):
        response = ErrorHandlerService.handle_http_exception(HTTPException(status_code=503, detail="Down"))

        body = json.loads(response.body)
        assert response.status_code == 503
        assert body["error"]["code"] == "HTTP_503"

    def test_unexpected_error_hides_details(self):
        response = ErrorHandlerService.handle_unexpected_error(RuntimeError("secret"), _request())

        body = json.loads(response.body)
        assert response.status_code == 500
        assert "secret" not in body["error"]["message"]

    def test_request_id_generated_without_request(self):
        assert len(ErrorHandlerService._request_id(None)) == 8
