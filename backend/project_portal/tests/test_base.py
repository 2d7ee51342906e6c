"""
Base test utilities and common patterns for backend testing.

Provides assertion helpers shared by the API test classes.
"""
from typing import Dict, Optional
from fastapi import status


class BaseAPITest:
    """Base class for API endpoint tests."""

    def assert_success_response(self, response, expected_status: int = status.HTTP_200_OK):
        """Assert that response indicates success."""
        assert response.status_code == expected_status, response.text
        assert response.json() is not None

    def assert_error_response(self, response, expected_status: int, expected_error: Optional[str] = None):
        """Assert that response indicates an error."""
        assert response.status_code == expected_status, response.text
        if expected_error:
            response_data = response.json()
            assert "detail" in response_data
            assert expected_error in response_data["detail"]

    def assert_validation_error(self, response, field_name: Optional[str] = None):
        """Assert that response indicates a validation error."""
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        if field_name:
            errors = response.json()["detail"]
            field_errors = [error for error in errors if error.get("loc") and field_name in error["loc"]]
            assert len(field_errors) > 0

    def assert_unauthorized(self, response, expected_error: Optional[str] = None):
        """Assert that response indicates unauthorized access."""
        self.assert_error_response(response, status.HTTP_401_UNAUTHORIZED, expected_error)

    def assert_forbidden(self, response, expected_error: Optional[str] = None):
        """Assert that response indicates forbidden access."""
        self.assert_error_response(response, status.HTTP_403_FORBIDDEN, expected_error)

    def assert_not_found(self, response, expected_error: Optional[str] = None):
        """Assert that response indicates resource not found."""
        self.assert_error_response(response, status.HTTP_404_NOT_FOUND, expected_error)

    def assert_conflict(self, response):
        """Assert that response indicates a conflict."""
        self.assert_error_response(response, status.HTTP_409_CONFLICT)


def bearer(token: str) -> Dict[str, str]:
    """Authorization header for a token."""
    return {"Authorization": f"Bearer {token}"}
