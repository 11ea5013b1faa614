"""
Unit tests for the error taxonomy.
"""

from admit_portal.core.errors import (
    GENERIC_ERROR_MESSAGE,
    AuthRequiredError,
    NotFoundError,
    StorageError,
    UploadError,
    ValidationError,
)


class TestToResult:
    """Tests for PortalError.to_result."""

    def test_validation_error(self):
        result = ValidationError("Bad input").to_result()

        assert result.kind == "validation"
        assert result.message == "Bad input"
        assert result.status_code == 400

    def test_client_errors_keep_message_when_hiding(self):
        result = NotFoundError("Application not found").to_result(hide_internal=True)
        assert result.message == "Application not found"

    def test_server_errors_hidden_when_requested(self):
        assert StorageError("db exploded").to_result(hide_internal=True).message == (
            GENERIC_ERROR_MESSAGE
        )
        assert UploadError().to_result(hide_internal=True).message == GENERIC_ERROR_MESSAGE

    def test_server_errors_shown_otherwise(self):
        assert StorageError("db exploded").to_result().message == "db exploded"

    def test_auth_required_points_to_login(self):
        error = AuthRequiredError()
        assert error.login_url == "/login"
        assert error.to_result().kind == "auth"
