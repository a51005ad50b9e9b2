import pytest
from django.http import Http404
from rest_framework import exceptions, status

from apps.finance.api.exception_handler import PROBLEM_CONTENT_TYPE, problem_details_exception_handler
from apps.finance.domain.exceptions import (
    ConflictError,
    ExchangeRateUnavailableError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)


def handle(exc):
    return problem_details_exception_handler(exc, {"view": None})


class TestProblemDetailsExceptionHandler:
    """Tests for problem_details_exception_handler."""

    def test_validation_error_lists_fields(self):
        response = handle(ValidationError({"name": ["Name is required"], "kind": ["Operation kind is required"]}))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.content_type == PROBLEM_CONTENT_TYPE
        assert response.data["title"] == "One or more validation errors occurred"
        assert response.data["errors"] == {"name": ["Name is required"], "kind": ["Operation kind is required"]}

    def test_domain_errors_map_to_status(self):
        assert handle(NotFoundError("Wallet with id 1 was not found")).status_code == status.HTTP_404_NOT_FOUND
        assert handle(ConflictError("Username 'alice' is already taken")).status_code == status.HTTP_409_CONFLICT
        assert handle(UnauthorizedError("Invalid username or password")).status_code == status.HTTP_401_UNAUTHORIZED

    def test_domain_error_body(self):
        response = handle(NotFoundError("Wallet with id 1 was not found"))

        assert response.data == {
            "type": "https://tools.ietf.org/html/rfc9110#section-15.5.5",
            "title": "Resource not found",
            "status": 404,
            "detail": "Wallet with id 1 was not found",
        }

    def test_drf_validation_error_is_normalized(self):
        response = handle(exceptions.ValidationError({"page": "A valid integer is required."}))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["errors"] == {"page": ["A valid integer is required."]}

    def test_http404(self):
        response = handle(Http404())

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["title"] == "Resource not found"

    def test_unexpected_error_is_logged_and_hidden(self, mocker):
        mock_logger = mocker.patch("apps.finance.api.exception_handler.logger")

        response = handle(ExchangeRateUnavailableError("Exchange rate EUR/USD on 2024-01-15 is unavailable."))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data["detail"] == "An unexpected error occurred. Please try again later."
        assert "EUR/USD" not in str(response.data)
        mock_logger.exception.assert_called_once()


@pytest.mark.django_db
class TestUnknownRoutes:
    """Paths under /api/ that match no endpoint."""

    def test_unknown_path_is_problem_details(self, api_client):
        response = api_client.get("/api/nope")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response["Content-Type"].startswith(PROBLEM_CONTENT_TYPE)
        assert response.json()["title"] == "Resource not found"

    def test_unknown_path_without_token_is_not_401(self, api_client):
        response = api_client.post("/api/wallets/not-a-uuid/operations", {}, format="json")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "No endpoint matches POST /api/wallets/not-a-uuid/operations"
