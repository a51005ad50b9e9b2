import json
from datetime import date
from decimal import Decimal
from unittest.mock import Mock

import pytest
import requests

from client import ApiResult, FinanceTrackerClient, PagedResult


def make_response(status_code, body=None):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body).encode() if body is not None else b""
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    return FinanceTrackerClient("http://localhost:8000/", session=session)


class TestApiResult:
    """Tests for ApiResult.from_response."""

    def test_success_with_body(self):
        result = ApiResult.from_response(make_response(200, {"id": "abc"}))

        assert result.is_success
        assert result.value == {"id": "abc"}

    def test_no_content(self):
        result = ApiResult.from_response(make_response(204))

        assert result.is_success
        assert result.value is None

    def test_problem_details(self):
        body = {
            "title": "One or more validation errors occurred",
            "status": 400,
            "detail": "One or more validation errors occurred",
            "errors": {"name": ["Name is required"]},
        }

        result = ApiResult.from_response(make_response(400, body))

        assert not result.is_success
        assert result.status_code == 400
        assert result.general_errors == ["One or more validation errors occurred"]
        assert result.field_errors == {"name": ["Name is required"]}

    def test_body_without_detail(self):
        result = ApiResult.from_response(make_response(502))

        assert result.general_errors == ["An unexpected error occurred while processing the request."]
        assert result.field_errors == {}


class TestFinanceTrackerClient:
    """Tests for FinanceTrackerClient."""

    def test_login_stores_token(self, client, session):
        session.request.side_effect = [make_response(200, {"token": "jwt"}), make_response(200, [])]

        assert client.login("alice", "Secret1").is_success
        client.list_wallets()

        method, url = session.request.call_args.args
        assert (method, url) == ("GET", "http://localhost:8000/api/wallets")
        assert session.request.call_args.kwargs["headers"]["Authorization"] == "Bearer jwt"

    def test_failed_login_keeps_no_token(self, client, session):
        session.request.return_value = make_response(401, {"status": 401, "detail": "Invalid username or password"})

        result = client.login("alice", "wrong")

        assert result.general_errors == ["Invalid username or password"]
        assert client.token is None

    def test_unauthorized_clears_token(self, session):
        client = FinanceTrackerClient("http://api", token="expired", session=session)
        session.request.return_value = make_response(401, {"status": 401, "detail": "Invalid or expired token."})

        client.list_wallets()

        assert client.token is None

    def test_logout(self, session):
        client = FinanceTrackerClient("http://api", token="jwt", session=session)

        client.logout()

        assert client.token is None

    def test_create_operation_body(self, client, session):
        session.request.return_value = make_response(201, {"id": "op-1"})

        result = client.create_operation(
            "w-1", "t-1", Decimal("100.00"), date(2024, 1, 15), currency_original_code="EUR", note="Hotel"
        )

        assert result.value == {"id": "op-1"}
        assert session.request.call_args.args[1] == "http://localhost:8000/api/wallets/w-1/operations"
        assert session.request.call_args.kwargs["json"] == {
            "type_id": "t-1",
            "amount_original": "100.00",
            "currency_original_code": "EUR",
            "date": "2024-01-15",
            "note": "Hotel",
        }

    def test_list_operations_drops_empty_params(self, client, session):
        session.request.return_value = make_response(
            200, {"items": [{"id": "op-1"}], "page": 1, "page_size": 20, "total_count": 1, "total_pages": 1}
        )

        result = client.list_operations(date_from=date(2024, 1, 1))

        assert isinstance(result.value, PagedResult)
        assert result.value.total_count == 1
        assert session.request.call_args.kwargs["params"] == {"from": "2024-01-01", "page": 1, "page_size": 20}

    def test_period_report_params(self, client, session):
        session.request.return_value = make_response(200, {"net": "0.00"})

        client.period_report("w-1", date(2024, 3, 1), date(2024, 3, 31))

        assert session.request.call_args.kwargs["params"] == {
            "wallet_id": "w-1", "start": "2024-03-01", "end": "2024-03-31"
        }

    def test_timeout_is_passed(self, client, session):
        session.request.return_value = make_response(200, [])

        client.list_currencies()

        assert session.request.call_args.kwargs["timeout"] == 10
