import pytest
import requests
from unittest.mock import Mock
from decimal import Decimal
from datetime import date

from django.utils import timezone

from apps.finance.infrastructure.providers.freecurrency import (
    FreeCurrencyApiCatalogProvider,
    FreeCurrencyApiProvider,
)


@pytest.fixture(autouse=True)
def api_settings(settings):
    settings.FREECURRENCY_API_KEY = "test-key"
    settings.FREECURRENCY_URL = "https://api.example.test/v1"
    settings.EXCHANGE_RATE_TIMEOUT = 5


@pytest.fixture
def provider():
    return FreeCurrencyApiProvider()


@pytest.fixture
def mock_requests_get(mocker):
    return mocker.patch("requests.get")


def json_response(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def test_historical_rate_uses_historical_endpoint(provider, mock_requests_get):
    """
    Test that a past date calls /historical with the date and parses the
    date-keyed payload.
    """
    mock_requests_get.return_value = json_response({"data": {"2024-01-15": {"USD": 1.08}}})

    rate = provider.get_exchange_rate_data("EUR", "USD", date(2024, 1, 15))

    assert rate == Decimal("1.08")
    url = mock_requests_get.call_args[0][0]
    params = mock_requests_get.call_args[1]["params"]
    assert url == "https://api.example.test/v1/historical"
    assert params["date"] == "2024-01-15"
    assert params["base_currency"] == "EUR"
    assert params["currencies"] == "USD"
    assert params["apikey"] == "test-key"
    assert mock_requests_get.call_args[1]["timeout"] == 5


def test_today_uses_latest_endpoint(provider, mock_requests_get):
    """
    Test that today's date calls /latest without a date parameter.
    """
    mock_requests_get.return_value = json_response({"data": {"USD": 1.09}})

    rate = provider.get_exchange_rate_data("EUR", "USD", timezone.localdate())

    assert rate == Decimal("1.09")
    assert mock_requests_get.call_args[0][0].endswith("/latest")
    assert "date" not in mock_requests_get.call_args[1]["params"]


def test_missing_api_key_returns_none(provider, mock_requests_get, settings):
    """
    Test that no request is made without an API key.
    """
    settings.FREECURRENCY_API_KEY = ""

    assert provider.get_exchange_rate_data("EUR", "USD", date(2024, 1, 15)) is None
    mock_requests_get.assert_not_called()


def test_timeout_returns_none(provider, mock_requests_get):
    """
    Test that a timeout is reported as a missing rate.
    """
    mock_requests_get.side_effect = requests.exceptions.Timeout()

    assert provider.get_exchange_rate_data("EUR", "USD", date(2024, 1, 15)) is None


def test_http_error_returns_none(provider, mock_requests_get):
    """
    Test that an HTTP error status is reported as a missing rate.
    """
    response = Mock()
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("429 Too Many Requests")
    mock_requests_get.return_value = response

    assert provider.get_exchange_rate_data("EUR", "USD", date(2024, 1, 15)) is None


def test_missing_currency_in_payload_returns_none(provider, mock_requests_get):
    """
    Test that get_exchange_rate_data handles missing keys in response gracefully.
    """
    mock_requests_get.return_value = json_response({"data": {"2024-01-15": {"GBP": 0.85}}})

    assert provider.get_exchange_rate_data("EUR", "USD", date(2024, 1, 15)) is None


def test_catalog_parses_currencies(mock_requests_get):
    """
    Test that the catalog provider maps /currencies entries to CurrencyInfo.
    """
    mock_requests_get.return_value = json_response({
        "data": {
            "EUR": {"code": "EUR", "name": "Euro", "symbol": "€"},
            "USD": {"code": "USD", "name": "US Dollar", "symbol": "$"},
        }
    })

    currencies = FreeCurrencyApiCatalogProvider().get_currencies()

    assert {c.code for c in currencies} == {"EUR", "USD"}
    assert mock_requests_get.call_args[0][0] == "https://api.example.test/v1/currencies"


def test_catalog_failure_returns_none(mock_requests_get):
    mock_requests_get.side_effect = requests.exceptions.ConnectionError()

    assert FreeCurrencyApiCatalogProvider().get_currencies() is None
