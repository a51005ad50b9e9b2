import pytest
from decimal import Decimal
from datetime import date
from unittest.mock import patch

from apps.finance.domain.exceptions import ExchangeRateUnavailableError
from apps.finance.domain.models import CurrencyInfo, ExchangeRate
from apps.finance.domain.services import ExchangeRateService
from apps.finance.infrastructure.providers.mock import MockProvider


class TestExchangeRateService:
    """Tests for ExchangeRateService domain service."""

    def test_same_currency_returns_one_without_provider_call(self, rate_provider):
        """Test equal codes short-circuit to rate 1."""
        service = ExchangeRateService(provider=rate_provider)

        rate = service.get_exchange_rate("usd", "USD", date(2024, 1, 15))

        assert rate == Decimal("1")
        rate_provider.get_exchange_rate_data.assert_not_called()

    def test_different_currency_asks_provider_with_date(self, rate_provider):
        """Test the provider receives upper-cased codes and the valuation date."""
        service = ExchangeRateService(provider=rate_provider)

        rate = service.get_exchange_rate("eur", "usd", date(2024, 1, 15))

        assert rate == Decimal("1.08")
        rate_provider.get_exchange_rate_data.assert_called_once_with("EUR", "USD", date(2024, 1, 15))

    def test_missing_rate_raises(self, rate_provider):
        """Test a provider returning None raises ExchangeRateUnavailableError."""
        rate_provider.get_exchange_rate_data.return_value = None
        service = ExchangeRateService(provider=rate_provider)

        with pytest.raises(ExchangeRateUnavailableError):
            service.get_exchange_rate("EUR", "USD", date(2024, 1, 15))

        assert rate_provider.get_exchange_rate_data.call_count == 1

    def test_convert_amount_rounds_to_cents(self, rate_provider):
        """Test 100 EUR at 1.08 converts to 108.00 USD."""
        service = ExchangeRateService(provider=rate_provider)

        result = service.convert_amount("EUR", "USD", Decimal("100"), date(2024, 1, 15))

        assert result["converted_amount"] == Decimal("108.00")
        assert result["rate"] == Decimal("1.08")
        assert result["valuation_date"] == date(2024, 1, 15)

    def test_convert_amount_rounds_half_up(self, rate_provider):
        """Test half-cent results round up."""
        rate_provider.get_exchange_rate_data.return_value = Decimal("0.5")
        service = ExchangeRateService(provider=rate_provider)

        result = service.convert_amount("EUR", "USD", Decimal("0.05"), date(2024, 1, 15))

        assert result["converted_amount"] == Decimal("0.03")

    @patch("apps.finance.domain.services.get_configured_exchange_rate_provider")
    def test_provider_resolved_lazily_from_settings(self, mock_get_provider):
        """Test the configured provider is only looked up when a rate is needed."""
        mock_get_provider.return_value = MockProvider()
        service = ExchangeRateService()

        service.get_exchange_rate("USD", "USD", date(2024, 1, 15))
        mock_get_provider.assert_not_called()

        rate = service.get_exchange_rate("USD", "PLN", date(2024, 1, 15))
        assert rate == Decimal("4.000000")
        mock_get_provider.assert_called_once()


class TestDomainModels:

    def test_exchange_rate_rejects_non_positive_rate(self):
        with pytest.raises(ValueError):
            ExchangeRate("EUR", "USD", date(2024, 1, 15), Decimal("0"))

    def test_currency_info_requires_three_letter_code(self):
        with pytest.raises(ValueError):
            CurrencyInfo(code="EURO", name="Euro")
