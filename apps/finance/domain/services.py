"""
Domain services - Core business logic.
Resolves exchange rates for operations recorded in a foreign currency.
"""

import logging
from decimal import Decimal
from datetime import date

from django.utils import timezone

from apps.finance.domain.exceptions import ExchangeRateUnavailableError
from apps.finance.domain.interfaces import BaseExchangeRateProvider
from apps.finance.domain.models import ExchangeRate
from apps.finance.infrastructure.providers.registry import get_configured_exchange_rate_provider

logger = logging.getLogger(__name__)

IDENTITY_RATE = Decimal("1")


class ExchangeRateService:
    """
    Domain service that returns the rate between two currencies on a date.

    Strategy:
    1. Same currency: rate is 1, the provider is not called
    2. Otherwise ask the configured provider once
    3. No rate: raise ExchangeRateUnavailableError (no retry, no fallback)
    """

    def __init__(self, provider: BaseExchangeRateProvider | None = None):
        self._provider = provider

    @property
    def provider(self) -> BaseExchangeRateProvider:
        if self._provider is None:
            self._provider = get_configured_exchange_rate_provider()
        return self._provider

    def get_exchange_rate(
        self,
        source_currency_code: str,
        exchanged_currency_code: str,
        valuation_date: date
    ) -> Decimal:
        """
        Get the rate to convert source currency amounts into exchanged currency.

        Args:
            source_currency_code: Currency of the amount (e.g. "EUR")
            exchanged_currency_code: Target currency (e.g. "USD")
            valuation_date: Date for the rate

        Returns:
            Exchange rate as Decimal

        Raises:
            ExchangeRateUnavailableError: the provider returned no rate

        Example:
            >>> ExchangeRateService().get_exchange_rate("EUR", "USD", date(2024, 1, 15))
            Decimal('1.08')
        """
        source = source_currency_code.upper()
        target = exchanged_currency_code.upper()

        if source == target:
            logger.debug("Same currency (%s), using rate 1", source)
            return IDENTITY_RATE

        rate_value = self.provider.get_exchange_rate_data(source, target, valuation_date)

        if rate_value is None:
            logger.error("No exchange rate for %s/%s on %s", source, target, valuation_date)
            raise ExchangeRateUnavailableError(
                f"Exchange rate {source}/{target} on {valuation_date} is unavailable."
            )

        return rate_value

    def convert_amount(
        self,
        source_currency_code: str,
        exchanged_currency_code: str,
        amount: Decimal,
        valuation_date: date | None = None
    ) -> dict:
        """
        Convert an amount from one currency to another.

        Returns:
            Dict with the rate and the converted amount rounded to cents
        """
        if valuation_date is None:
            valuation_date = timezone.localdate()

        rate = self.get_exchange_rate(source_currency_code, exchanged_currency_code, valuation_date)
        exchange_rate = ExchangeRate(
            source_currency=source_currency_code.upper(),
            exchanged_currency=exchanged_currency_code.upper(),
            valuation_date=valuation_date,
            rate_value=rate,
        )

        return {
            "source_currency": exchange_rate.source_currency,
            "exchanged_currency": exchange_rate.exchanged_currency,
            "amount": amount,
            "rate": rate,
            "converted_amount": exchange_rate.convert(amount),
            "valuation_date": valuation_date,
        }
