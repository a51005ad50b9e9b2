"""
Mock provider for development and tests.
Returns fixed cross rates so no external API or key is needed.
"""

import logging
from decimal import Decimal
from datetime import date

from apps.finance.domain.interfaces import BaseExchangeRateProvider

logger = logging.getLogger(__name__)


class MockProvider(BaseExchangeRateProvider):

    # Units of each currency per 1 USD
    BASE_RATES = {
        "USD": Decimal("1.0"),
        "EUR": Decimal("0.925926"),
        "GBP": Decimal("0.79"),
        "CHF": Decimal("0.88"),
        "PLN": Decimal("4.0"),
        "JPY": Decimal("150.0"),
    }

    def get_exchange_rate_data(
        self,
        source_currency: str,
        exchanged_currency: str,
        date: date
    ) -> Decimal | None:
        source_rate = self.BASE_RATES.get(source_currency)
        target_rate = self.BASE_RATES.get(exchanged_currency)

        if source_rate is None or target_rate is None:
            logger.warning("MockProvider: unsupported currency pair %s/%s", source_currency, exchanged_currency)
            return None

        return (target_rate / source_rate).quantize(Decimal("0.000001"))
