import logging
from decimal import Decimal, InvalidOperation
from datetime import date

import requests
from django.conf import settings
from django.utils import timezone

from apps.finance.domain.interfaces import BaseCurrencyCatalogProvider, BaseExchangeRateProvider
from apps.finance.domain.models import CurrencyInfo

logger = logging.getLogger(__name__)


class FreeCurrencyApiProvider(BaseExchangeRateProvider):
    """
    FreeCurrencyAPI provider.
    Uses /latest for today's rate and /historical for any other date.
    """

    def get_exchange_rate_data(
        self,
        source_currency: str,
        exchanged_currency: str,
        date: date
    ) -> Decimal | None:
        """
        Fetch the exchange rate from FreeCurrencyAPI.

        Args:
            source_currency: Base currency code (e.g. EUR)
            exchanged_currency: Target currency code (e.g. USD)
            date: Date for the exchange rate

        Returns:
            Exchange rate as Decimal, or None if error occurs
        """
        if not settings.FREECURRENCY_API_KEY:
            logger.error("FREECURRENCY_API_KEY is not configured. Cannot fetch exchange rates.")
            return None

        date_str = date.strftime("%Y-%m-%d")
        is_today = date == timezone.localdate()

        params = {
            "apikey": settings.FREECURRENCY_API_KEY,
            "currencies": exchanged_currency,
            "base_currency": source_currency,
        }
        if is_today:
            url = f"{settings.FREECURRENCY_URL}/latest"
        else:
            url = f"{settings.FREECURRENCY_URL}/historical"
            params["date"] = date_str

        try:
            response = requests.get(url, params=params, timeout=settings.EXCHANGE_RATE_TIMEOUT)
            response.raise_for_status()
            data = response.json()

            # latest:     {"data": {"USD": 1.08}}
            # historical: {"data": {"2024-05-21": {"USD": 1.08}}}
            rates = data["data"] if is_today else data["data"][date_str]
            rate = Decimal(str(rates[exchanged_currency]))

        except requests.exceptions.Timeout:
            logger.warning("Timeout calling FreeCurrencyAPI for %s/%s on %s", source_currency, exchanged_currency, date_str)
            return None
        except requests.exceptions.RequestException as e:
            logger.warning("HTTP error from FreeCurrencyAPI: %s", e)
            return None
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            logger.warning("Invalid response from FreeCurrencyAPI: %r", e)
            return None

        logger.info("Fetched exchange rate %s->%s on %s = %s", source_currency, exchanged_currency, date_str, rate)
        return rate


class FreeCurrencyApiCatalogProvider(BaseCurrencyCatalogProvider):
    """Currency catalog from FreeCurrencyAPI's /currencies endpoint."""

    def get_currencies(self) -> list[CurrencyInfo] | None:
        if not settings.FREECURRENCY_API_KEY:
            logger.error("FREECURRENCY_API_KEY is not configured. Cannot fetch currency catalog.")
            return None

        try:
            response = requests.get(
                f"{settings.FREECURRENCY_URL}/currencies",
                params={"apikey": settings.FREECURRENCY_API_KEY},
                timeout=settings.EXCHANGE_RATE_TIMEOUT,
            )
            response.raise_for_status()
            data = response.json()

            # {"data": {"EUR": {"code": "EUR", "name": "Euro", "symbol": "€", ...}}}
            currencies = [
                CurrencyInfo(
                    code=item["code"].upper(),
                    name=item["name"][:50],
                    symbol=(item.get("symbol") or "")[:10],
                )
                for item in data["data"].values()
            ]

        except requests.exceptions.RequestException as e:
            logger.warning("HTTP error from FreeCurrencyAPI: %s", e)
            return None
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Invalid currency catalog from FreeCurrencyAPI: %r", e)
            return None

        logger.info("Fetched %d currencies from FreeCurrencyAPI", len(currencies))
        return currencies
