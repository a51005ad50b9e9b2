from abc import ABC, abstractmethod
from decimal import Decimal
from datetime import date

from apps.finance.domain.models import CurrencyInfo


class BaseExchangeRateProvider(ABC):
    @abstractmethod
    def get_exchange_rate_data(self, source_currency: str, exchanged_currency: str, date: date) -> Decimal | None:
        pass


class BaseCurrencyCatalogProvider(ABC):
    @abstractmethod
    def get_currencies(self) -> list[CurrencyInfo] | None:
        pass
