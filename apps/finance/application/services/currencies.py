import logging
from typing import List

from apps.finance.application.dto import CatalogRefreshResultDTO, CurrencyDTO
from apps.finance.domain.exceptions import NotFoundError
from apps.finance.domain.interfaces import BaseCurrencyCatalogProvider
from apps.finance.infrastructure.persistence.models import Currency
from apps.finance.infrastructure.persistence.unit_of_work import UnitOfWork
from apps.finance.infrastructure.providers.registry import get_configured_catalog_provider

logger = logging.getLogger(__name__)


class CurrencyService:
    """Read access to the currency catalog and its refresh from a catalog provider."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def list_currencies(self) -> List[CurrencyDTO]:
        return [CurrencyDTO.from_model(currency) for currency in self.uow.currencies.get_all()]

    def get_currency(self, code: str) -> CurrencyDTO:
        currency = self.uow.currencies.get_by_code(code)
        if currency is None:
            raise NotFoundError(f"Currency with code '{code.upper()}' was not found")
        return CurrencyDTO.from_model(currency)

    def refresh_catalog(self, provider: BaseCurrencyCatalogProvider | None = None) -> CatalogRefreshResultDTO:
        """
        Upsert every currency the provider knows about.

        Rows are matched by code; nothing is ever deleted. A provider that
        returns nothing leaves the catalog untouched.
        """
        provider = provider or get_configured_catalog_provider()
        provider_name = type(provider).__name__

        currencies = provider.get_currencies()
        if not currencies:
            logger.warning("Currency catalog provider %s returned no currencies", provider_name)
            return CatalogRefreshResultDTO(
                success=False,
                provider_used=provider_name,
                errors=["Provider returned no currencies"],
            )

        existing = {currency.code: currency for currency in self.uow.currencies.get_all()}
        created = updated = 0

        for info in currencies:
            code = info.code.upper()
            current = existing.get(code)

            if current is None:
                currency = Currency(code=code, name=info.name, symbol=info.symbol or "")
                self.uow.currencies.add(currency)
                existing[code] = currency
                created += 1
            elif current.name != info.name or current.symbol != (info.symbol or ""):
                current.name = info.name
                current.symbol = info.symbol or ""
                self.uow.currencies.update(current)
                updated += 1

        self.uow.save_changes()
        logger.info(
            "Currency catalog refreshed from %s: %d created, %d updated", provider_name, created, updated
        )
        return CatalogRefreshResultDTO(success=True, created=created, updated=updated, provider_used=provider_name)
