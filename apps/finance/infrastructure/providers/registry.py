"""
Provider Registry - Maps configured provider names to adapter classes.
This is the glue between settings and the actual implementation.
"""

import logging
from enum import Enum

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from apps.finance.domain.interfaces import BaseCurrencyCatalogProvider, BaseExchangeRateProvider
from apps.finance.infrastructure.providers.freecurrency import (
    FreeCurrencyApiCatalogProvider,
    FreeCurrencyApiProvider,
)
from apps.finance.infrastructure.providers.mock import MockProvider
from apps.finance.infrastructure.providers.static_catalog import StaticCurrencyCatalogProvider

logger = logging.getLogger(__name__)


class ProviderName(str, Enum):
    """
    Available providers.
    To add a new provider:
    1. Add an entry here
    2. Implement BaseExchangeRateProvider or BaseCurrencyCatalogProvider
    3. Register it in the matching registry below
    """

    FREECURRENCY = "freecurrency"
    MOCK = "mock"
    STATIC = "static"


PROVIDER_REGISTRY: dict[str, type[BaseExchangeRateProvider]] = {
    ProviderName.FREECURRENCY: FreeCurrencyApiProvider,
    ProviderName.MOCK: MockProvider,
}

CATALOG_REGISTRY: dict[str, type[BaseCurrencyCatalogProvider]] = {
    ProviderName.FREECURRENCY: FreeCurrencyApiCatalogProvider,
    ProviderName.STATIC: StaticCurrencyCatalogProvider,
}


def get_provider_instance(provider_name: str) -> BaseExchangeRateProvider | None:
    """
    Get an exchange-rate provider instance by its name.

    Returns:
        Instance of the provider adapter, or None if not found
    """
    provider_class = PROVIDER_REGISTRY.get(provider_name)

    if provider_class is None:
        logger.warning("Exchange rate provider '%s' not found in registry", provider_name)
        return None

    return provider_class()


def get_catalog_provider_instance(provider_name: str) -> BaseCurrencyCatalogProvider | None:
    provider_class = CATALOG_REGISTRY.get(provider_name)

    if provider_class is None:
        logger.warning("Currency catalog provider '%s' not found in registry", provider_name)
        return None

    return provider_class()


def get_configured_exchange_rate_provider() -> BaseExchangeRateProvider:
    """Provider named by settings.EXCHANGE_RATE_PROVIDER."""
    provider = get_provider_instance(settings.EXCHANGE_RATE_PROVIDER)
    if provider is None:
        raise ImproperlyConfigured(
            f"EXCHANGE_RATE_PROVIDER '{settings.EXCHANGE_RATE_PROVIDER}' is not registered. "
            f"Choose one of: {', '.join(p.value for p in PROVIDER_REGISTRY)}"
        )
    return provider


def get_configured_catalog_provider() -> BaseCurrencyCatalogProvider:
    """Provider named by settings.CURRENCY_CATALOG_PROVIDER."""
    provider = get_catalog_provider_instance(settings.CURRENCY_CATALOG_PROVIDER)
    if provider is None:
        raise ImproperlyConfigured(
            f"CURRENCY_CATALOG_PROVIDER '{settings.CURRENCY_CATALOG_PROVIDER}' is not registered. "
            f"Choose one of: {', '.join(p.value for p in CATALOG_REGISTRY)}"
        )
    return provider
