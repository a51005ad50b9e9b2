"""
Celery tasks for background processing.
"""

import logging
from dataclasses import asdict
from typing import Dict, Optional

from celery import shared_task

from apps.finance.application.services.currencies import CurrencyService
from apps.finance.infrastructure.persistence.unit_of_work import UnitOfWork
from apps.finance.infrastructure.providers.registry import (
    get_catalog_provider_instance,
    get_configured_catalog_provider,
)

logger = logging.getLogger(__name__)


@shared_task(name="refresh_currency_catalog")
def refresh_currency_catalog(provider_name: Optional[str] = None) -> Dict:
    """
    Upsert the currency catalog from a catalog provider.

    Args:
        provider_name: Registry name of the catalog provider; defaults to
            settings.CURRENCY_CATALOG_PROVIDER

    Returns:
        Dict with operation results
    """
    if provider_name:
        provider = get_catalog_provider_instance(provider_name)
        if provider is None:
            return {
                "success": False,
                "message": f"Currency catalog provider '{provider_name}' is not registered.",
                "created": 0,
                "updated": 0,
            }
    else:
        provider = get_configured_catalog_provider()

    logger.info("Refreshing currency catalog using %s", type(provider).__name__)
    result = CurrencyService(UnitOfWork()).refresh_catalog(provider)

    payload = asdict(result)
    if not result.success:
        payload["message"] = "; ".join(result.errors) or "Currency catalog refresh failed"
    return payload
