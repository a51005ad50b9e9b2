"""
Pure domain values (POPOs).
No dependency on Django or the ORM.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID

CENT = Decimal("0.01")


@dataclass(frozen=True)
class UserContext:
    """Identity of the caller, resolved from the bearer token per request."""

    user_id: UUID
    username: str


@dataclass(frozen=True)
class CurrencyInfo:

    code: str
    name: str
    symbol: str = ""

    def __post_init__(self):
        if len(self.code) != 3:
            raise ValueError(f"Currency code must be exactly 3 characters, got '{self.code}'")


@dataclass(frozen=True)
class ExchangeRate:

    source_currency: str
    exchanged_currency: str
    valuation_date: date
    rate_value: Decimal

    def __post_init__(self):
        if self.rate_value <= 0:
            raise ValueError(f"rate_value must be positive, got {self.rate_value}")

    def convert(self, amount: Decimal) -> Decimal:
        return (amount * self.rate_value).quantize(CENT, rounding=ROUND_HALF_UP)
