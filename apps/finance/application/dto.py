"""
Data Transfer Objects for the application layer.
DTOs decouple internal domain models from external API contracts.
"""

import math
import sys
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar
from uuid import UUID

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
# Keeps (page - 1) * page_size inside a signed 64-bit database integer.
MAX_PAGE = sys.maxsize // MAX_PAGE_SIZE

T = TypeVar("T")


@dataclass
class UserDTO:
    """User data transfer object."""
    id: UUID
    username: str

    @classmethod
    def from_model(cls, user) -> "UserDTO":
        return cls(id=user.id, username=user.username)


@dataclass
class WalletDTO:
    """Wallet data transfer object."""
    id: UUID
    name: str
    base_currency_code: str

    @classmethod
    def from_model(cls, wallet) -> "WalletDTO":
        return cls(id=wallet.id, name=wallet.name, base_currency_code=wallet.base_currency_code)


@dataclass
class CurrencyDTO:
    """Currency data transfer object."""
    code: str
    name: str
    symbol: str = ""

    @classmethod
    def from_model(cls, currency) -> "CurrencyDTO":
        return cls(code=currency.code, name=currency.name, symbol=currency.symbol)


@dataclass
class OperationTypeDTO:
    """Operation type (category) data transfer object."""
    id: UUID
    name: str
    description: str
    kind: str

    @classmethod
    def from_model(cls, operation_type) -> "OperationTypeDTO":
        return cls(
            id=operation_type.id,
            name=operation_type.name,
            description=operation_type.description,
            kind=operation_type.kind,
        )


@dataclass
class FinancialOperationDetailsDTO:
    """Operation with its type and amounts in both currencies."""
    id: UUID
    wallet_id: UUID
    wallet_name: str
    type_id: UUID
    type_name: str
    kind: str
    amount_original: Decimal
    currency_original_code: str
    amount_base: Decimal
    base_currency_code: str
    date: date
    note: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, operation) -> "FinancialOperationDetailsDTO":
        return cls(
            id=operation.id,
            wallet_id=operation.wallet_id,
            wallet_name=operation.wallet.name,
            type_id=operation.type_id,
            type_name=operation.type.name,
            kind=operation.type.kind,
            amount_original=operation.amount_original,
            currency_original_code=operation.effective_currency_code,
            amount_base=operation.amount_base,
            base_currency_code=operation.wallet.base_currency_code,
            date=operation.date,
            note=operation.note,
            created_at=operation.created_at,
        )


@dataclass
class CategoryAmountDTO:
    """Sum of base amounts for one operation type inside a report."""
    type_id: UUID
    type_name: str
    amount: Decimal


@dataclass
class FinanceReportDTO:
    """Daily or period report for a wallet."""
    wallet_id: UUID
    wallet_name: str
    currency_code: str
    start: date
    end: date
    total_income: Decimal
    total_expense: Decimal
    income_by_category: List[CategoryAmountDTO] = field(default_factory=list)
    expense_by_category: List[CategoryAmountDTO] = field(default_factory=list)
    operations: List[FinancialOperationDetailsDTO] = field(default_factory=list)

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense


@dataclass
class PageRequest:
    """Normalized paging parameters."""
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def normalize(cls, page=None, page_size=None) -> "PageRequest":
        """
        Coerce raw paging input.

        page < 1 becomes 1 and page > MAX_PAGE becomes MAX_PAGE;
        page_size < 1 or > 100 becomes 20; missing or non-numeric values
        fall back to the defaults.
        """
        page = _to_int(page, DEFAULT_PAGE)
        page_size = _to_int(page_size, DEFAULT_PAGE_SIZE)

        if page < 1:
            page = DEFAULT_PAGE
        page = min(page, MAX_PAGE)
        if page_size < 1 or page_size > MAX_PAGE_SIZE:
            page_size = DEFAULT_PAGE_SIZE

        return cls(page=page, page_size=page_size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass
class OperationQuery:
    """Filters for listing a user's operations across wallets."""
    wallet_id: Optional[UUID] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    paging: PageRequest = field(default_factory=PageRequest)


@dataclass
class PagedResult(Generic[T]):
    """One page of results plus totals."""
    items: List[T]
    page: int
    page_size: int
    total_count: int

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)


@dataclass
class CatalogRefreshResultDTO:
    """Result DTO for currency catalog refresh."""
    success: bool
    created: int = 0
    updated: int = 0
    provider_used: Optional[str] = None
    errors: List[str] = field(default_factory=list)


def _to_int(value, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
