"""
Financial operations: recording income/expenses against a wallet.

Every stored operation carries its amount converted into the wallet's base
currency, using the exchange rate for the operation's own date.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from apps.finance.application.dto import (
    FinancialOperationDetailsDTO,
    OperationQuery,
    PagedResult,
)
from apps.finance.application.validators import FinancialOperationUpsertValidator, validate_payload
from apps.finance.domain.exceptions import NotFoundError, ValidationError
from apps.finance.domain.models import UserContext
from apps.finance.domain.services import ExchangeRateService
from apps.finance.infrastructure.persistence.models import FinancialOperation, Wallet
from apps.finance.infrastructure.persistence.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

# amount_base column: 18 digits, 2 of them decimals.
MAX_BASE_AMOUNT = Decimal("9999999999999999.99")


class FinancialOperationService:
    """Create, edit, soft-delete and list operations in the calling user's wallets."""

    def __init__(self, uow: UnitOfWork, exchange_rate_service: ExchangeRateService | None = None):
        self.uow = uow
        self.exchange_rate_service = exchange_rate_service or ExchangeRateService()

    def get_operation(self, ctx: UserContext, wallet_id: UUID, operation_id: UUID) -> FinancialOperationDetailsDTO:
        return FinancialOperationDetailsDTO.from_model(self._get_owned_operation(ctx, wallet_id, operation_id))

    def list_wallet_operations(self, ctx: UserContext, wallet_id: UUID) -> List[FinancialOperationDetailsDTO]:
        self._get_owned_wallet(ctx, wallet_id)
        operations = self.uow.operations.get_wallet_operations(wallet_id)
        return [FinancialOperationDetailsDTO.from_model(op) for op in operations]

    def list_user_operations(self, ctx: UserContext, query: OperationQuery) -> PagedResult[FinancialOperationDetailsDTO]:
        """
        Page through the user's operations in all of their wallets.

        Paging values in `query.paging` are expected to be normalized
        already (see PageRequest.normalize).
        """
        paging = query.paging
        items, total = self.uow.operations.get_user_operations_page(
            ctx.user_id,
            offset=paging.offset,
            limit=paging.page_size,
            wallet_id=query.wallet_id,
            date_from=query.date_from,
            date_to=query.date_to,
        )
        return PagedResult(
            items=[FinancialOperationDetailsDTO.from_model(op) for op in items],
            page=paging.page,
            page_size=paging.page_size,
            total_count=total,
        )

    def create_operation(self, ctx: UserContext, wallet_id: UUID, payload: dict) -> UUID:
        data = validate_payload(FinancialOperationUpsertValidator, payload)

        wallet = self._get_owned_wallet(ctx, wallet_id)
        operation_type = self._get_owned_type(ctx, data["type_id"])
        currency_code = data["currency_original_code"] or wallet.base_currency_code
        self._ensure_currency_exists(currency_code)

        amount = data["amount_original"]
        conversion = self.exchange_rate_service.convert_amount(
            currency_code, wallet.base_currency_code, amount, data["date"]
        )
        ensure_base_amount_fits(conversion["converted_amount"], wallet.base_currency_code)

        operation = FinancialOperation(
            wallet=wallet,
            type=operation_type,
            amount_original=amount,
            currency_original_id=data["currency_original_code"],
            amount_base=conversion["converted_amount"],
            date=data["date"],
            note=build_operation_note(
                data.get("note"), amount, currency_code, wallet.base_currency_code, conversion["rate"]
            ),
        )
        self.uow.operations.add(operation)
        self.uow.save_changes()

        logger.info("Created financial operation %s in wallet %s", operation.id, wallet_id)
        return operation.id

    def update_operation(self, ctx: UserContext, wallet_id: UUID, operation_id: UUID, payload: dict) -> None:
        operation = self._get_owned_operation(ctx, wallet_id, operation_id)
        data = validate_payload(FinancialOperationUpsertValidator, payload)

        wallet = operation.wallet
        operation_type = self._get_owned_type(ctx, data["type_id"])
        currency_code = data["currency_original_code"] or wallet.base_currency_code
        self._ensure_currency_exists(currency_code)

        recalculate = should_recalculate(operation, data["amount_original"], currency_code, data["date"])

        operation.type = operation_type
        operation.date = data["date"]

        if recalculate:
            conversion = self.exchange_rate_service.convert_amount(
                currency_code, wallet.base_currency_code, data["amount_original"], data["date"]
            )
            ensure_base_amount_fits(conversion["converted_amount"], wallet.base_currency_code)
            operation.amount_original = data["amount_original"]
            operation.currency_original_id = data["currency_original_code"]
            operation.amount_base = conversion["converted_amount"]
            operation.note = build_operation_note(
                data.get("note"), data["amount_original"], currency_code, wallet.base_currency_code, conversion["rate"]
            )
        else:
            operation.note = (data.get("note") or "").strip()

        self.uow.operations.update(operation)
        self.uow.save_changes()
        logger.info(
            "Updated financial operation %s in wallet %s (recalculated=%s)", operation.id, wallet_id, recalculate
        )

    def delete_operation(self, ctx: UserContext, wallet_id: UUID, operation_id: UUID) -> None:
        operation = self._get_owned_operation(ctx, wallet_id, operation_id)

        self.uow.operations.soft_delete(operation)
        self.uow.save_changes()
        logger.info("Soft deleted financial operation %s in wallet %s", operation.id, wallet_id)

    def _get_owned_wallet(self, ctx: UserContext, wallet_id: UUID) -> Wallet:
        wallet = self.uow.wallets.get_by_id_for_user(ctx.user_id, wallet_id)
        if wallet is None:
            raise NotFoundError(f"Wallet with id {wallet_id} was not found")
        return wallet

    def _get_owned_operation(self, ctx: UserContext, wallet_id: UUID, operation_id: UUID) -> FinancialOperation:
        self._get_owned_wallet(ctx, wallet_id)
        operation = self.uow.operations.get_by_id_with_details(wallet_id, operation_id)
        if operation is None:
            raise NotFoundError(f"Financial operation with id {operation_id} was not found")
        return operation

    def _get_owned_type(self, ctx: UserContext, type_id: UUID):
        operation_type = self.uow.operation_types.get_by_id_for_user(ctx.user_id, type_id)
        if operation_type is None:
            raise NotFoundError(f"Operation type with id {type_id} was not found")
        return operation_type

    def _ensure_currency_exists(self, currency_code: str) -> None:
        if not self.uow.currencies.exists(currency_code):
            raise ValidationError.for_field(
                "currency_original_code",
                f"Currency code '{currency_code}' is not supported. "
                f"Use GET /api/currencies to see available currencies.",
            )


def build_operation_note(
    user_note: Optional[str],
    amount_original: Decimal,
    currency_code: str,
    base_currency_code: str,
    rate: Decimal,
) -> str:
    """
    Compose the stored note.

    Operations recorded in a foreign currency get a trailing line with the
    original amount and the rate used, e.g.
    "Original amount: 100 EUR, exchange rate 1.0800 USD/EUR."
    """
    note = (user_note or "").strip()
    if currency_code.upper() == base_currency_code.upper():
        return note

    conversion_info = (
        f"Original amount: {amount_original.normalize():f} {currency_code}, "
        f"exchange rate {rate:.4f} {base_currency_code}/{currency_code}."
    )
    if not note:
        return conversion_info
    return f"{note}\n{conversion_info}"


def ensure_base_amount_fits(amount_base: Decimal, base_currency_code: str) -> None:
    if amount_base > MAX_BASE_AMOUNT:
        raise ValidationError.for_field(
            "amount_original",
            f"Amount converted to {base_currency_code} exceeds the maximum of {MAX_BASE_AMOUNT}",
        )


def should_recalculate(operation: FinancialOperation, amount: Decimal, currency_code: str, operation_date: date) -> bool:
    """True when amount, effective currency or date differ from the stored operation."""
    if operation.amount_original != amount:
        return True
    if operation.effective_currency_code.upper() != currency_code.upper():
        return True
    return operation.date != operation_date
