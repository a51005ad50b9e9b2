import logging
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Iterable, List
from uuid import UUID

from apps.finance.application.dto import CategoryAmountDTO, FinanceReportDTO, FinancialOperationDetailsDTO
from apps.finance.domain.exceptions import NotFoundError, ValidationError
from apps.finance.domain.models import UserContext
from apps.finance.infrastructure.persistence.models import OperationKind, Wallet
from apps.finance.infrastructure.persistence.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class ReportService:
    """Income/expense totals for a wallet over a day or an inclusive period."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def daily_report(self, ctx: UserContext, wallet_id: UUID, day: date) -> FinanceReportDTO:
        wallet = self._get_owned_wallet(ctx, wallet_id)
        operations = self.uow.operations.get_list_by_date(wallet_id, day)

        logger.info("Generated daily report: wallet=%s, date=%s, operations=%d", wallet_id, day, len(operations))
        return build_report(wallet, day, day, operations)

    def period_report(self, ctx: UserContext, wallet_id: UUID, start: date, end: date) -> FinanceReportDTO:
        if start > end:
            raise ValidationError(
                {"end": ["End date must be after or equal to start date"]},
                detail="End date must be after or equal to start date",
            )

        wallet = self._get_owned_wallet(ctx, wallet_id)
        operations = self.uow.operations.get_list_by_period(wallet_id, start, end)

        logger.info(
            "Generated period report from %s to %s with %d operations in wallet %s",
            start, end, len(operations), wallet_id,
        )
        return build_report(wallet, start, end, operations)

    def _get_owned_wallet(self, ctx: UserContext, wallet_id: UUID) -> Wallet:
        wallet = self.uow.wallets.get_by_id_for_user(ctx.user_id, wallet_id)
        if wallet is None:
            raise NotFoundError(f"Wallet with id {wallet_id} was not found")
        return wallet


def build_report(wallet: Wallet, start: date, end: date, operations: Iterable) -> FinanceReportDTO:
    details = [FinancialOperationDetailsDTO.from_model(op) for op in operations]

    return FinanceReportDTO(
        wallet_id=wallet.id,
        wallet_name=wallet.name,
        currency_code=wallet.base_currency_code,
        start=start,
        end=end,
        total_income=_total(details, OperationKind.INCOME),
        total_expense=_total(details, OperationKind.EXPENSE),
        income_by_category=_sum_by_category(details, OperationKind.INCOME),
        expense_by_category=_sum_by_category(details, OperationKind.EXPENSE),
        operations=details,
    )


def _total(details: List[FinancialOperationDetailsDTO], kind: str) -> Decimal:
    return sum((d.amount_base for d in details if d.kind == kind), ZERO)


def _sum_by_category(details: List[FinancialOperationDetailsDTO], kind: str) -> List[CategoryAmountDTO]:
    groups: "OrderedDict[UUID, CategoryAmountDTO]" = OrderedDict()
    for d in details:
        if d.kind != kind:
            continue
        group = groups.get(d.type_id)
        if group is None:
            groups[d.type_id] = CategoryAmountDTO(type_id=d.type_id, type_name=d.type_name, amount=d.amount_base)
        else:
            group.amount += d.amount_base
    return list(groups.values())
