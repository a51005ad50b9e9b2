"""
Repository pattern implementation.
Abstracts database access to decouple services from persistence.

Reads hit the database directly. Writes are staged on the owning
UnitOfWork and only reach the database on `UnitOfWork.save_changes()`.
"""

from typing import TYPE_CHECKING, List, Optional, Tuple
from datetime import date
from uuid import UUID

from apps.finance.infrastructure.persistence.models import (
    Currency,
    FinancialOperation,
    FinancialOperationType,
    User,
    Wallet,
)

if TYPE_CHECKING:
    from apps.finance.infrastructure.persistence.unit_of_work import UnitOfWork


class BaseRepository:
    """Staging helpers shared by every repository."""

    def __init__(self, uow: "UnitOfWork"):
        self._uow = uow

    def add(self, entity) -> None:
        self._uow.register_save(entity)

    def update(self, entity) -> None:
        self._uow.register_save(entity)


class SoftDeleteRepositoryMixin:

    def soft_delete(self, entity) -> None:
        entity.is_deleted = True
        self._uow.register_save(entity)


class UserRepository(SoftDeleteRepositoryMixin, BaseRepository):
    """Repository for User aggregate."""

    def get_by_id(self, user_id: UUID) -> Optional[User]:
        return User.objects.filter(id=user_id).first()

    def get_by_username(self, username: str) -> Optional[User]:
        """Exact, case-sensitive match among non-deleted users."""
        return User.objects.filter(username=username).first()

    def get_all(self) -> List[User]:
        return list(User.objects.order_by("username"))

    def is_username_taken(self, username: str, exclude_user_id: Optional[UUID] = None) -> bool:
        query = User.objects.filter(username=username)
        if exclude_user_id is not None:
            query = query.exclude(id=exclude_user_id)
        return query.exists()


class WalletRepository(SoftDeleteRepositoryMixin, BaseRepository):
    """Repository for Wallet aggregate."""

    def get_by_id_for_user(self, user_id: UUID, wallet_id: UUID) -> Optional[Wallet]:
        return Wallet.objects.filter(id=wallet_id, user_id=user_id).first()

    def get_user_wallets(self, user_id: UUID) -> List[Wallet]:
        return list(Wallet.objects.filter(user_id=user_id).order_by("name"))

    def exists_by_name(self, user_id: UUID, name: str, exclude_wallet_id: Optional[UUID] = None) -> bool:
        query = Wallet.objects.filter(user_id=user_id, name=name.strip())
        if exclude_wallet_id is not None:
            query = query.exclude(id=exclude_wallet_id)
        return query.exists()


class CurrencyRepository(BaseRepository):
    """Repository for Currency catalog."""

    def get_all(self) -> List[Currency]:
        return list(Currency.objects.order_by("code"))

    def get_by_code(self, code: str) -> Optional[Currency]:
        return Currency.objects.filter(code=code.upper()).first()

    def exists(self, code: str) -> bool:
        return Currency.objects.filter(code=code.upper()).exists()

    def count(self) -> int:
        return Currency.objects.count()


class FinancialOperationTypeRepository(BaseRepository):
    """Repository for FinancialOperationType aggregate."""

    def get_by_id_for_user(self, user_id: UUID, type_id: UUID) -> Optional[FinancialOperationType]:
        return FinancialOperationType.objects.filter(id=type_id, user_id=user_id).first()

    def get_user_types(self, user_id: UUID) -> List[FinancialOperationType]:
        return list(FinancialOperationType.objects.filter(user_id=user_id).order_by("kind", "name"))

    def exists_by_name_kind(
        self,
        user_id: UUID,
        name: str,
        kind: str,
        exclude_type_id: Optional[UUID] = None
    ) -> bool:
        query = FinancialOperationType.objects.filter(user_id=user_id, kind=kind, name=name.strip())
        if exclude_type_id is not None:
            query = query.exclude(id=exclude_type_id)
        return query.exists()

    def is_referenced(self, type_id: UUID) -> bool:
        """True if any operation, soft-deleted ones included, uses the type."""
        return FinancialOperation.all_objects.filter(type_id=type_id).exists()

    def delete(self, entity: FinancialOperationType) -> None:
        self._uow.register_delete(entity)


class FinancialOperationRepository(SoftDeleteRepositoryMixin, BaseRepository):
    """Repository for FinancialOperation aggregate."""

    def _with_details(self):
        return FinancialOperation.objects.select_related("type", "wallet")

    def get_by_id_with_details(self, wallet_id: UUID, operation_id: UUID) -> Optional[FinancialOperation]:
        return self._with_details().filter(id=operation_id, wallet_id=wallet_id).first()

    def get_wallet_operations(self, wallet_id: UUID) -> List[FinancialOperation]:
        return list(self._with_details().filter(wallet_id=wallet_id).order_by("date", "created_at"))

    def get_list_by_date(self, wallet_id: UUID, day: date) -> List[FinancialOperation]:
        return self.get_list_by_period(wallet_id, day, day)

    def get_list_by_period(self, wallet_id: UUID, start: date, end: date) -> List[FinancialOperation]:
        """Operations with start <= date <= end."""
        return list(
            self._with_details()
            .filter(wallet_id=wallet_id, date__gte=start, date__lte=end)
            .order_by("date", "created_at")
        )

    def get_user_operations_page(
        self,
        user_id: UUID,
        offset: int,
        limit: int,
        wallet_id: Optional[UUID] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Tuple[List[FinancialOperation], int]:
        """One page of the user's operations across non-deleted wallets, newest first."""
        query = self._with_details().filter(wallet__user_id=user_id, wallet__is_deleted=False)
        if wallet_id is not None:
            query = query.filter(wallet_id=wallet_id)
        if date_from is not None:
            query = query.filter(date__gte=date_from)
        if date_to is not None:
            query = query.filter(date__lte=date_to)

        total = query.count()
        items = list(query.order_by("-date", "-created_at")[offset:offset + limit])
        return items, total
