import logging

from django.db import IntegrityError, transaction

from apps.finance.domain.exceptions import ConflictError

from apps.finance.infrastructure.persistence.repositories import (
    CurrencyRepository,
    FinancialOperationRepository,
    FinancialOperationTypeRepository,
    UserRepository,
    WalletRepository,
)

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    One per request. Repositories stage saves/deletes here and
    `save_changes()` applies all of them inside a single transaction.
    """

    def __init__(self):
        self._pending: list[tuple[str, object]] = []

        self.users = UserRepository(self)
        self.wallets = WalletRepository(self)
        self.currencies = CurrencyRepository(self)
        self.operation_types = FinancialOperationTypeRepository(self)
        self.operations = FinancialOperationRepository(self)

    def register_save(self, entity) -> None:
        if not any(op == "save" and staged is entity for op, staged in self._pending):
            self._pending.append(("save", entity))

    def register_delete(self, entity) -> None:
        self._pending.append(("delete", entity))

    @property
    def has_changes(self) -> bool:
        return bool(self._pending)

    def save_changes(self) -> int:
        """
        Apply staged changes atomically; returns the number applied.

        A unique-constraint violation (two requests racing past the same
        existence check) is raised as ConflictError after the rollback.
        """
        pending, self._pending = self._pending, []

        try:
            with transaction.atomic():
                for op, entity in pending:
                    if op == "delete":
                        entity.delete()
                    else:
                        entity.save()
        except IntegrityError as e:
            logger.warning("Commit of %d staged change(s) rejected: %s", len(pending), e)
            raise ConflictError("The change conflicts with existing data") from e

        if pending:
            logger.debug("Committed %d staged change(s)", len(pending))
        return len(pending)

    def rollback(self) -> None:
        """Drop staged changes that were not saved yet."""
        self._pending = []
