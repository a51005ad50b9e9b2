import logging
from typing import List
from uuid import UUID

from apps.finance.application.dto import OperationTypeDTO
from apps.finance.application.validators import (
    OperationTypeCreateValidator,
    OperationTypeUpdateValidator,
    validate_payload,
)
from apps.finance.domain.exceptions import ConflictError, NotFoundError
from apps.finance.domain.models import UserContext
from apps.finance.infrastructure.persistence.models import FinancialOperationType
from apps.finance.infrastructure.persistence.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class OperationTypeService:
    """
    User-defined income/expense categories.

    Kind is fixed at creation. Types are removed physically, and only
    while no operation (soft-deleted ones included) points at them.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def get_type(self, ctx: UserContext, type_id: UUID) -> OperationTypeDTO:
        return OperationTypeDTO.from_model(self._get_owned_type(ctx, type_id))

    def list_types(self, ctx: UserContext) -> List[OperationTypeDTO]:
        return [OperationTypeDTO.from_model(t) for t in self.uow.operation_types.get_user_types(ctx.user_id)]

    def create_type(self, ctx: UserContext, payload: dict) -> UUID:
        data = validate_payload(OperationTypeCreateValidator, payload)
        name = data["name"].strip()
        kind = data["kind"]

        if self.uow.operation_types.exists_by_name_kind(ctx.user_id, name, kind):
            raise ConflictError(f"Operation type '{name}' with kind '{kind}' already exists")

        operation_type = FinancialOperationType(
            user_id=ctx.user_id,
            name=name,
            description=(data.get("description") or "").strip(),
            kind=kind,
        )
        self.uow.operation_types.add(operation_type)
        self.uow.save_changes()

        logger.info("Operation type %s (%s) created for user %s", operation_type.id, kind, ctx.user_id)
        return operation_type.id

    def update_type(self, ctx: UserContext, type_id: UUID, payload: dict) -> None:
        operation_type = self._get_owned_type(ctx, type_id)
        data = validate_payload(OperationTypeUpdateValidator, payload)
        name = data["name"].strip()

        if self.uow.operation_types.exists_by_name_kind(
            ctx.user_id, name, operation_type.kind, exclude_type_id=operation_type.id
        ):
            raise ConflictError(f"Operation type '{name}' with kind '{operation_type.kind}' already exists")

        operation_type.name = name
        operation_type.description = (data.get("description") or "").strip()
        self.uow.operation_types.update(operation_type)
        self.uow.save_changes()
        logger.info("Operation type %s updated", operation_type.id)

    def delete_type(self, ctx: UserContext, type_id: UUID) -> None:
        operation_type = self._get_owned_type(ctx, type_id)

        if self.uow.operation_types.is_referenced(operation_type.id):
            raise ConflictError(
                f"Operation type with id {type_id} is used by existing operations and cannot be deleted"
            )

        self.uow.operation_types.delete(operation_type)
        self.uow.save_changes()
        logger.info("Operation type %s deleted", type_id)

    def _get_owned_type(self, ctx: UserContext, type_id: UUID) -> FinancialOperationType:
        operation_type = self.uow.operation_types.get_by_id_for_user(ctx.user_id, type_id)
        if operation_type is None:
            raise NotFoundError(f"Operation type with id {type_id} was not found")
        return operation_type
