# ORM models live in the infrastructure layer; Django discovers them here.
from apps.finance.infrastructure.persistence.models import (  # noqa: F401
    Currency,
    FinancialOperation,
    FinancialOperationType,
    OperationKind,
    User,
    Wallet,
)
