"""
Django ORM models for users, wallets, currencies and operations.
Users, wallets and operations are soft-deleted; operation types are not.
"""

import uuid

from django.db import models
from django.db.models import Q


class BaseModel(models.Model):

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ActiveManager(models.Manager):
    """Default manager: hides soft-deleted rows."""

    def get_queryset(self):
        return super().get_queryset().filter(is_deleted=False)


class SoftDeleteModel(BaseModel):

    is_deleted = models.BooleanField(default=False, db_index=True)

    objects = ActiveManager()
    all_objects = models.Manager()

    class Meta:
        abstract = True


class Currency(models.Model):

    code = models.CharField(max_length=3, primary_key=True)
    name = models.CharField(max_length=50)
    symbol = models.CharField(max_length=10, blank=True, default="")

    class Meta:
        verbose_name_plural = "currencies"
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} ({self.name})"


class User(SoftDeleteModel):

    username = models.CharField(max_length=50)
    password_hash = models.CharField(max_length=128)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["username"],
                condition=Q(is_deleted=False),
                name="unique_active_username",
            )
        ]
        ordering = ["username"]

    # DRF permission classes only look at these two flags.
    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def is_anonymous(self) -> bool:
        return False

    def __str__(self):
        return self.username


class Wallet(SoftDeleteModel):

    user = models.ForeignKey(User, related_name="wallets", on_delete=models.CASCADE)
    name = models.CharField(max_length=100)
    base_currency = models.ForeignKey(Currency, related_name="wallets", on_delete=models.PROTECT)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "name"],
                condition=Q(is_deleted=False),
                name="unique_active_wallet_name_per_user",
            )
        ]
        ordering = ["name"]

    @property
    def base_currency_code(self) -> str:
        return self.base_currency_id

    def __str__(self):
        return f"{self.name} ({self.base_currency_id})"


class OperationKind(models.TextChoices):
    INCOME = "Income", "Income"
    EXPENSE = "Expense", "Expense"


class FinancialOperationType(BaseModel):

    user = models.ForeignKey(User, related_name="operation_types", on_delete=models.CASCADE)
    name = models.CharField(max_length=100)
    description = models.CharField(max_length=500, blank=True, default="")
    kind = models.CharField(max_length=10, choices=OperationKind.choices)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "kind", "name"],
                name="unique_operation_type_per_user_kind",
            )
        ]
        ordering = ["kind", "name"]

    def __str__(self):
        return f"{self.name} ({self.kind})"


class FinancialOperation(SoftDeleteModel):

    wallet = models.ForeignKey(Wallet, related_name="operations", on_delete=models.CASCADE)
    type = models.ForeignKey(FinancialOperationType, related_name="operations", on_delete=models.PROTECT)
    amount_original = models.DecimalField(max_digits=18, decimal_places=2)
    currency_original = models.ForeignKey(
        Currency,
        related_name="+",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
    )
    amount_base = models.DecimalField(max_digits=18, decimal_places=2)
    date = models.DateField(db_index=True)
    note = models.CharField(max_length=1000, blank=True, default="")

    class Meta:
        ordering = ["date", "created_at"]

    @property
    def currency_original_code(self) -> str | None:
        return self.currency_original_id

    @property
    def effective_currency_code(self) -> str:
        """Currency the original amount is expressed in."""
        return self.currency_original_id or self.wallet.base_currency_id

    def __str__(self):
        return f"{self.date} | {self.amount_original} {self.effective_currency_code} -> {self.amount_base}"
