"""
Django Admin configuration for the finance app.
"""

from django.contrib import admin

from apps.finance.infrastructure.persistence.models import (
    Currency,
    FinancialOperation,
    FinancialOperationType,
    User,
    Wallet,
)


class SoftDeleteAdmin(admin.ModelAdmin):
    """Shows soft-deleted rows too, so they can be inspected or restored."""

    def get_queryset(self, request):
        return self.model.all_objects.get_queryset()


@admin.register(Currency)
class CurrencyAdmin(admin.ModelAdmin):
    list_display = ('code', 'name', 'symbol')
    search_fields = ('code', 'name')
    ordering = ('code',)


@admin.register(User)
class UserAdmin(SoftDeleteAdmin):
    list_display = ('username', 'is_deleted', 'created_at')
    list_filter = ('is_deleted',)
    search_fields = ('username',)
    readonly_fields = ('id', 'password_hash', 'created_at', 'updated_at')


@admin.register(Wallet)
class WalletAdmin(SoftDeleteAdmin):
    list_display = ('name', 'user', 'base_currency', 'is_deleted', 'created_at')
    list_filter = ('base_currency', 'is_deleted')
    search_fields = ('name', 'user__username')
    readonly_fields = ('id', 'created_at', 'updated_at')


@admin.register(FinancialOperationType)
class FinancialOperationTypeAdmin(admin.ModelAdmin):
    list_display = ('name', 'kind', 'user', 'created_at')
    list_filter = ('kind',)
    search_fields = ('name', 'user__username')
    readonly_fields = ('id', 'created_at', 'updated_at')


@admin.register(FinancialOperation)
class FinancialOperationAdmin(SoftDeleteAdmin):
    list_display = (
        'date',
        'wallet',
        'type',
        'amount_original',
        'currency_original',
        'amount_base',
        'is_deleted',
    )
    list_filter = ('type__kind', 'is_deleted', 'date')
    search_fields = ('note', 'wallet__name', 'type__name')
    date_hierarchy = 'date'
    readonly_fields = ('id', 'created_at', 'updated_at')
    ordering = ('-date', '-created_at')
