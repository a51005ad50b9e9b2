"""
Response serializers for the finance API.
They render application DTOs; request validation happens in the services.
"""

from rest_framework import serializers


class IdSerializer(serializers.Serializer):
    id = serializers.UUIDField()


class TokenSerializer(serializers.Serializer):
    token = serializers.CharField()


class UserSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    username = serializers.CharField()


class WalletSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    base_currency_code = serializers.CharField()


class CurrencySerializer(serializers.Serializer):
    code = serializers.CharField()
    name = serializers.CharField()
    symbol = serializers.CharField(allow_blank=True)


class OperationTypeSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    kind = serializers.CharField()


class FinancialOperationDetailsSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    wallet_id = serializers.UUIDField()
    wallet_name = serializers.CharField()
    type_id = serializers.UUIDField()
    type_name = serializers.CharField()
    kind = serializers.CharField()
    amount_original = serializers.DecimalField(max_digits=18, decimal_places=2)
    currency_original_code = serializers.CharField()
    amount_base = serializers.DecimalField(max_digits=18, decimal_places=2)
    base_currency_code = serializers.CharField()
    date = serializers.DateField()
    note = serializers.CharField(allow_blank=True)


class PagedFinancialOperationSerializer(serializers.Serializer):
    items = FinancialOperationDetailsSerializer(many=True)
    page = serializers.IntegerField()
    page_size = serializers.IntegerField()
    total_count = serializers.IntegerField()
    total_pages = serializers.IntegerField()


class CategoryAmountSerializer(serializers.Serializer):
    type_id = serializers.UUIDField()
    type_name = serializers.CharField()
    amount = serializers.DecimalField(max_digits=18, decimal_places=2)


class FinanceReportSerializer(serializers.Serializer):
    wallet_id = serializers.UUIDField()
    wallet_name = serializers.CharField()
    currency_code = serializers.CharField()
    start = serializers.DateField()
    end = serializers.DateField()
    total_income = serializers.DecimalField(max_digits=18, decimal_places=2)
    total_expense = serializers.DecimalField(max_digits=18, decimal_places=2)
    net = serializers.DecimalField(max_digits=18, decimal_places=2)
    income_by_category = CategoryAmountSerializer(many=True)
    expense_by_category = CategoryAmountSerializer(many=True)
    operations = FinancialOperationDetailsSerializer(many=True)
