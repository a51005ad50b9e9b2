"""
Input validation rule sets.

Each validator is a plain DRF Serializer used only for its field rules;
`validate_payload` runs one and raises the domain ValidationError with
every failing field collected.
"""

import re
from decimal import Decimal

from django.utils import timezone
from rest_framework import serializers

from apps.finance.domain.exceptions import ValidationError
from apps.finance.infrastructure.persistence.models import OperationKind

OPERATION_NOTE_MAX_LENGTH = 500
OPERATION_TYPE_NAME_MAX_LENGTH = 100
OPERATION_TYPE_DESCRIPTION_MAX_LENGTH = 500
USERNAME_MAX_LENGTH = 50
WALLET_NAME_MAX_LENGTH = 100
CURRENCY_CODE_LENGTH = 3
PASSWORD_MIN_LENGTH = 6

CURRENCY_CODE_PATTERN = re.compile(r"^[A-Z]{3}$")


def validate_password_strength(value: str) -> str:
    errors = []
    if len(value) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if not re.search(r"[A-Z]", value):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", value):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"\d", value):
        errors.append("Password must contain at least one digit")
    if errors:
        raise serializers.ValidationError(errors)
    return value


def validate_currency_code(value: str) -> str:
    if len(value) != CURRENCY_CODE_LENGTH:
        raise serializers.ValidationError("Currency code must be exactly 3 characters long")
    if not CURRENCY_CODE_PATTERN.match(value):
        raise serializers.ValidationError("Currency code must consist of uppercase letters only")
    return value


class PasswordField(serializers.CharField):

    def __init__(self, **kwargs):
        kwargs.setdefault("trim_whitespace", False)
        kwargs.setdefault("error_messages", {
            "required": "Password is required",
            "blank": "Password is required",
            "null": "Password is required",
        })
        super().__init__(**kwargs)


class RegisterValidator(serializers.Serializer):
    username = serializers.CharField(
        max_length=USERNAME_MAX_LENGTH,
        error_messages={
            "required": "Username is required",
            "blank": "Username is required",
            "max_length": f"Username cannot exceed {USERNAME_MAX_LENGTH} characters",
        },
    )
    password = PasswordField(validators=[validate_password_strength])


class LoginValidator(serializers.Serializer):
    username = serializers.CharField(
        error_messages={"required": "Username is required", "blank": "Username is required"},
    )
    password = PasswordField()


class UserUpdateValidator(serializers.Serializer):
    username = serializers.CharField(
        max_length=USERNAME_MAX_LENGTH,
        error_messages={
            "required": "Username is required",
            "blank": "Username is required",
            "max_length": f"Username cannot exceed {USERNAME_MAX_LENGTH} characters",
        },
    )


class ChangePasswordValidator(serializers.Serializer):
    current_password = PasswordField(validators=[validate_password_strength])
    new_password = PasswordField(validators=[validate_password_strength])


class WalletUpdateValidator(serializers.Serializer):
    name = serializers.CharField(
        max_length=WALLET_NAME_MAX_LENGTH,
        error_messages={
            "required": "Wallet name is required.",
            "blank": "Wallet name is required.",
            "max_length": f"Wallet name must not exceed {WALLET_NAME_MAX_LENGTH} characters.",
        },
    )


class WalletCreateValidator(WalletUpdateValidator):
    base_currency_code = serializers.CharField(
        validators=[validate_currency_code],
        error_messages={"required": "Currency code is required", "blank": "Currency code is required"},
    )


class OperationTypeUpdateValidator(serializers.Serializer):
    name = serializers.CharField(
        max_length=OPERATION_TYPE_NAME_MAX_LENGTH,
        error_messages={
            "required": "Name is required",
            "blank": "Name is required",
            "max_length": f"Name cannot exceed {OPERATION_TYPE_NAME_MAX_LENGTH} characters",
        },
    )
    description = serializers.CharField(
        max_length=OPERATION_TYPE_DESCRIPTION_MAX_LENGTH,
        required=False,
        allow_blank=True,
        allow_null=True,
        default="",
        error_messages={
            "max_length": f"Description cannot exceed {OPERATION_TYPE_DESCRIPTION_MAX_LENGTH} characters",
        },
    )


class OperationTypeCreateValidator(OperationTypeUpdateValidator):
    kind = serializers.ChoiceField(
        choices=OperationKind.choices,
        error_messages={
            "required": "Operation kind is required",
            "invalid_choice": "Invalid operation kind. Allowed values: Income, Expense",
        },
    )


class FinancialOperationUpsertValidator(serializers.Serializer):
    type_id = serializers.UUIDField(
        error_messages={"required": "Operation type is required", "null": "Operation type is required"},
    )
    amount_original = serializers.DecimalField(
        max_digits=18,
        decimal_places=2,
        error_messages={
            "required": "Amount is required",
            "max_digits": "Amount cannot exceed 18 digits in total",
            "max_decimal_places": "Amount can have maximum 2 decimal places",
        },
    )
    currency_original_code = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        default=None,
    )
    date = serializers.DateField(
        error_messages={"required": "Operation date is required", "null": "Operation date is required"},
    )
    note = serializers.CharField(
        max_length=OPERATION_NOTE_MAX_LENGTH,
        required=False,
        allow_blank=True,
        allow_null=True,
        default="",
        error_messages={"max_length": f"Note cannot exceed {OPERATION_NOTE_MAX_LENGTH} characters"},
    )

    def validate_amount_original(self, value: Decimal) -> Decimal:
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than 0")
        return value

    def validate_currency_original_code(self, value):
        # Empty means "use the wallet's base currency".
        if not value:
            return None
        return validate_currency_code(value)

    def validate_date(self, value):
        if value > timezone.localdate():
            raise serializers.ValidationError("Operation date cannot be in the future")
        return value


def validate_payload(validator_class, payload) -> dict:
    """
    Run a validator over raw input.

    Returns:
        The cleaned data

    Raises:
        ValidationError: with {field: [messages]} for every failing field
    """
    validator = validator_class(data=payload if payload is not None else {})
    if not validator.is_valid():
        raise ValidationError(_flatten_errors(validator.errors))
    return dict(validator.validated_data)


def _flatten_errors(errors) -> dict[str, list[str]]:
    flattened: dict[str, list[str]] = {}
    for field_name, messages in errors.items():
        if isinstance(messages, (list, tuple)):
            flattened[field_name] = [str(message) for message in messages]
        else:
            flattened[field_name] = [str(messages)]
    return flattened
