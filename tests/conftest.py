import uuid
from decimal import Decimal
from datetime import date
from unittest.mock import Mock

import pytest
from rest_framework.test import APIClient

from apps.finance.domain.interfaces import BaseExchangeRateProvider
from apps.finance.domain.models import UserContext
from apps.finance.infrastructure.persistence.models import (
    Currency,
    FinancialOperation,
    FinancialOperationType,
    OperationKind,
    User,
    Wallet,
)
from apps.finance.infrastructure.persistence.unit_of_work import UnitOfWork
from apps.finance.infrastructure.security.passwords import PasswordHasher
from apps.finance.infrastructure.security.tokens import TokenService


@pytest.fixture(autouse=True)
def fast_password_hashing(settings):
    """PBKDF2 is too slow for a test suite."""
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@pytest.fixture
def api_client():
    """DRF API client."""
    return APIClient()


@pytest.fixture
def currencies(db):
    """Create test currencies."""
    usd = Currency.objects.create(code="USD", name="US Dollar", symbol="$")
    eur = Currency.objects.create(code="EUR", name="Euro", symbol="€")
    pln = Currency.objects.create(code="PLN", name="Polish Zloty", symbol="zł")
    return {"USD": usd, "EUR": eur, "PLN": pln}


@pytest.fixture
def user(db):
    return User.objects.create(username="alice", password_hash=PasswordHasher().hash_password("Secret1"))


@pytest.fixture
def other_user(db):
    return User.objects.create(username="bob", password_hash=PasswordHasher().hash_password("Secret1"))


@pytest.fixture
def ctx(user):
    return UserContext(user_id=user.id, username=user.username)


@pytest.fixture
def uow(db):
    return UnitOfWork()


@pytest.fixture
def usd_wallet(user, currencies):
    return Wallet.objects.create(user=user, name="Main", base_currency=currencies["USD"])


@pytest.fixture
def salary_type(user):
    return FinancialOperationType.objects.create(user=user, name="Salary", kind=OperationKind.INCOME)


@pytest.fixture
def groceries_type(user):
    return FinancialOperationType.objects.create(user=user, name="Groceries", kind=OperationKind.EXPENSE)


@pytest.fixture
def make_operation():
    """Insert an operation directly, bypassing conversion."""

    def _make(wallet, operation_type, amount, on=date(2024, 1, 15), currency=None, amount_base=None, note=""):
        amount = Decimal(amount)
        return FinancialOperation.objects.create(
            wallet=wallet,
            type=operation_type,
            amount_original=amount,
            currency_original_id=currency,
            amount_base=Decimal(amount_base) if amount_base is not None else amount,
            date=on,
            note=note,
        )

    return _make


@pytest.fixture
def rate_provider():
    """Exchange-rate provider stub returning a fixed rate."""
    provider = Mock(spec=BaseExchangeRateProvider)
    provider.get_exchange_rate_data.return_value = Decimal("1.08")
    return provider


@pytest.fixture
def auth_client(api_client, user):
    """API client authenticated as `user`."""
    token = TokenService().generate_token(user.id, user.username)
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return api_client


@pytest.fixture
def missing_id():
    return uuid.uuid4()
