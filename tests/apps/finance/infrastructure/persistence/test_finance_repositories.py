import pytest
from datetime import date

from apps.finance.infrastructure.persistence.models import (
    FinancialOperation,
    FinancialOperationType,
    OperationKind,
    User,
    Wallet,
)


@pytest.mark.django_db
class TestUserRepository:
    """Tests for UserRepository."""

    def test_soft_deleted_user_is_hidden(self, uow, user):
        uow.users.soft_delete(user)
        uow.save_changes()

        assert uow.users.get_by_id(user.id) is None
        assert uow.users.get_by_username("alice") is None
        assert User.all_objects.filter(id=user.id, is_deleted=True).exists()

    def test_username_lookup_is_case_sensitive(self, uow, user):
        assert uow.users.get_by_username("Alice") is None
        assert uow.users.get_by_username("alice") == user

    def test_is_username_taken_excludes_self(self, uow, user):
        assert uow.users.is_username_taken("alice")
        assert not uow.users.is_username_taken("alice", exclude_user_id=user.id)

    def test_username_reusable_after_soft_delete(self, uow, user):
        """Test the partial unique constraint only covers active users."""
        uow.users.soft_delete(user)
        uow.save_changes()

        assert not uow.users.is_username_taken("alice")
        User.objects.create(username="alice", password_hash="x")


@pytest.mark.django_db
class TestWalletRepository:
    """Tests for WalletRepository."""

    def test_get_by_id_for_user_is_scoped(self, uow, usd_wallet, other_user):
        assert uow.wallets.get_by_id_for_user(usd_wallet.user_id, usd_wallet.id) == usd_wallet
        assert uow.wallets.get_by_id_for_user(other_user.id, usd_wallet.id) is None

    def test_exists_by_name(self, uow, usd_wallet):
        assert uow.wallets.exists_by_name(usd_wallet.user_id, "Main")
        assert uow.wallets.exists_by_name(usd_wallet.user_id, "  Main ")
        assert not uow.wallets.exists_by_name(usd_wallet.user_id, "Main", exclude_wallet_id=usd_wallet.id)

    def test_user_wallets_ordered_by_name(self, uow, user, currencies):
        Wallet.objects.create(user=user, name="Zeta", base_currency=currencies["USD"])
        Wallet.objects.create(user=user, name="Alpha", base_currency=currencies["EUR"])

        names = [w.name for w in uow.wallets.get_user_wallets(user.id)]

        assert names == ["Alpha", "Zeta"]


@pytest.mark.django_db
class TestCurrencyRepository:
    """Tests for CurrencyRepository."""

    def test_get_by_code_case_insensitive(self, uow, currencies):
        """Test get_by_code is case insensitive."""
        assert uow.currencies.get_by_code("usd").code == "USD"
        assert uow.currencies.exists("eur")
        assert not uow.currencies.exists("XXX")


@pytest.mark.django_db
class TestOperationTypeRepository:

    def test_exists_by_name_kind(self, uow, user, salary_type):
        assert uow.operation_types.exists_by_name_kind(user.id, "Salary", OperationKind.INCOME)
        assert not uow.operation_types.exists_by_name_kind(user.id, "Salary", OperationKind.EXPENSE)
        assert not uow.operation_types.exists_by_name_kind(
            user.id, "Salary", OperationKind.INCOME, exclude_type_id=salary_type.id
        )

    def test_is_referenced_counts_soft_deleted_operations(self, uow, usd_wallet, salary_type, make_operation):
        assert not uow.operation_types.is_referenced(salary_type.id)

        operation = make_operation(usd_wallet, salary_type, "10.00")
        operation.is_deleted = True
        operation.save()

        assert uow.operation_types.is_referenced(salary_type.id)

    def test_delete_is_physical(self, uow, salary_type):
        uow.operation_types.delete(salary_type)
        uow.save_changes()

        assert not FinancialOperationType.objects.filter(id=salary_type.id).exists()


@pytest.mark.django_db
class TestFinancialOperationRepository:
    """Tests for FinancialOperationRepository."""

    def test_period_is_inclusive(self, uow, usd_wallet, salary_type, make_operation):
        make_operation(usd_wallet, salary_type, "1.00", on=date(2024, 1, 1))
        make_operation(usd_wallet, salary_type, "2.00", on=date(2024, 1, 15))
        make_operation(usd_wallet, salary_type, "3.00", on=date(2024, 1, 31))
        make_operation(usd_wallet, salary_type, "4.00", on=date(2024, 2, 1))

        operations = uow.operations.get_list_by_period(usd_wallet.id, date(2024, 1, 1), date(2024, 1, 31))

        assert [str(op.amount_original) for op in operations] == ["1.00", "2.00", "3.00"]

    def test_soft_deleted_operations_excluded(self, uow, usd_wallet, salary_type, make_operation):
        operation = make_operation(usd_wallet, salary_type, "1.00")
        uow.operations.soft_delete(operation)
        uow.save_changes()

        assert uow.operations.get_wallet_operations(usd_wallet.id) == []
        assert FinancialOperation.all_objects.filter(id=operation.id).exists()

    def test_user_operations_page(self, uow, user, usd_wallet, salary_type, currencies, make_operation):
        other_wallet = Wallet.objects.create(user=user, name="Second", base_currency=currencies["EUR"])
        for day in range(1, 6):
            make_operation(usd_wallet, salary_type, "1.00", on=date(2024, 1, day))
        make_operation(other_wallet, salary_type, "9.00", on=date(2024, 1, 10))

        items, total = uow.operations.get_user_operations_page(user.id, offset=0, limit=2)

        assert total == 6
        assert [op.date for op in items] == [date(2024, 1, 10), date(2024, 1, 5)]

        items, total = uow.operations.get_user_operations_page(
            user.id, offset=0, limit=10, wallet_id=usd_wallet.id, date_from=date(2024, 1, 2), date_to=date(2024, 1, 3)
        )
        assert total == 2

    def test_user_operations_skip_deleted_wallets(self, uow, user, usd_wallet, salary_type, make_operation):
        make_operation(usd_wallet, salary_type, "1.00")
        uow.wallets.soft_delete(usd_wallet)
        uow.save_changes()

        items, total = uow.operations.get_user_operations_page(user.id, offset=0, limit=10)

        assert total == 0
        assert items == []
