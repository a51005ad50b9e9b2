import pytest

from apps.finance.application.services.wallets import WalletService
from apps.finance.domain.exceptions import ConflictError, NotFoundError, ValidationError
from apps.finance.infrastructure.persistence.models import Wallet


@pytest.mark.django_db
class TestWalletService:
    """Tests for WalletService."""

    def test_create_wallet(self, uow, ctx, currencies):
        wallet_id = WalletService(uow).create_wallet(ctx, {"name": " Travel ", "base_currency_code": "EUR"})

        wallet = Wallet.objects.get(id=wallet_id)
        assert wallet.name == "Travel"
        assert wallet.base_currency_code == "EUR"
        assert wallet.user_id == ctx.user_id

    def test_duplicate_name_conflicts(self, uow, ctx, currencies):
        service = WalletService(uow)
        service.create_wallet(ctx, {"name": "Travel", "base_currency_code": "EUR"})

        with pytest.raises(ConflictError):
            service.create_wallet(ctx, {"name": "Travel", "base_currency_code": "USD"})

    def test_same_name_for_another_user(self, uow, ctx, other_user, currencies):
        Wallet.objects.create(user=other_user, name="Travel", base_currency=currencies["EUR"])

        WalletService(uow).create_wallet(ctx, {"name": "Travel", "base_currency_code": "EUR"})

    def test_unknown_currency_is_validation_error(self, uow, ctx, currencies):
        with pytest.raises(ValidationError) as exc_info:
            WalletService(uow).create_wallet(ctx, {"name": "Travel", "base_currency_code": "CHF"})

        assert "base_currency_code" in exc_info.value.errors

    def test_get_wallet_of_another_user(self, uow, ctx, other_user, currencies):
        foreign = Wallet.objects.create(user=other_user, name="Theirs", base_currency=currencies["USD"])

        with pytest.raises(NotFoundError):
            WalletService(uow).get_wallet(ctx, foreign.id)

    def test_rename_checks_uniqueness(self, uow, ctx, usd_wallet, currencies):
        Wallet.objects.create(user=usd_wallet.user, name="Savings", base_currency=currencies["PLN"])

        with pytest.raises(ConflictError):
            WalletService(uow).update_wallet(ctx, usd_wallet.id, {"name": "Savings"})

    def test_rename(self, uow, ctx, usd_wallet):
        WalletService(uow).update_wallet(ctx, usd_wallet.id, {"name": "Daily"})

        usd_wallet.refresh_from_db()
        assert usd_wallet.name == "Daily"

    def test_delete_is_soft_and_frees_name(self, uow, ctx, usd_wallet):
        service = WalletService(uow)
        service.delete_wallet(ctx, usd_wallet.id)

        assert service.list_wallets(ctx) == []
        assert Wallet.all_objects.get(id=usd_wallet.id).is_deleted

        service.create_wallet(ctx, {"name": "Main", "base_currency_code": "USD"})
