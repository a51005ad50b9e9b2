import logging
from typing import List
from uuid import UUID

from apps.finance.application.dto import WalletDTO
from apps.finance.application.validators import WalletCreateValidator, WalletUpdateValidator, validate_payload
from apps.finance.domain.exceptions import ConflictError, NotFoundError, ValidationError
from apps.finance.domain.models import UserContext
from apps.finance.infrastructure.persistence.models import Wallet
from apps.finance.infrastructure.persistence.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class WalletService:
    """Wallet CRUD scoped to the calling user."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def get_wallet(self, ctx: UserContext, wallet_id: UUID) -> WalletDTO:
        return WalletDTO.from_model(self.get_owned_wallet(ctx, wallet_id))

    def list_wallets(self, ctx: UserContext) -> List[WalletDTO]:
        return [WalletDTO.from_model(wallet) for wallet in self.uow.wallets.get_user_wallets(ctx.user_id)]

    def create_wallet(self, ctx: UserContext, payload: dict) -> UUID:
        data = validate_payload(WalletCreateValidator, payload)
        name = data["name"].strip()
        currency_code = data["base_currency_code"]

        if self.uow.wallets.exists_by_name(ctx.user_id, name):
            raise ConflictError(f"Wallet with name '{name}' already exists")

        currency = self.uow.currencies.get_by_code(currency_code)
        if currency is None:
            raise ValidationError.for_field(
                "base_currency_code",
                f"Currency code '{currency_code}' is not supported. "
                f"Use GET /api/currencies to see available currencies.",
            )

        wallet = Wallet(user_id=ctx.user_id, name=name, base_currency=currency)
        self.uow.wallets.add(wallet)
        self.uow.save_changes()

        logger.info("Wallet %s created for user %s", wallet.id, ctx.user_id)
        return wallet.id

    def update_wallet(self, ctx: UserContext, wallet_id: UUID, payload: dict) -> None:
        wallet = self.get_owned_wallet(ctx, wallet_id)
        data = validate_payload(WalletUpdateValidator, payload)
        name = data["name"].strip()

        if self.uow.wallets.exists_by_name(ctx.user_id, name, exclude_wallet_id=wallet.id):
            raise ConflictError(f"Wallet with name '{name}' already exists")

        wallet.name = name
        self.uow.wallets.update(wallet)
        self.uow.save_changes()
        logger.info("Wallet %s renamed", wallet.id)

    def delete_wallet(self, ctx: UserContext, wallet_id: UUID) -> None:
        wallet = self.get_owned_wallet(ctx, wallet_id)

        self.uow.wallets.soft_delete(wallet)
        self.uow.save_changes()
        logger.info("Wallet %s deleted", wallet.id)

    def get_owned_wallet(self, ctx: UserContext, wallet_id: UUID) -> Wallet:
        wallet = self.uow.wallets.get_by_id_for_user(ctx.user_id, wallet_id)
        if wallet is None:
            raise NotFoundError(f"Wallet with id {wallet_id} was not found")
        return wallet
