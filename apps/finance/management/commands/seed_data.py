import uuid
from datetime import date, timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.finance.application.services.currencies import CurrencyService
from apps.finance.infrastructure.persistence.models import (
    Currency,
    FinancialOperation,
    FinancialOperationType,
    OperationKind,
    User,
    Wallet,
)
from apps.finance.infrastructure.persistence.unit_of_work import UnitOfWork
from apps.finance.infrastructure.providers.static_catalog import StaticCurrencyCatalogProvider
from apps.finance.infrastructure.security.passwords import PasswordHasher

ADMIN_USER_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")
REGULAR_USER_ID = uuid.UUID("22222222-2222-2222-2222-222222222222")

ADMIN_MAIN_WALLET_ID = uuid.UUID("11111111-1111-1111-1111-111111111112")
ADMIN_TRAVEL_WALLET_ID = uuid.UUID("11111111-1111-1111-1111-111111111113")
USER_SAVINGS_WALLET_ID = uuid.UUID("22222222-2222-2222-2222-222222222223")
USER_INVESTMENT_WALLET_ID = uuid.UUID("22222222-2222-2222-2222-222222222224")

SALARY_TYPE_ID = uuid.UUID("11111111-1111-1111-1111-111111111114")
GROCERIES_TYPE_ID = uuid.UUID("11111111-1111-1111-1111-111111111115")
FREELANCE_TYPE_ID = uuid.UUID("22222222-2222-2222-2222-222222222225")

DEMO_BASE_DATE = date(2025, 10, 1)


class Command(BaseCommand):
    help = 'Seed the currency catalog and, optionally, demo users, wallets and operations'

    def add_arguments(self, parser):
        parser.add_argument(
            '--demo',
            action='store_true',
            help='Also create demo users (admin, john_doe) with wallets, types and operations'
        )

    def handle(self, **options):
        self.seed_currencies()

        if options['demo']:
            with transaction.atomic():
                self.seed_demo_data()

    def seed_currencies(self):
        if Currency.objects.exists():
            self.stdout.write('Currencies already present, skipping')
            return

        result = CurrencyService(UnitOfWork()).refresh_catalog(StaticCurrencyCatalogProvider())
        self.stdout.write(self.style.SUCCESS(f'Seeded {result.created} currencies'))

    def seed_demo_data(self):
        if User.all_objects.exists():
            self.stdout.write('Users already present, skipping demo data')
            return

        hasher = PasswordHasher()
        admin = User.objects.create(
            id=ADMIN_USER_ID, username='admin', password_hash=hasher.hash_password('admin')
        )
        john = User.objects.create(
            id=REGULAR_USER_ID, username='john_doe', password_hash=hasher.hash_password('Password1')
        )

        main_wallet = Wallet.objects.create(
            id=ADMIN_MAIN_WALLET_ID, user=admin, name='Main USD Wallet', base_currency_id='USD'
        )
        Wallet.objects.create(id=ADMIN_TRAVEL_WALLET_ID, user=admin, name='Travel Wallet', base_currency_id='EUR')
        savings = Wallet.objects.create(
            id=USER_SAVINGS_WALLET_ID, user=john, name='Savings', base_currency_id='PLN'
        )
        Wallet.objects.create(id=USER_INVESTMENT_WALLET_ID, user=john, name='Investment', base_currency_id='JPY')

        salary = FinancialOperationType.objects.create(
            id=SALARY_TYPE_ID, user=admin, name='Salary',
            description='Monthly salary income', kind=OperationKind.INCOME,
        )
        groceries = FinancialOperationType.objects.create(
            id=GROCERIES_TYPE_ID, user=admin, name='Groceries',
            description='Food and household items', kind=OperationKind.EXPENSE,
        )
        freelance = FinancialOperationType.objects.create(
            id=FREELANCE_TYPE_ID, user=john, name='Freelance',
            description='Freelance project income', kind=OperationKind.INCOME,
        )

        demo_operations = [
            (main_wallet, salary, Decimal('5000.00'), 1, 'January salary'),
            (main_wallet, groceries, Decimal('150.00'), 2, 'Weekly groceries'),
            (main_wallet, groceries, Decimal('89.99'), 5, 'Supermarket'),
            (main_wallet, salary, Decimal('750.00'), 10, 'Bonus'),
            (savings, freelance, Decimal('3200.00'), 3, 'Website project'),
        ]
        FinancialOperation.objects.bulk_create([
            FinancialOperation(
                wallet=wallet,
                type=operation_type,
                amount_original=amount,
                amount_base=amount,
                date=DEMO_BASE_DATE + timedelta(days=offset),
                note=note,
            )
            for wallet, operation_type, amount, offset, note in demo_operations
        ])

        self.stdout.write(self.style.SUCCESS('Seeded demo users, wallets, operation types and operations'))
