from django.core.management.base import BaseCommand, CommandError

from apps.finance.application.tasks import refresh_currency_catalog


class Command(BaseCommand):
    help = 'Refresh the currency catalog from the configured catalog provider'

    def add_arguments(self, parser):
        parser.add_argument(
            '--provider',
            dest='provider_name',
            type=str,
            default=None,
            help='Catalog provider name (static, freecurrency); defaults to CURRENCY_CATALOG_PROVIDER'
        )
        parser.add_argument(
            '--sync',
            action='store_true',
            help='Execute synchronously instead of using Celery task queue'
        )

    def handle(self, **options):
        provider_name = options['provider_name']

        if not options['sync']:
            self.stdout.write('Dispatching Celery task...')
            task = refresh_currency_catalog.delay(provider_name)
            self.stdout.write(self.style.SUCCESS(f'Task dispatched with ID: {task.id}'))
            return

        self.stdout.write('Running in synchronous mode...')
        result = refresh_currency_catalog(provider_name)

        if not result['success']:
            raise CommandError(f"Failed: {result.get('message', 'Unknown error')}")

        self.stdout.write(
            self.style.SUCCESS(
                f"Currency catalog refreshed: {result['created']} created, {result['updated']} updated"
            )
        )
