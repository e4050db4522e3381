"""
Management command to poll the USD to Bs. exchange rate.

Meant to run hourly from cron or a scheduler so requests read the rate from
the cache instead of calling the source.

Usage:
    python manage.py refresh_exchange_rate
"""

from django.core.management.base import BaseCommand
from apps.analytics.exchange_rate import get_exchange_rate


class Command(BaseCommand):
    help = 'Fetch the current exchange rate and store it in the cache'

    def handle(self, *args, **options):
        rate = get_exchange_rate(force_refresh=True)

        if rate is None:
            self.stdout.write(
                self.style.WARNING('Exchange rate unavailable; cached as unknown.')
            )
            return

        self.stdout.write(self.style.SUCCESS(f'Exchange rate: Bs. {rate} per USD'))
