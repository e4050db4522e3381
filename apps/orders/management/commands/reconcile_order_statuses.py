"""
Management command to close pending orders whose payments already cover them.

Repairs orders left pending when a payment was stored but the status update
never happened. Paid orders are never reopened.

Usage:
    python manage.py reconcile_order_statuses
    python manage.py reconcile_order_statuses --user alice@example.com --dry-run
"""

from django.core.management.base import BaseCommand, CommandError
from apps.accounts.models import User
from apps.orders.ledger import total_paid
from apps.orders.services import find_unsettled_orders, reconcile_all


class Command(BaseCommand):
    help = 'Mark pending orders as paid when their payments cover the sale price'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be updated without making changes',
        )
        parser.add_argument(
            '--user',
            metavar='EMAIL',
            help='Only reconcile orders of this user',
        )

    def handle(self, *args, **options):
        user = None
        if options['user']:
            try:
                user = User.objects.get(email=User.objects.normalize_email(options['user']))
            except User.DoesNotExist:
                raise CommandError(f"User '{options['user']}' does not exist")

        unsettled = find_unsettled_orders(user=user)

        if not unsettled:
            self.stdout.write(
                self.style.SUCCESS('No orders need reconciling. All good!')
            )
            return

        self.stdout.write(f'\nFound {len(unsettled)} fully paid order(s) still pending:\n')

        for order in unsettled:
            self.stdout.write(
                f'  - {order.customer_name} | {order.sale_price} USD | '
                f'Paid: {total_paid(order.payments.all())} USD | Date: {order.order_date}'
            )

        if options['dry_run']:
            self.stdout.write(
                self.style.WARNING('\n--dry-run mode: No changes made.')
            )
            return

        changed = reconcile_all(user=user)

        self.stdout.write(
            self.style.SUCCESS(f'\nMarked {len(changed)} order(s) as paid.')
        )
