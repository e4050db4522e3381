"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data
    python manage.py create_sample_data --clear

This creates:
- 3 users (admin, alice, bob)
- Orders for several customers spread over the last months
- Partial payments, some of which settle their order
- A few notes
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from decimal import Decimal
from datetime import timedelta

from apps.accounts.models import User
from apps.notes.models import Note
from apps.orders.models import Order, Payment
from apps.orders.services import create_order, record_payment


class Command(BaseCommand):
    help = 'Create sample data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        self.create_orders(users['alice'])
        self.create_orders(users['bob'])
        self.create_notes(users)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        self.stdout.write('  alice@example.com / password123')
        self.stdout.write('  bob@example.com / password123')

    def clear_data(self):
        """Clear all data from the database."""
        Payment.objects.all().delete()
        Order.objects.all().delete()
        Note.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def create_users(self):
        """Create test users."""
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'display_name': 'Admin User',
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('admin123')
        admin.save()

        users = {'admin': admin}
        for key, display_name in [('alice', 'Alice Store'), ('bob', 'Bob Imports')]:
            user, _ = User.objects.get_or_create(
                email=f'{key}@example.com',
                defaults={'display_name': display_name}
            )
            user.set_password('password123')
            user.save()
            users[key] = user

        return users

    def create_orders(self, user):
        """Create orders with a mix of open and settled balances."""
        self.stdout.write(f'  Creating orders for {user.email}...')

        today = timezone.localdate()
        order_data = [
            # (customer, product, purchase, sale, days ago, payments)
            ('Ana', 'Zapatos deportivos talla 38', '30.00', '50.00', 2, ['20.00']),
            ('Ana', 'Bolso de cuero', '40.00', '70.00', 12, ['30.00', '40.00']),
            ('Luis', 'Audífonos inalámbricos', '25.00', '45.00', 5, []),
            ('Mariana', 'Perfume 100 ml', '35.00', '60.00', 20, ['60.00']),
            ('Carlos', 'Reloj digital', '15.00', '32.50', 45, ['10.00', '10.00']),
            ('Luis', 'Funda para teléfono', '3.00', '8.00', 200, ['8.00']),
        ]

        for customer, product, purchase, sale, days_ago, payments in order_data:
            order = create_order(
                user=user,
                customer_name=customer,
                product_description=product,
                purchase_price=Decimal(purchase),
                sale_price=Decimal(sale),
                order_date=today - timedelta(days=days_ago),
            )
            for index, amount in enumerate(payments):
                record_payment(
                    user=user,
                    order_id=order.id,
                    amount=Decimal(amount),
                    reference_number=f'REF{days_ago:03d}{index}',
                )

    def create_notes(self, users):
        """Create a couple of notes per user."""
        self.stdout.write('  Creating notes...')

        for key in ('alice', 'bob'):
            Note.objects.create(user=users[key], note_text='Pedir más tallas 38 al proveedor')
            Note.objects.create(user=users[key], note_text='Luis paga los viernes')
