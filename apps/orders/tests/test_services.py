import pytest
from decimal import Decimal
from datetime import date
from io import StringIO
from unittest import mock
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError
from apps.orders.models import Order, Payment, OrderStatus
from apps.orders.services import (
    create_order,
    update_order,
    delete_order,
    get_order_for_user,
    list_orders,
    record_payment,
    delete_payment,
    reconcile_all,
    find_unsettled_orders,
    get_customer_debt,
    get_order_totals,
    get_order_summary,
    OrderNotFoundError,
    PaymentNotFoundError,
    InvalidOrderDataError,
    InvalidPaymentAmountError,
)


# =============================================================================
# Order Management
# =============================================================================

@pytest.mark.django_db
class TestOrderManagement:

    def test_create_derives_profit(self, seller):
        order = create_order(
            user=seller,
            customer_name='  Ana ',
            product_description='Perfume',
            purchase_price=Decimal('35.50'),
            sale_price=Decimal('60.00'),
        )
        assert order.profit == Decimal('24.50')
        assert order.customer_name == 'Ana'
        assert order.status == OrderStatus.PENDING

    def test_create_rejects_blank_customer(self, seller):
        with pytest.raises(InvalidOrderDataError):
            create_order(
                user=seller,
                customer_name='   ',
                product_description='',
                purchase_price=Decimal('1'),
                sale_price=Decimal('2'),
            )

    def test_create_rejects_negative_price(self, seller):
        with pytest.raises(InvalidOrderDataError):
            create_order(
                user=seller,
                customer_name='Ana',
                product_description='',
                purchase_price=Decimal('-1'),
                sale_price=Decimal('2'),
            )

    def test_update_recomputes_profit(self, seller, order):
        updated = update_order(
            user=seller,
            order_id=order.id,
            customer_name='Ana',
            product_description='Zapatos talla 39',
            purchase_price=Decimal('70.00'),
            sale_price=Decimal('90.00'),
            order_date=date(2024, 3, 2),
            status=OrderStatus.PENDING,
        )
        assert updated.profit == Decimal('20.00')
        order.refresh_from_db()
        assert order.profit == Decimal('20.00')
        assert order.order_date == date(2024, 3, 2)

    def test_update_foreign_order(self, seller, foreign_order):
        with pytest.raises(OrderNotFoundError):
            update_order(
                user=seller,
                order_id=foreign_order.id,
                customer_name='Ana',
                product_description='',
                purchase_price=Decimal('1'),
                sale_price=Decimal('2'),
                order_date=date(2024, 1, 1),
                status=OrderStatus.PENDING,
            )

    def test_delete_cascades_payments(self, seller, order_with_payments):
        delete_order(user=seller, order_id=order_with_payments.id)
        assert not Order.objects.filter(id=order_with_payments.id).exists()
        assert Payment.objects.count() == 0

    def test_get_foreign_order(self, seller, foreign_order):
        with pytest.raises(OrderNotFoundError):
            get_order_for_user(user=seller, order_id=foreign_order.id)

    def test_list_search_is_substring(self, seller, order):
        create_order(
            user=seller,
            customer_name='Mariana',
            product_description='',
            purchase_price=Decimal('1'),
            sale_price=Decimal('2'),
        )
        names = set(list_orders(user=seller, search='ana').values_list('customer_name', flat=True))
        assert names == {'Ana', 'Mariana'}

    def test_list_search_folds_accents(self, seller, order):
        angela = create_order(
            user=seller,
            customer_name='Ángela',
            product_description='Cartera',
            purchase_price=Decimal('10'),
            sale_price=Decimal('25'),
        )
        assert list(list_orders(user=seller, search='ángela')) == [angela]
        assert get_order_totals(user=seller, search='ÁNGELA')['order_count'] == 1

    def test_list_filters_status(self, seller, order, paid_order):
        assert list(list_orders(user=seller, status=OrderStatus.PAID)) == [paid_order]

    def test_list_read_failure_propagates(self, seller):
        """A failed read is an error, never an empty list."""
        with mock.patch.object(Order.objects, 'filter', side_effect=DatabaseError('down')):
            with pytest.raises(DatabaseError):
                list(list_orders(user=seller))


# =============================================================================
# Payment Recording
# =============================================================================

@pytest.mark.django_db
class TestRecordPayment:

    def test_partial_payment_keeps_pending(self, seller, order_with_payments):
        payment, order = record_payment(
            user=seller,
            order_id=order_with_payments.id,
            amount=Decimal('10.00'),
        )
        assert payment.amount == Decimal('10.00')
        assert order.status == OrderStatus.PENDING

    def test_final_payment_closes_order(self, seller, order_with_payments):
        _, order = record_payment(
            user=seller,
            order_id=order_with_payments.id,
            amount=Decimal('20.00'),
            reference_number='REF-001',
        )
        assert order.status == OrderStatus.PAID
        order_with_payments.refresh_from_db()
        assert order_with_payments.status == OrderStatus.PAID

    def test_rejects_zero_amount(self, seller, order):
        with pytest.raises(InvalidPaymentAmountError):
            record_payment(user=seller, order_id=order.id, amount=Decimal('0'))
        assert order.payments.count() == 0

    def test_foreign_order(self, seller, foreign_order):
        with pytest.raises(OrderNotFoundError):
            record_payment(user=seller, order_id=foreign_order.id, amount=Decimal('1'))

    def test_status_failure_rolls_back_payment(self, seller, order_with_payments):
        """Payment and status change commit together or not at all."""
        with mock.patch.object(Order, 'save', side_effect=DatabaseError('write failed')):
            with pytest.raises(DatabaseError):
                record_payment(
                    user=seller,
                    order_id=order_with_payments.id,
                    amount=Decimal('20.00'),
                )

        assert order_with_payments.payments.count() == 2
        order_with_payments.refresh_from_db()
        assert order_with_payments.status == OrderStatus.PENDING

    def test_delete_payment_keeps_status(self, seller, order_with_payments):
        payment, _ = record_payment(
            user=seller,
            order_id=order_with_payments.id,
            amount=Decimal('20.00'),
        )
        delete_payment(user=seller, payment_id=payment.id)

        order_with_payments.refresh_from_db()
        assert order_with_payments.status == OrderStatus.PAID
        assert order_with_payments.payments.count() == 2

    def test_delete_foreign_payment(self, other_seller, order_with_payments):
        payment = order_with_payments.payments.first()
        with pytest.raises(PaymentNotFoundError):
            delete_payment(user=other_seller, payment_id=payment.id)


# =============================================================================
# Reconciliation
# =============================================================================

@pytest.mark.django_db
class TestReconciliation:

    @pytest.fixture
    def stuck_order(self, seller, order_with_payments):
        """Fully paid but still pending, as after a half-finished write."""
        Payment.objects.create(order=order_with_payments, user=seller, amount=Decimal('20.00'))
        return order_with_payments

    def test_promotes_covered_orders(self, stuck_order):
        assert find_unsettled_orders() == [stuck_order]
        changed = reconcile_all()
        assert changed == [stuck_order]
        stuck_order.refresh_from_db()
        assert stuck_order.status == OrderStatus.PAID

    def test_is_idempotent(self, stuck_order):
        reconcile_all()
        assert reconcile_all() == []

    def test_never_demotes(self, paid_order):
        reconcile_all()
        paid_order.refresh_from_db()
        assert paid_order.status == OrderStatus.PAID

    def test_scoped_to_user(self, other_seller, stuck_order):
        assert reconcile_all(user=other_seller) == []
        stuck_order.refresh_from_db()
        assert stuck_order.status == OrderStatus.PENDING


# =============================================================================
# Reporting
# =============================================================================

@pytest.mark.django_db
class TestReporting:

    @pytest.fixture
    def ana_orders(self, seller):
        closed = Order.objects.create(
            user=seller, customer_name='Ana', product_description='',
            purchase_price=Decimal('20'), sale_price=Decimal('50'), profit=Decimal('30'),
            status=OrderStatus.PAID,
        )
        partly = Order.objects.create(
            user=seller, customer_name='ana', product_description='',
            purchase_price=Decimal('10'), sale_price=Decimal('30'), profit=Decimal('20'),
        )
        Payment.objects.create(order=partly, user=seller, amount=Decimal('10'))
        unpaid = Order.objects.create(
            user=seller, customer_name='ANA', product_description='',
            purchase_price=Decimal('5'), sale_price=Decimal('20'), profit=Decimal('15'),
        )
        Order.objects.create(
            user=seller, customer_name='Mariana', product_description='',
            purchase_price=Decimal('5'), sale_price=Decimal('90'), profit=Decimal('85'),
        )
        return [closed, partly, unpaid]

    def test_customer_debt(self, seller, ana_orders):
        debt = get_customer_debt(user=seller, name='ANA')
        assert debt['total_debt'] == Decimal('40')
        assert debt['order_count'] == 3

    def test_customer_debt_ignores_other_users(self, seller, foreign_order):
        debt = get_customer_debt(user=seller, name='Ana')
        assert debt['order_count'] == 0
        assert debt['total_debt'] == Decimal('0')

    def test_totals_follow_filters(self, seller, ana_orders):
        totals = get_order_totals(user=seller, search='mari')
        assert totals['total_investment'] == Decimal('5')
        assert totals['total_profit'] == Decimal('85')
        assert totals['order_count'] == 1

    def test_order_summary(self, seller, order_with_payments):
        summary = get_order_summary(user=seller, order_id=order_with_payments.id)
        assert summary['total_amount'] == Decimal('100.00')
        assert summary['paid_amount'] == Decimal('80.00')
        assert summary['remaining_amount'] == Decimal('20.00')
        assert summary['payment_count'] == 2


# =============================================================================
# Management Commands
# =============================================================================

@pytest.mark.django_db
class TestReconcileCommand:

    @pytest.fixture
    def stuck_order(self, seller, order_with_payments):
        Payment.objects.create(order=order_with_payments, user=seller, amount=Decimal('20.00'))
        return order_with_payments

    def test_dry_run_changes_nothing(self, stuck_order):
        out = StringIO()
        call_command('reconcile_order_statuses', '--dry-run', stdout=out)

        assert 'Ana' in out.getvalue()
        stuck_order.refresh_from_db()
        assert stuck_order.status == OrderStatus.PENDING

    def test_marks_orders_paid(self, seller, stuck_order):
        out = StringIO()
        call_command('reconcile_order_statuses', '--user', seller.email, stdout=out)

        assert 'Marked 1 order(s) as paid' in out.getvalue()
        stuck_order.refresh_from_db()
        assert stuck_order.status == OrderStatus.PAID

    def test_unknown_user(self):
        with pytest.raises(CommandError):
            call_command('reconcile_order_statuses', '--user', 'nobody@example.com')
