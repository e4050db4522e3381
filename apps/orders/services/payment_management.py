"""Payment management service - recording and removing partial payments."""

from datetime import datetime
from decimal import Decimal
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone
from uuid import UUID
from typing import Optional
import structlog

from apps.accounts.models import User
from apps.orders.ledger import should_auto_close, to_money
from apps.orders.models import Order, OrderStatus, Payment
from .exceptions import PaymentNotFoundError, InvalidPaymentAmountError
from .order_management import get_order_for_user

logger = structlog.get_logger(__name__)


@transaction.atomic
def record_payment(
    *,
    user: User,
    order_id: UUID,
    amount: Decimal,
    reference_number: str = '',
    payment_image_url: str = '',
    payment_date: Optional[datetime] = None,
) -> tuple[Payment, Order]:
    """
    Record a payment and close the order when it is fully paid.

    This operation:
    1. Locks the order row (SELECT FOR UPDATE)
    2. Reads the payments already recorded
    3. Inserts the new payment
    4. Flips the order to paid when the total now covers the sale price

    Both writes happen in one transaction: if the status update fails the
    payment is rolled back too, so a covered order is never left pending.

    Args:
        user: Owner of the order
        order_id: UUID of the order being paid
        amount: Payment amount, must be > 0
        reference_number: Optional bank reference
        payment_image_url: Optional receipt image URL
        payment_date: Defaults to now

    Returns:
        Tuple of (created Payment, refreshed Order)

    Raises:
        OrderNotFoundError: If the order doesn't exist or isn't the user's
        InvalidPaymentAmountError: If amount <= 0
    """
    amount = to_money(amount)
    if amount <= 0:
        raise InvalidPaymentAmountError("Payment amount must be greater than zero")

    order = get_order_for_user(user=user, order_id=order_id, lock=True)
    existing = list(order.payments.all())

    payment = Payment.objects.create(
        order=order,
        user=user,
        amount=amount,
        reference_number=reference_number,
        payment_image_url=payment_image_url,
        payment_date=payment_date or timezone.now(),
    )

    if order.status == OrderStatus.PENDING and should_auto_close(order, existing, amount):
        order.status = OrderStatus.PAID
        order.save(update_fields=['status', 'updated_at'])
        logger.info('order_auto_closed', order_id=str(order.id))

    logger.info(
        'payment_recorded',
        payment_id=str(payment.id),
        order_id=str(order.id),
        amount=str(amount),
    )
    return payment, order


def get_payment_for_user(*, user: User, payment_id: UUID) -> Payment:
    """
    Raises:
        PaymentNotFoundError: If the payment doesn't exist or isn't the user's
    """
    try:
        return Payment.objects.select_related('order').get(id=payment_id, user=user)
    except Payment.DoesNotExist:
        raise PaymentNotFoundError("Payment not found")


def list_payments(*, user: User, order_id: UUID) -> QuerySet:
    """Payments of one of the user's orders, most recent first."""
    order = get_order_for_user(user=user, order_id=order_id)
    return order.payments.all()


@transaction.atomic
def delete_payment(*, user: User, payment_id: UUID) -> None:
    """
    Hard-delete a payment.

    The order status is not touched: an order closed by this payment stays
    paid until the owner edits it.
    """
    payment = get_payment_for_user(user=user, payment_id=payment_id)
    order_id = payment.order_id
    payment.delete()

    logger.info('payment_deleted', payment_id=str(payment_id), order_id=str(order_id))
