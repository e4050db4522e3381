"""Status reconciliation - promote pending orders whose payments cover the sale price."""

from django.db import transaction
from typing import Optional
import structlog

from apps.accounts.models import User
from apps.orders.ledger import settled_status
from apps.orders.models import Order, OrderStatus

logger = structlog.get_logger(__name__)


def reconcile_order_status(order: Order) -> bool:
    """
    Bring one order's status in line with its payments.

    Returns:
        True if the status changed
    """
    expected = settled_status(order, order.payments.all())
    if expected == order.status:
        return False

    previous = order.status
    order.status = expected
    order.save(update_fields=['status', 'updated_at'])

    logger.info(
        'order_status_reconciled',
        order_id=str(order.id),
        previous=previous,
        status=expected,
    )
    return True


def find_unsettled_orders(*, user: Optional[User] = None) -> list[Order]:
    """Pending orders that are already fully paid."""
    queryset = Order.objects.filter(status=OrderStatus.PENDING).prefetch_related('payments')
    if user is not None:
        queryset = queryset.filter(user=user)

    return [
        order for order in queryset
        if settled_status(order, order.payments.all()) != order.status
    ]


@transaction.atomic
def reconcile_all(*, user: Optional[User] = None) -> list[Order]:
    """
    Idempotent sweep over pending orders, optionally for one user.

    Safe to run repeatedly; paid orders are never demoted.

    Returns:
        Orders whose status changed
    """
    changed = [order for order in find_unsettled_orders(user=user) if reconcile_order_status(order)]

    logger.info('reconciliation_finished', changed=len(changed))
    return changed
