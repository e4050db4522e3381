"""Order management service - CRUD operations for orders."""

from datetime import date
from decimal import Decimal
from django.db import transaction
from django.db.models import QuerySet
from uuid import UUID
from typing import Optional
import structlog

from apps.accounts.models import User
from apps.orders.ledger import compute_profit, search_by_customer, to_money
from apps.orders.models import Order, OrderStatus
from .exceptions import OrderNotFoundError, InvalidOrderDataError

logger = structlog.get_logger(__name__)


def _validate_order_fields(*, customer_name, purchase_price, sale_price, status):
    if not customer_name or not customer_name.strip():
        raise InvalidOrderDataError("Customer name is required")
    if purchase_price < 0:
        raise InvalidOrderDataError("Purchase price cannot be negative")
    if sale_price < 0:
        raise InvalidOrderDataError("Sale price cannot be negative")
    if status not in OrderStatus.values:
        raise InvalidOrderDataError(f"Invalid status: '{status}'")


@transaction.atomic
def create_order(
    *,
    user: User,
    customer_name: str,
    product_description: str,
    purchase_price: Decimal,
    sale_price: Decimal,
    order_date: Optional[date] = None,
    status: str = OrderStatus.PENDING,
) -> Order:
    """
    Create a new order owned by ``user``.

    Profit is always derived here from the two prices; callers cannot
    supply it.

    Raises:
        InvalidOrderDataError: If customer name is blank, a price is
            negative or the status is unknown
    """
    purchase_price = to_money(purchase_price)
    sale_price = to_money(sale_price)
    _validate_order_fields(
        customer_name=customer_name,
        purchase_price=purchase_price,
        sale_price=sale_price,
        status=status,
    )

    fields = {
        'user': user,
        'customer_name': customer_name.strip(),
        'product_description': product_description,
        'purchase_price': purchase_price,
        'sale_price': sale_price,
        'profit': compute_profit(purchase_price, sale_price),
        'status': status,
    }
    if order_date is not None:
        fields['order_date'] = order_date

    order = Order.objects.create(**fields)

    logger.info(
        'order_created',
        order_id=str(order.id),
        user_id=str(user.id),
        sale_price=str(order.sale_price),
    )
    return order


def get_order_for_user(*, user: User, order_id: UUID, lock: bool = False) -> Order:
    """
    Fetch one of the user's orders.

    Args:
        user: Owner
        order_id: UUID of the order
        lock: Take a row lock (only meaningful inside a transaction)

    Raises:
        OrderNotFoundError: If the order doesn't exist or isn't the user's
    """
    queryset = Order.objects.filter(user=user)
    if lock:
        queryset = queryset.select_for_update()

    try:
        return queryset.get(id=order_id)
    except Order.DoesNotExist:
        raise OrderNotFoundError("Order not found")


@transaction.atomic
def update_order(
    *,
    user: User,
    order_id: UUID,
    customer_name: str,
    product_description: str,
    purchase_price: Decimal,
    sale_price: Decimal,
    order_date: date,
    status: str,
) -> Order:
    """
    Replace every editable field of an order and recompute its profit.

    Raises:
        OrderNotFoundError: If the order doesn't exist or isn't the user's
        InvalidOrderDataError: If the new values break a business rule
    """
    order = get_order_for_user(user=user, order_id=order_id, lock=True)

    purchase_price = to_money(purchase_price)
    sale_price = to_money(sale_price)
    _validate_order_fields(
        customer_name=customer_name,
        purchase_price=purchase_price,
        sale_price=sale_price,
        status=status,
    )

    order.customer_name = customer_name.strip()
    order.product_description = product_description
    order.purchase_price = purchase_price
    order.sale_price = sale_price
    order.profit = compute_profit(purchase_price, sale_price)
    order.order_date = order_date
    order.status = status
    order.save()

    logger.info('order_updated', order_id=str(order.id), status=order.status)
    return order


@transaction.atomic
def delete_order(*, user: User, order_id: UUID) -> None:
    """
    Hard-delete an order. Its payments are deleted with it.

    Raises:
        OrderNotFoundError: If the order doesn't exist or isn't the user's
    """
    order = get_order_for_user(user=user, order_id=order_id)
    payment_count = order.payments.count()
    order.delete()

    logger.info(
        'order_deleted',
        order_id=str(order_id),
        payments_deleted=payment_count,
    )


def list_orders(
    *,
    user: User,
    search: str = '',
    status: Optional[str] = None,
) -> QuerySet:
    """
    The user's orders with payments prefetched, newest first.

    ``search`` is a case-insensitive substring of the customer name, matched
    by :func:`apps.orders.ledger.search_by_customer`. SQLite's LIKE only
    folds ASCII, so the match runs in Python and the result is narrowed by id.
    """
    queryset = Order.objects.filter(user=user).prefetch_related('payments')

    if search:
        candidates = queryset.only('id', 'customer_name').prefetch_related(None)
        matched = [o.id for o in search_by_customer(candidates, search)]
        queryset = queryset.filter(id__in=matched)
    if status:
        queryset = queryset.filter(status=status)

    return queryset
