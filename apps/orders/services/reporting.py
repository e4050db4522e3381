"""Order reporting - customer debt, list totals and per-order summaries."""

from uuid import UUID
from typing import Optional

from apps.accounts.models import User
from apps.orders.ledger import (
    aggregate,
    customer_debt,
    order_entry_from_model,
    remaining,
    total_paid,
)
from apps.orders.models import Order
from .order_management import get_order_for_user, list_orders


def get_customer_debt(*, user: User, name: str) -> dict:
    """
    Debt of one customer across the user's orders.

    Matching is exact but case-insensitive: "ana" finds "Ana" and "ANA",
    not "Mariana".

    Returns:
        Dictionary with:
        - customer_name: str - the name as queried
        - total_debt: Decimal - remaining balance of pending orders
        - order_count: int - every matching order, paid or pending
    """
    # SQLite's iexact only folds ASCII, so the match runs on the snapshots
    orders = Order.objects.filter(user=user).prefetch_related('payments')

    entries = [order_entry_from_model(o) for o in orders]
    debt = customer_debt(entries, name.strip())

    return {
        'customer_name': name.strip(),
        'total_debt': debt.total_debt,
        'order_count': debt.order_count,
    }


def get_order_totals(
    *,
    user: User,
    search: str = '',
    status: Optional[str] = None,
) -> dict:
    """
    Investment and profit of the orders currently listed.

    Uses the same filters as the order list so the header matches the rows.
    """
    entries = [
        order_entry_from_model(o)
        for o in list_orders(user=user, search=search, status=status)
    ]
    stats = aggregate(entries)

    return {
        'total_investment': stats.total_investment,
        'total_profit': stats.total_profit,
        'order_count': stats.order_count,
    }


def get_order_summary(*, user: User, order_id: UUID) -> dict:
    """
    Payment status of a single order.

    Raises:
        OrderNotFoundError: If the order doesn't exist or isn't the user's
    """
    order = get_order_for_user(user=user, order_id=order_id)
    payments = list(order.payments.all())

    return {
        'order': order,
        'total_amount': order.sale_price,
        'paid_amount': total_paid(payments),
        'remaining_amount': remaining(order, payments),
        'payment_count': len(payments),
        'payments': payments,
    }
