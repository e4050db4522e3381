"""
Statistics Module
=================

Dashboard figures for one user's orders over a recent window: revenue,
investment, profit, amounts collected and outstanding, profit margin and the
same money figures converted to Bs. at the current exchange rate.

Example:
    Last month's figures::

        from apps.analytics.statistics import get_statistics

        stats = get_statistics(user=request.user, period='month')
        print(stats['total_profit'], stats['profit_margin'])

Note:
    This module is read-only. Database errors propagate to the caller; an
    empty result always means the user has no orders in the window.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from django.utils import timezone

from apps.accounts.models import User
from apps.orders.ledger import (
    aggregate,
    order_entry_from_model,
    period_filter,
    period_start,
)
from apps.orders.exceptions import InvalidPeriodError as LedgerPeriodError
from apps.orders.models import Order
from .exceptions import InvalidPeriodError
from .exchange_rate import get_exchange_rate

CENTS = Decimal('0.01')

CONVERTED_FIELDS = (
    'total_revenue',
    'total_investment',
    'total_profit',
    'total_paid',
    'outstanding',
)


def convert_totals(figures: dict, rate: Optional[Decimal]) -> Optional[dict]:
    """Money figures in Bs., rounded to cents; ``None`` when the rate is unknown."""
    if rate is None:
        return None
    return {
        name: (figures[name] * rate).quantize(CENTS)
        for name in CONVERTED_FIELDS
    }


def get_statistics(
    *,
    user: User,
    period: str,
    now: Optional[date] = None,
) -> dict:
    """
    Aggregate the user's orders dated inside ``period``.

    Args:
        user: Owner of the orders
        period: ``week``, ``month`` or ``year``
        now: End of the window, defaults to today in the configured time zone

    Returns:
        Dictionary with:
        - period, start_date, end_date
        - total_revenue, total_investment, total_profit, total_paid,
          outstanding: Decimal (USD)
        - order_count, paid_order_count, pending_order_count: int
        - profit_margin: Decimal ratio, profit_margin_percent: Decimal
        - exchange_rate: Decimal or None
        - converted: Bs. figures, or None when the rate is unknown

    Raises:
        InvalidPeriodError: If period is not week, month or year
    """
    now = now or timezone.localdate()
    try:
        start = period_start(period, now)
    except LedgerPeriodError as e:
        raise InvalidPeriodError(str(e)) from e

    # Narrow in SQL, then let the ledger apply the exact window rule
    orders = (
        Order.objects
        .filter(user=user, order_date__gte=start)
        .prefetch_related('payments')
    )
    entries = period_filter([order_entry_from_model(o) for o in orders], period, now)
    stats = aggregate(entries)

    figures = {
        'total_revenue': stats.total_revenue,
        'total_investment': stats.total_investment,
        'total_profit': stats.total_profit,
        'total_paid': stats.total_paid,
        'outstanding': stats.outstanding,
    }
    rate = get_exchange_rate()

    return {
        'period': period,
        'start_date': start,
        'end_date': now,
        **figures,
        'order_count': stats.order_count,
        'paid_order_count': stats.paid_order_count,
        'pending_order_count': stats.pending_order_count,
        'profit_margin': stats.profit_margin,
        'profit_margin_percent': (stats.profit_margin * 100).quantize(CENTS),
        'exchange_rate': rate,
        'converted': convert_totals(figures, rate),
    }
