"""
Ledger Module
=============

Pure computation of the financial figures derived from orders and their
payments: amount paid, remaining balance, customer debt, period windows and
dashboard aggregates.

Nothing here touches the database. Callers load rows, turn them into
immutable snapshots with :func:`order_entry_from_model` (or build
:class:`OrderEntry` directly) and pass the snapshots in. All money is
``Decimal``; floats are converted through ``str`` so ``0.1`` stays ``0.1``.

Key rules:
    - ``profit`` is persisted on the order and summed as stored, never
      recomputed during aggregation.
    - ``remaining`` may go negative on overpayment; it is never clamped.
    - Customer debt uses an exact (case-insensitive) name match, the search
      box uses a substring match. They are separate functions on purpose.
    - Month and year windows use calendar arithmetic and clamp to the last
      valid day of the target month.

Example:
    Dashboard numbers for the last month::

        from apps.orders.ledger import aggregate, period_filter

        entries = [order_entry_from_model(o) for o in orders]
        stats = aggregate(period_filter(entries, 'month', date.today()))
        print(stats.total_profit, stats.profit_margin)
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, NamedTuple, Optional, Sequence

from .exceptions import InvalidPeriodError

PENDING = 'pending'
PAID = 'paid'

ZERO = Decimal('0.00')
MARGIN_PLACES = Decimal('0.0001')

PERIOD_WEEK = 'week'
PERIOD_MONTH = 'month'
PERIOD_YEAR = 'year'
PERIODS = (PERIOD_WEEK, PERIOD_MONTH, PERIOD_YEAR)


def to_money(value) -> Decimal:
    """Coerce an int, str, float or Decimal amount to ``Decimal``."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@dataclass(frozen=True)
class PaymentEntry:
    amount: Decimal
    payment_date: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, 'amount', to_money(self.amount))


@dataclass(frozen=True)
class OrderEntry:
    """Snapshot of one order and the payments recorded against it."""

    customer_name: str
    order_date: date
    purchase_price: Decimal
    sale_price: Decimal
    profit: Decimal
    status: str = PENDING
    payments: tuple = field(default_factory=tuple)
    id: Optional[object] = None

    def __post_init__(self):
        object.__setattr__(self, 'purchase_price', to_money(self.purchase_price))
        object.__setattr__(self, 'sale_price', to_money(self.sale_price))
        object.__setattr__(self, 'profit', to_money(self.profit))
        object.__setattr__(self, 'payments', tuple(self.payments))


class CustomerDebt(NamedTuple):
    total_debt: Decimal
    order_count: int


@dataclass(frozen=True)
class LedgerStats:
    total_revenue: Decimal = ZERO
    total_investment: Decimal = ZERO
    total_profit: Decimal = ZERO
    total_paid: Decimal = ZERO
    order_count: int = 0
    paid_order_count: int = 0

    @property
    def pending_order_count(self) -> int:
        return self.order_count - self.paid_order_count

    @property
    def outstanding(self) -> Decimal:
        """Revenue not yet collected."""
        return self.total_revenue - self.total_paid

    @property
    def profit_margin(self) -> Decimal:
        """Profit as a fraction of revenue; 0 when there is no revenue."""
        if self.total_revenue <= 0:
            return Decimal('0')
        return (self.total_profit / self.total_revenue).quantize(MARGIN_PLACES)


def order_entry_from_model(order) -> OrderEntry:
    """
    Build a snapshot from an ``Order`` row.

    Payments are read through ``order.payments.all()`` so a
    ``prefetch_related('payments')`` queryset costs no extra queries.
    """
    return OrderEntry(
        id=order.id,
        customer_name=order.customer_name,
        order_date=order.order_date,
        purchase_price=order.purchase_price,
        sale_price=order.sale_price,
        profit=order.profit,
        status=order.status,
        payments=tuple(
            PaymentEntry(amount=p.amount, payment_date=p.payment_date)
            for p in order.payments.all()
        ),
    )


def compute_profit(purchase_price, sale_price) -> Decimal:
    return to_money(sale_price) - to_money(purchase_price)


def total_paid(payments: Iterable) -> Decimal:
    """Sum of payment amounts; ``0.00`` for no payments."""
    return sum((to_money(p.amount) for p in payments), ZERO)


def _payments_of(order) -> Iterable:
    # Model instances expose a related manager, snapshots a tuple
    payments = order.payments
    return payments.all() if hasattr(payments, 'all') else payments


def remaining(order, payments: Optional[Iterable] = None) -> Decimal:
    """Sale price minus everything paid so far. Negative when overpaid."""
    if payments is None:
        payments = _payments_of(order)
    return to_money(order.sale_price) - total_paid(payments)


def should_auto_close(order, payments: Iterable, new_payment_amount) -> bool:
    """True when the new payment brings the total paid up to the sale price."""
    return total_paid(payments) + to_money(new_payment_amount) >= to_money(order.sale_price)


def settled_status(order, payments: Optional[Iterable] = None) -> str:
    """
    Status an order should carry given its payments.

    Pending orders whose payments cover the sale price become paid. Orders
    already marked paid stay paid even without payments, since the owner
    may close an order by hand.
    """
    if payments is None:
        payments = _payments_of(order)
    if order.status == PAID:
        return PAID
    if total_paid(payments) >= to_money(order.sale_price):
        return PAID
    return order.status


def filter_by_customer(orders: Iterable, name: str) -> list:
    """Orders whose customer name equals ``name``, ignoring case."""
    wanted = name.casefold()
    return [o for o in orders if o.customer_name.casefold() == wanted]


def search_by_customer(orders: Iterable, term: str) -> list:
    """Orders whose customer name contains ``term``, ignoring case."""
    if not term:
        return list(orders)
    needle = term.casefold()
    return [o for o in orders if needle in o.customer_name.casefold()]


def customer_debt(orders: Iterable, name: str) -> CustomerDebt:
    """
    Outstanding balance of one customer across their pending orders.

    Paid orders add nothing to the debt but still count toward
    ``order_count``.
    """
    matched = filter_by_customer(orders, name)
    debt = sum(
        (remaining(o) for o in matched if o.status == PENDING),
        ZERO
    )
    return CustomerDebt(total_debt=debt, order_count=len(matched))


def _shift_months(day: date, months: int) -> date:
    month_index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def period_start(period: str, now) -> date:
    """
    First date included in a ``week``, ``month`` or ``year`` window ending at ``now``.

    Raises:
        InvalidPeriodError: For any other period name.
    """
    today = now.date() if isinstance(now, datetime) else now

    if period == PERIOD_WEEK:
        return today - timedelta(days=7)
    if period == PERIOD_MONTH:
        return _shift_months(today, -1)
    if period == PERIOD_YEAR:
        return _shift_months(today, -12)

    raise InvalidPeriodError(
        f"Invalid period: '{period}'. Valid options: {', '.join(PERIODS)}"
    )


def period_filter(orders: Iterable, period: str, now) -> list:
    """Orders dated on or after :func:`period_start`."""
    start = period_start(period, now)
    return [o for o in orders if o.order_date >= start]


def aggregate(orders: Sequence) -> LedgerStats:
    """Revenue, investment, stored profit, payments and counts in one pass."""
    revenue = investment = profit = paid = ZERO
    order_count = paid_count = 0

    for order in orders:
        revenue += to_money(order.sale_price)
        investment += to_money(order.purchase_price)
        profit += to_money(order.profit)
        paid += total_paid(_payments_of(order))
        order_count += 1
        if order.status == PAID:
            paid_count += 1

    return LedgerStats(
        total_revenue=revenue,
        total_investment=investment,
        total_profit=profit,
        total_paid=paid,
        order_count=order_count,
        paid_order_count=paid_count,
    )
