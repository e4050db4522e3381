"""
Orders services - Business logic layer.

This package contains all business operations for the orders app:
- Order CRUD operations
- Payment recording with automatic order closing
- Status reconciliation
- Customer debt and totals reporting

Every function takes the acting user explicitly; nothing reads a
request-global session.
"""

from .order_management import (
    create_order,
    get_order_for_user,
    update_order,
    delete_order,
    list_orders,
)

from .payment_management import (
    record_payment,
    get_payment_for_user,
    list_payments,
    delete_payment,
)

from .reconciliation import (
    reconcile_order_status,
    find_unsettled_orders,
    reconcile_all,
)

from .reporting import (
    get_customer_debt,
    get_order_totals,
    get_order_summary,
)

from .exceptions import (
    OrdersServiceError,
    OrderNotFoundError,
    PaymentNotFoundError,
    InvalidOrderDataError,
    InvalidPaymentAmountError,
)

__all__ = [
    # Order Management Services
    'create_order',
    'get_order_for_user',
    'update_order',
    'delete_order',
    'list_orders',
    # Payment Management Services
    'record_payment',
    'get_payment_for_user',
    'list_payments',
    'delete_payment',
    # Reconciliation Services
    'reconcile_order_status',
    'find_unsettled_orders',
    'reconcile_all',
    # Reporting Services
    'get_customer_debt',
    'get_order_totals',
    'get_order_summary',
    # Exceptions
    'OrdersServiceError',
    'OrderNotFoundError',
    'PaymentNotFoundError',
    'InvalidOrderDataError',
    'InvalidPaymentAmountError',
]
