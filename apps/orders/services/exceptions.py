"""Domain exceptions for orders app."""


class OrdersServiceError(Exception):
    """Base exception for all orders service errors."""
    pass


class OrderNotFoundError(OrdersServiceError):
    """Order does not exist or belongs to another user."""
    pass


class PaymentNotFoundError(OrdersServiceError):
    """Payment does not exist or belongs to another user."""
    pass


class InvalidOrderDataError(OrdersServiceError):
    """Order fields violate a business rule (negative prices, blank customer)."""
    pass


class InvalidPaymentAmountError(OrdersServiceError):
    """Payment amount must be greater than zero."""
    pass
