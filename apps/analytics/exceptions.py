"""
Domain exceptions for analytics app.

This module defines domain-specific exceptions that are raised by the
statistics and exchange-rate services. These exceptions represent invalid
requests and unavailable upstream data, separate from HTTP concerns.

Exception Hierarchy:
    AnalyticsServiceError (base)
    ├── InvalidPeriodError
    └── ExchangeRateUnavailableError

Usage:
    from apps.analytics.exceptions import InvalidPeriodError

    if period not in PERIODS:
        raise InvalidPeriodError(f"Invalid period: {period}")
"""


class AnalyticsServiceError(Exception):
    """
    Base exception for all analytics service errors.

    Views can catch this class to turn any analytics error into a 400:

        try:
            data = get_statistics(user=request.user, period=period)
        except AnalyticsServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class InvalidPeriodError(AnalyticsServiceError):
    """
    Raised when a statistics period is not one of week, month or year.

    Example:
        raise InvalidPeriodError(
            "Invalid period: 'decade'. Valid options: week, month, year"
        )
    """

    pass


class ExchangeRateUnavailableError(AnalyticsServiceError):
    """
    Raised when the USD to Bs. rate cannot be fetched or parsed.

    Covers transport errors, non-2xx responses and payloads without a
    positive ``monitors.usd.price``. Callers that can live without the rate
    catch it and report the rate as unknown.
    """

    pass
