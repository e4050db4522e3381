"""
Serializers for analytics app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - API documentation and output formatting

Input Serializers:
    StatisticsQuerySerializer - Validates the statistics period

Response Serializers:
    StatisticsSerializer - Period figures with Bs. conversion
    ExchangeRateSerializer - Current exchange rate
"""

from rest_framework import serializers
from apps.orders.ledger import PERIODS, PERIOD_MONTH


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class StatisticsQuerySerializer(serializers.Serializer):
    """
    Validate statistics query parameters.

    Query Parameters:
        period (str): week | month | year (default: month)
    """

    period = serializers.ChoiceField(
        choices=PERIODS,
        default=PERIOD_MONTH,
        help_text='Window ending today: week, month or year'
    )


# =============================================================================
# Response Serializers (API Documentation)
# =============================================================================

def money_field(**kwargs):
    return serializers.DecimalField(max_digits=16, decimal_places=2, **kwargs)


class ConvertedTotalsSerializer(serializers.Serializer):
    """Money figures in Bs."""
    total_revenue = money_field()
    total_investment = money_field()
    total_profit = money_field()
    total_paid = money_field()
    outstanding = money_field()


class StatisticsSerializer(serializers.Serializer):
    """Statistics for one period."""
    period = serializers.CharField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    total_revenue = money_field()
    total_investment = money_field()
    total_profit = money_field()
    total_paid = money_field()
    outstanding = money_field()
    order_count = serializers.IntegerField()
    paid_order_count = serializers.IntegerField()
    pending_order_count = serializers.IntegerField()
    profit_margin = serializers.DecimalField(max_digits=10, decimal_places=4)
    profit_margin_percent = serializers.DecimalField(max_digits=8, decimal_places=2)
    exchange_rate = serializers.DecimalField(max_digits=16, decimal_places=4, allow_null=True)
    converted = ConvertedTotalsSerializer(allow_null=True)


class ExchangeRateSerializer(serializers.Serializer):
    rate = serializers.DecimalField(max_digits=16, decimal_places=4, allow_null=True)
    available = serializers.BooleanField()


class ErrorSerializer(serializers.Serializer):
    """Standard error response serializer."""
    error = serializers.CharField()
