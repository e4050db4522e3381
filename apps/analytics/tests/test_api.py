import pytest
from datetime import date
from decimal import Decimal
from unittest import mock
from django.urls import reverse
from rest_framework import status
from apps.analytics.exceptions import AnalyticsServiceError
from apps.analytics.statistics import get_statistics


# =============================================================================
# Statistics Service Tests
# =============================================================================

@pytest.mark.django_db
class TestGetStatistics:

    def test_month_window_with_leap_day(self, analytics_user, march_orders, known_rate):
        stats = get_statistics(user=analytics_user, period='month', now=date(2024, 3, 31))

        assert stats['start_date'] == date(2024, 2, 29)
        assert stats['order_count'] == 2
        assert stats['total_revenue'] == Decimal('150')
        assert stats['total_investment'] == Decimal('80')
        assert stats['total_profit'] == Decimal('70')
        assert stats['total_paid'] == Decimal('130')
        assert stats['outstanding'] == Decimal('20')
        assert stats['paid_order_count'] == 1
        assert stats['profit_margin'] == Decimal('0.4667')
        assert stats['profit_margin_percent'] == Decimal('46.67')

    def test_converted_figures(self, analytics_user, march_orders, known_rate):
        stats = get_statistics(user=analytics_user, period='month', now=date(2024, 3, 31))

        assert stats['exchange_rate'] == Decimal('40.00')
        assert stats['converted']['total_profit'] == Decimal('2800.00')
        assert stats['converted']['outstanding'] == Decimal('800.00')

    def test_unknown_rate_suppresses_conversion(self, analytics_user, march_orders, unknown_rate):
        stats = get_statistics(user=analytics_user, period='year', now=date(2024, 3, 31))

        assert stats['exchange_rate'] is None
        assert stats['converted'] is None
        assert stats['order_count'] == 3

    def test_week_excludes_older_orders(self, analytics_user, march_orders, known_rate):
        stats = get_statistics(user=analytics_user, period='week', now=date(2024, 3, 31))

        assert stats['order_count'] == 1
        assert stats['total_revenue'] == Decimal('50')

    def test_no_orders_is_all_zero(self, analytics_user, known_rate):
        stats = get_statistics(user=analytics_user, period='month', now=date(2024, 3, 31))

        assert stats['order_count'] == 0
        assert stats['total_revenue'] == Decimal('0')
        assert stats['profit_margin'] == Decimal('0')

    def test_invalid_period_is_analytics_error(self, analytics_user):
        with pytest.raises(AnalyticsServiceError):
            get_statistics(user=analytics_user, period='decade', now=date(2024, 3, 31))


# =============================================================================
# Statistics API Tests
# =============================================================================

@pytest.mark.django_db
class TestStatisticsAPI:
    """Tests for GET /api/analytics/statistics/"""

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('analytics:statistics'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_default_period_is_month(self, analytics_client, known_rate):
        response = analytics_client.get(reverse('analytics:statistics'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['period'] == 'month'
        assert response.data['order_count'] == 0
        assert response.data['exchange_rate'] == '40.0000'

    def test_invalid_period(self, analytics_client, known_rate):
        response = analytics_client.get(reverse('analytics:statistics'), {'period': 'decade'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_only_own_orders(self, analytics_client, march_orders, known_rate):
        with mock.patch('apps.analytics.statistics.timezone.localdate', return_value=date(2024, 3, 31)):
            response = analytics_client.get(reverse('analytics:statistics'), {'period': 'week'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['order_count'] == 1
        assert response.data['total_revenue'] == '50.00'

    def test_unknown_rate(self, analytics_client, unknown_rate):
        response = analytics_client.get(reverse('analytics:statistics'), {'period': 'year'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['exchange_rate'] is None
        assert response.data['converted'] is None


@pytest.mark.django_db
class TestExchangeRateAPI:
    """Tests for GET /api/analytics/exchange-rate/"""

    def test_known_rate(self, analytics_client, known_rate):
        response = analytics_client.get(reverse('analytics:exchange-rate'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'rate': '40.0000', 'available': True}

    def test_unknown_rate(self, analytics_client, unknown_rate):
        response = analytics_client.get(reverse('analytics:exchange-rate'))

        assert response.data == {'rate': None, 'available': False}
