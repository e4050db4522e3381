import json
import pytest
from decimal import Decimal
from datetime import date
from django.core.cache import cache
import httpx
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.analytics.exchange_rate import RATE_CACHE_KEY, UNKNOWN_RATE, ExchangeRateClient
from apps.orders.models import Order, Payment, OrderStatus


@pytest.fixture(autouse=True)
def clear_cache():
    """Every test starts without a cached exchange rate."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def analytics_user(db):
    """Create the main analytics test user."""
    return User.objects.create_user(
        email='analytics_user@example.com',
        password='TestPass123!',
        display_name='Analytics User',
    )


@pytest.fixture
def analytics_outsider(db):
    return User.objects.create_user(
        email='analytics_outsider@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def analytics_client(api_client, analytics_user):
    """Return API client authenticated as the analytics user."""
    refresh = RefreshToken.for_user(analytics_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


# =============================================================================
# Exchange rate
# =============================================================================

@pytest.fixture
def rate_payload():
    return {'monitors': {'usd': {'price': 36.52, 'title': 'Dólar'}}}


@pytest.fixture
def ok_client(rate_payload):
    """Client whose source answers with a valid rate."""
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, content=json.dumps(rate_payload))

    client = ExchangeRateClient(
        url='https://rates.test/api',
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )
    client.calls = calls
    return client


@pytest.fixture
def known_rate():
    """Exchange rate already polled."""
    cache.set(RATE_CACHE_KEY, '40.00', 3600)
    return Decimal('40.00')


@pytest.fixture
def unknown_rate():
    """Last poll failed."""
    cache.set(RATE_CACHE_KEY, UNKNOWN_RATE, 3600)


# =============================================================================
# Orders
# =============================================================================

def make_order(user, order_date, sale, purchase, status=OrderStatus.PENDING, payments=()):
    order = Order.objects.create(
        user=user,
        customer_name='Ana',
        product_description='',
        purchase_price=Decimal(purchase),
        sale_price=Decimal(sale),
        profit=Decimal(sale) - Decimal(purchase),
        status=status,
        order_date=order_date,
    )
    for amount in payments:
        Payment.objects.create(order=order, user=user, amount=Decimal(amount))
    return order


@pytest.fixture
def march_orders(analytics_user, analytics_outsider):
    """Orders around the month window ending 2024-03-31."""
    return {
        'leap_day': make_order(analytics_user, date(2024, 2, 29), '100', '60', payments=['30', '50']),
        'recent': make_order(analytics_user, date(2024, 3, 30), '50', '20', status=OrderStatus.PAID, payments=['50']),
        'old': make_order(analytics_user, date(2024, 2, 28), '999', '1'),
        'foreign': make_order(analytics_outsider, date(2024, 3, 30), '500', '100'),
    }
