import pytest
from decimal import Decimal
from datetime import date
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.orders.models import Order, Payment, OrderStatus


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def seller(db):
    """Create and return the user who owns the orders."""
    return User.objects.create_user(
        email='seller@example.com',
        password='TestPass123!',
        display_name='Seller',
    )


@pytest.fixture
def other_seller(db):
    """Create and return a user who must not see the seller's data."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other Seller',
    )


@pytest.fixture
def seller_client(api_client, seller):
    """Return API client authenticated as seller."""
    refresh = RefreshToken.for_user(seller)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_client(other_seller):
    """Return API client authenticated as the other seller."""
    client = APIClient()
    refresh = RefreshToken.for_user(other_seller)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def order(db, seller):
    """Pending order: bought for 60, sold for 100."""
    return Order.objects.create(
        user=seller,
        customer_name='Ana',
        product_description='Zapatos talla 38',
        purchase_price=Decimal('60.00'),
        sale_price=Decimal('100.00'),
        profit=Decimal('40.00'),
        order_date=date(2024, 3, 1),
    )


@pytest.fixture
def order_with_payments(order, seller):
    """The pending order with 30 and 50 already paid."""
    Payment.objects.create(order=order, user=seller, amount=Decimal('30.00'))
    Payment.objects.create(order=order, user=seller, amount=Decimal('50.00'))
    return order


@pytest.fixture
def paid_order(db, seller):
    """Order closed by hand, without payments."""
    return Order.objects.create(
        user=seller,
        customer_name='Luis',
        product_description='Reloj',
        purchase_price=Decimal('10.00'),
        sale_price=Decimal('25.00'),
        profit=Decimal('15.00'),
        status=OrderStatus.PAID,
        order_date=date(2024, 2, 15),
    )


@pytest.fixture
def foreign_order(db, other_seller):
    """Order owned by the other seller."""
    return Order.objects.create(
        user=other_seller,
        customer_name='Ana',
        product_description='Bolso',
        purchase_price=Decimal('5.00'),
        sale_price=Decimal('9.00'),
        profit=Decimal('4.00'),
    )
