from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid


class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'


class Order(models.Model):
    """Customer order (encargo): what was bought for whom and what it sells for."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Owner
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='orders'
    )

    order_date = models.DateField(default=timezone.localdate)
    customer_name = models.CharField(max_length=200)
    product_description = models.TextField(blank=True)

    # Financial details (USD)
    purchase_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    sale_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    # sale_price - purchase_price as of the last write
    profit = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        editable=False
    )

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        indexes = [
            models.Index(fields=['user', 'order_date'], name='orders_user_date_idx'),
            models.Index(fields=['user', 'status'], name='orders_user_status_idx'),
            models.Index(fields=['user', 'customer_name'], name='orders_user_customer_idx'),
        ]
        ordering = ['-order_date', '-created_at']

    def __str__(self):
        return f"{self.customer_name} - {self.sale_price} USD ({self.status})"


class Payment(models.Model):
    """Partial payment (abono) recorded against an order."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='payments'
    )
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='payments'
    )

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    payment_date = models.DateTimeField(default=timezone.now)

    # Bank transfer reference and receipt picture, both optional
    reference_number = models.CharField(max_length=100, blank=True)
    payment_image_url = models.URLField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payments'
        indexes = [
            models.Index(fields=['order', 'payment_date'], name='payments_order_date_idx'),
            models.Index(fields=['user'], name='payments_user_idx'),
        ]
        ordering = ['-payment_date']

    def __str__(self):
        return f"{self.amount} USD for {self.order.customer_name}"
