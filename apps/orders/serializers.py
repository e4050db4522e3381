from decimal import Decimal
from rest_framework import serializers
from .ledger import remaining, total_paid
from .models import Order, OrderStatus, Payment


# =============================================================================
# Input Serializers
# =============================================================================

class OrderFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for order filtering.

    Query Parameters:
        search (str): Case-insensitive substring of the customer name
        status (str): pending | paid
    """

    search = serializers.CharField(required=False, allow_blank=True, max_length=200)
    status = serializers.ChoiceField(
        choices=OrderStatus.choices,
        required=False
    )


class CustomerDebtQuerySerializer(serializers.Serializer):
    """Validate the ?name= parameter of the customer debt endpoint."""

    name = serializers.CharField(max_length=200)

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('Customer name is required')
        return value


class OrderInputSerializer(serializers.Serializer):
    """
    Validate order create/update bodies.

    ``profit`` is not accepted; it is always derived from the prices.
    """

    order_date = serializers.DateField(required=False)
    customer_name = serializers.CharField(max_length=200)
    product_description = serializers.CharField(allow_blank=True)
    purchase_price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.00')
    )
    sale_price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.00')
    )
    # Omitted on create means pending; omitted on update keeps the current status
    status = serializers.ChoiceField(
        choices=OrderStatus.choices,
        required=False
    )


class PaymentInputSerializer(serializers.Serializer):
    """Validate a new payment for an order."""

    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01')
    )
    reference_number = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    payment_image_url = serializers.URLField(max_length=500, required=False, allow_blank=True, default='')
    payment_date = serializers.DateTimeField(required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class PaymentSerializer(serializers.ModelSerializer):
    """Serializer for payments."""

    class Meta:
        model = Payment
        fields = [
            'id',
            'order',
            'amount',
            'payment_date',
            'reference_number',
            'payment_image_url',
            'created_at',
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Order with its payments and derived balances."""

    payments = PaymentSerializer(many=True, read_only=True)
    total_paid = serializers.SerializerMethodField()
    remaining = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id',
            'order_date',
            'customer_name',
            'product_description',
            'purchase_price',
            'sale_price',
            'profit',
            'status',
            'total_paid',
            'remaining',
            'payments',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_total_paid(self, obj):
        return str(total_paid(obj.payments.all()))

    def get_remaining(self, obj):
        return str(remaining(obj, obj.payments.all()))


class OrderSummarySerializer(serializers.Serializer):
    """Serializer for the per-order payment summary."""

    order = OrderSerializer()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    paid_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    remaining_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    payment_count = serializers.IntegerField()
    payments = PaymentSerializer(many=True)


class PaymentRecordedSerializer(serializers.Serializer):
    payment = PaymentSerializer()
    order_status = serializers.CharField()
    order_closed = serializers.BooleanField()


class CustomerDebtSerializer(serializers.Serializer):
    customer_name = serializers.CharField()
    total_debt = serializers.DecimalField(max_digits=16, decimal_places=2)
    order_count = serializers.IntegerField()


class OrderTotalsSerializer(serializers.Serializer):
    total_investment = serializers.DecimalField(max_digits=16, decimal_places=2)
    total_profit = serializers.DecimalField(max_digits=16, decimal_places=2)
    order_count = serializers.IntegerField()
