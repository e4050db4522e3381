from django.conf import settings
from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from .models import OrderStatus, Payment
from .serializers import (
    OrderSerializer,
    OrderSummarySerializer,
    PaymentSerializer,
    PaymentRecordedSerializer,
    CustomerDebtSerializer,
    OrderTotalsSerializer,
    # Input serializers
    OrderFilterSerializer,
    CustomerDebtQuerySerializer,
    OrderInputSerializer,
    PaymentInputSerializer,
)
from .services import (
    create_order,
    update_order,
    delete_order,
    list_orders,
    record_payment,
    list_payments,
    delete_payment,
    get_customer_debt,
    get_order_totals,
    get_order_summary,
)
from .services.exceptions import (
    OrderNotFoundError,
    PaymentNotFoundError,
    InvalidOrderDataError,
    InvalidPaymentAmountError,
)

UUID_PATTERN = r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'

ORDER_FIELDS = (
    'customer_name',
    'product_description',
    'purchase_price',
    'sale_price',
    'order_date',
    'status',
)


class OrderPagination(PageNumberPagination):
    """Pagination for the order list."""
    page_size = settings.ORDERS_PAGE_SIZE
    page_size_query_param = 'page_size'
    max_page_size = 100


class OrderViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the user's orders.

    list: Orders, newest first (filterable by ?search= and ?status=)
    create: Create an order; profit is derived from the prices
    retrieve: Order with payments and balances
    update: Replace an order (profit recomputed)
    partial_update: Change some fields (profit recomputed)
    destroy: Delete an order together with its payments
    """

    serializer_class = OrderSerializer
    pagination_class = OrderPagination
    lookup_value_regex = UUID_PATTERN

    def get_queryset(self):
        """Only the user's orders, filtered by validated query params."""
        filter_serializer = OrderFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return list_orders(user=self.request.user, **filter_serializer.validated_data)

    @extend_schema(
        parameters=[
            OpenApiParameter('search', str, description='Customer name contains (case-insensitive)'),
            OpenApiParameter('status', str, enum=OrderStatus.values),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=OrderInputSerializer, responses={201: OrderSerializer})
    def create(self, request, *args, **kwargs):
        input_serializer = OrderInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        try:
            order = create_order(user=request.user, **input_serializer.validated_data)
        except InvalidOrderDataError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=OrderInputSerializer, responses={200: OrderSerializer})
    def update(self, request, *args, **kwargs):
        """
        Replace the editable fields of an order.

        With PATCH, omitted fields keep their stored value. Either way the
        profit is recomputed from the resulting prices.
        """
        partial = kwargs.pop('partial', False)
        order = self.get_object()

        input_serializer = OrderInputSerializer(data=request.data, partial=partial)
        input_serializer.is_valid(raise_exception=True)
        data = input_serializer.validated_data
        fields = {name: data.get(name, getattr(order, name)) for name in ORDER_FIELDS}

        try:
            order = update_order(user=request.user, order_id=order.id, **fields)
        except OrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidOrderDataError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data)

    def perform_destroy(self, instance):
        delete_order(user=self.request.user, order_id=instance.id)

    @extend_schema(responses={200: OrderSummarySerializer})
    @action(detail=True, methods=['get'])
    def summary(self, request, pk=None):
        """Total, paid and remaining amounts with the payment list."""
        try:
            summary = get_order_summary(user=request.user, order_id=pk)
        except OrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(OrderSummarySerializer(summary).data)

    @extend_schema(
        request=PaymentInputSerializer,
        responses={200: PaymentSerializer(many=True), 201: PaymentRecordedSerializer},
    )
    @action(detail=True, methods=['get', 'post'])
    def payments(self, request, pk=None):
        """
        GET lists the order's payments.
        POST records a payment; the order is closed once fully paid.
        """
        if request.method == 'POST':
            return self._record_payment(request, pk)

        try:
            payments = list_payments(user=request.user, order_id=pk)
        except OrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(PaymentSerializer(payments, many=True).data)

    def _record_payment(self, request, pk):
        input_serializer = PaymentInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        try:
            payment, order = record_payment(
                user=request.user,
                order_id=pk,
                **input_serializer.validated_data
            )
        except OrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidPaymentAmountError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        serializer = PaymentRecordedSerializer({
            'payment': payment,
            'order_status': order.status,
            'order_closed': order.status == OrderStatus.PAID,
        })
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(
        parameters=[
            OpenApiParameter('search', str),
            OpenApiParameter('status', str, enum=OrderStatus.values),
        ],
        responses={200: OrderTotalsSerializer},
    )
    @action(detail=False, methods=['get'])
    def totals(self, request):
        """Investment and profit of the orders matching the list filters."""
        filter_serializer = OrderFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        totals = get_order_totals(user=request.user, **filter_serializer.validated_data)
        return Response(OrderTotalsSerializer(totals).data)

    @extend_schema(
        parameters=[OpenApiParameter('name', str, required=True)],
        responses={200: CustomerDebtSerializer},
    )
    @action(detail=False, methods=['get'], url_path='customer-debt')
    def customer_debt(self, request):
        """Outstanding balance of one customer (exact name, any case)."""
        query_serializer = CustomerDebtQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        debt = get_customer_debt(user=request.user, name=query_serializer.validated_data['name'])
        return Response(CustomerDebtSerializer(debt).data)


class PaymentViewSet(
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet
):
    """
    ViewSet for individual payments.

    retrieve: Payment detail
    destroy: Delete a payment (the order status is left unchanged)
    """

    serializer_class = PaymentSerializer
    lookup_value_regex = UUID_PATTERN

    def get_queryset(self):
        return Payment.objects.filter(user=self.request.user).select_related('order')

    def destroy(self, request, *args, **kwargs):
        try:
            delete_payment(user=request.user, payment_id=kwargs['pk'])
        except PaymentNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)
