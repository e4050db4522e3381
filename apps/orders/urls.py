from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'orders'

# Note: payments must be registered BEFORE the empty prefix
router = DefaultRouter()
router.register(r'payments', views.PaymentViewSet, basename='payment')
router.register(r'', views.OrderViewSet, basename='order')

urlpatterns = [
    # Order ViewSet routes
    # GET    /api/orders/                 - List orders (?search=, ?status=)
    # POST   /api/orders/                 - Create order
    # GET    /api/orders/{id}/            - Order with payments
    # PUT    /api/orders/{id}/            - Replace order
    # PATCH  /api/orders/{id}/            - Partial update
    # DELETE /api/orders/{id}/            - Delete order and its payments

    # Custom order actions
    # GET    /api/orders/{id}/summary/    - Paid / remaining summary
    # GET    /api/orders/{id}/payments/   - List payments
    # POST   /api/orders/{id}/payments/   - Record payment (auto-close)
    # GET    /api/orders/totals/          - Investment and profit of the list
    # GET    /api/orders/customer-debt/   - Debt of one customer (?name=)

    # Payment routes
    # GET    /api/orders/payments/{id}/   - Payment detail
    # DELETE /api/orders/payments/{id}/   - Delete payment

    path('', include(router.urls)),
]
