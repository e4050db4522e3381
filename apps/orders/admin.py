from django.contrib import admin
from django.utils.html import format_html
from .ledger import compute_profit, remaining
from .models import Order, Payment, OrderStatus
from .services import reconcile_order_status


class PaymentInline(admin.TabularInline):
    """Inline admin for payments within an order."""
    model = Payment
    extra = 0
    fields = [
        'amount',
        'payment_date',
        'reference_number',
        'payment_image_url',
    ]
    readonly_fields = ['payment_date']

    def has_add_permission(self, request, obj=None):
        """Payments go through the API so the order can auto-close."""
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin interface for orders.

    Provides:
    - Order listing with remaining balance
    - Inline payments
    - Filtering by status and date
    - Action for status reconciliation
    """

    list_display = [
        'customer_name',
        'user',
        'sale_price',
        'profit',
        'get_remaining_display',
        'status_badge',
        'order_date',
    ]

    list_filter = [
        'status',
        'order_date',
        'created_at',
    ]

    search_fields = [
        'customer_name',
        'product_description',
        'user__email',
    ]

    readonly_fields = [
        'profit',
        'created_at',
        'updated_at',
    ]

    inlines = [PaymentInline]
    date_hierarchy = 'order_date'
    ordering = ['-order_date', '-created_at']

    fieldsets = (
        ('Order', {
            'fields': (
                'user',
                'customer_name',
                'product_description',
                'order_date',
                'status',
            )
        }),
        ('Financial Details', {
            'fields': (
                'purchase_price',
                'sale_price',
                'profit',
            )
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    actions = ['reconcile_statuses']

    def get_remaining_display(self, obj):
        return f"{remaining(obj, obj.payments.all())} USD"
    get_remaining_display.short_description = 'Remaining'

    def status_badge(self, obj):
        """Display order status as colored badge."""
        bg, fg = ('#6B8E5E', 'white') if obj.status == OrderStatus.PAID else ('#E5C49A', '#2C1810')
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    @admin.action(description='Mark fully paid orders as paid')
    def reconcile_statuses(self, request, queryset):
        changed = sum(1 for order in queryset if reconcile_order_status(order))
        self.message_user(request, f'Updated status for {changed} order(s).')

    def save_model(self, request, obj, form, change):
        obj.profit = compute_profit(obj.purchase_price, obj.sale_price)
        super().save_model(request, obj, form, change)

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('user').prefetch_related('payments')


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['order', 'user', 'amount', 'reference_number', 'payment_date']
    search_fields = ['order__customer_name', 'reference_number', 'user__email']
    date_hierarchy = 'payment_date'
    readonly_fields = ['created_at']

    def has_change_permission(self, request, obj=None):
        """Recorded amounts are final; a wrong payment is deleted and re-entered."""
        return False

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('order', 'user')
