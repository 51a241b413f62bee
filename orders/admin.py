from django.contrib import admin
from .models import Checkout, Order, OrderItem, OrderStatusHistory


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = (
        "product", "product_name", "quantity", "unit_price", "price_unit", "line_total", "notes",
    )


class OrderStatusHistoryInline(admin.TabularInline):
    model = OrderStatusHistory
    extra = 0
    can_delete = False
    readonly_fields = ("status", "changed_by", "notes", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Orders with parties, status and totals.
    Status only changes through the API so stock and history stay consistent.
    """
    list_display = (
        "order_number",
        "vendor",
        "supplier",
        "status",
        "total_items",
        "total_amount",
        "payment_method",
        "created_at",
    )
    list_select_related = ("vendor", "supplier")
    list_filter = ("status", "payment_method", "payment_status")
    search_fields = ("order_number", "vendor__username", "supplier__username")
    readonly_fields = (
        "order_number", "checkout", "vendor", "supplier", "status",
        "total_items", "total_amount", "actual_delivery_date", "rejection_reason",
        "created_at", "updated_at",
    )
    inlines = (OrderItemInline, OrderStatusHistoryInline)


@admin.register(Checkout)
class CheckoutAdmin(admin.ModelAdmin):
    list_display = ("reference", "vendor", "idempotency_key", "created_at")
    list_select_related = ("vendor",)
    search_fields = ("reference", "vendor__username", "idempotency_key")
    readonly_fields = ("reference", "vendor", "idempotency_key", "created_at")
