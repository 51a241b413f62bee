from django.contrib import admin
from .models import Cart, CartItem


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    readonly_fields = ("product", "quantity", "price_at_add", "price_unit", "notes", "created_at")
    can_delete = False


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    """Read-only view of vendor carts; carts change only through the API."""
    list_display = ("id", "vendor", "total_items", "estimated_total", "updated_at")
    list_select_related = ("vendor",)
    search_fields = ("vendor__username",)
    readonly_fields = ("vendor", "total_items", "estimated_total", "created_at", "updated_at")
    inlines = (CartItemInline,)
