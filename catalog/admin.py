from django.contrib import admin
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """
    Product list with supplier, price, stock and active flag.
    Stock is read-only here; suppliers restock through the API.
    """
    list_display = (
        "id",
        "name",
        "supplier",
        "category",
        "price_amount",
        "price_unit",
        "available_quantity",
        "minimum_order_quantity",
        "is_active",
    )
    list_select_related = ("supplier",)
    list_filter = ("category", "is_active", "quality_grade")
    search_fields = ("name", "description", "supplier__username")
    ordering = ("-id",)
    readonly_fields = ("available_quantity", "created_at", "updated_at")
