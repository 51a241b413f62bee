from django.contrib import admin
from .models import Review
from .services import recalculate_supplier_rating


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("id", "vendor", "supplier", "order", "rating", "helpful_votes", "created_at")
    list_select_related = ("vendor", "supplier", "order")
    list_filter = ("rating",)
    search_fields = ("vendor__username", "supplier__username", "order__order_number", "comment")
    readonly_fields = ("vendor", "supplier", "order", "helpful_votes", "responded_at", "created_at", "updated_at")

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        recalculate_supplier_rating(obj.supplier_id)

    def delete_model(self, request, obj):
        supplier_id = obj.supplier_id
        super().delete_model(request, obj)
        recalculate_supplier_rating(supplier_id)

    def has_add_permission(self, request):
        return False
