from django.contrib import admin
from .models import Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """
    Profile list with role, verification state and rating.
    Suppliers are verified from here after their FSSAI licence was checked.
    """
    list_display = (
        "id",
        "user_id_display",
        "user",
        "role",
        "business_name",
        "fssai_number",
        "is_verified",
        "average_rating",
        "created_at",
    )
    list_select_related = ("user",)
    search_fields = ("user__username", "user__email", "business_name", "fssai_number")
    list_filter = ("role", "is_verified", "vendor_type", "created_at")
    ordering = ("-created_at", "-id")
    readonly_fields = ("average_rating", "total_reviews", "created_at", "updated_at")
    actions = ("mark_verified", "mark_unverified")

    def user_id_display(self, obj):
        return obj.user_id
    user_id_display.short_description = "user id"
    user_id_display.admin_order_field = "user__id"

    @admin.action(description="Mark selected suppliers as verified")
    def mark_verified(self, request, queryset):
        updated = queryset.filter(role=Profile.Role.SUPPLIER).update(is_verified=True)
        self.message_user(request, f"{updated} supplier(s) verified.")

    @admin.action(description="Revoke verification of selected suppliers")
    def mark_unverified(self, request, queryset):
        updated = queryset.filter(role=Profile.Role.SUPPLIER).update(is_verified=False)
        self.message_user(request, f"{updated} supplier(s) unverified.")
