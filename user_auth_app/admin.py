from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

User = get_user_model()

# Re-register the stock user admin (idempotent).
try:
    admin.site.unregister(User)
except admin.sites.NotRegistered:
    pass


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    """
    User list with id, marketplace role, supplier verification and admin flags.
    """
    list_display = (
        "id",
        "username",
        "email",
        "role_display",
        "verified_display",
        "is_staff",
        "is_active",
        "date_joined",
    )
    list_select_related = ("profile",)
    ordering = ("-date_joined", "-id")
    search_fields = ("username", "email", "profile__business_name")
    list_filter = ("is_staff", "is_active", "profile__role", "profile__is_verified")

    def role_display(self, obj):
        prof = getattr(obj, "profile", None)
        return getattr(prof, "role", "") or ""
    role_display.short_description = "role"
    role_display.admin_order_field = "profile__role"

    def verified_display(self, obj):
        prof = getattr(obj, "profile", None)
        return bool(prof and prof.is_verified)
    verified_display.short_description = "verified"
    verified_display.boolean = True
