"""Profiles app models.

Defines the Profile model that extends the base user with the marketplace
role (vendor/supplier) and the fields that belong to each role. Vendors and
suppliers share one table; the fields each role must provide are listed in
``ROLE_REQUIRED_FIELDS`` and enforced by ``clean()`` and by the per-role
registration serializers. String fields default to empty strings to avoid
nulls in API responses.
"""

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from .validators import validate_fssai_number, validate_pincode


class Profile(models.Model):
    """Marketplace profile for a single user (OneToOne)."""

    class Role(models.TextChoices):
        VENDOR = "vendor", "vendor"
        SUPPLIER = "supplier", "supplier"

    class VendorType(models.TextChoices):
        STREET_FOOD = "street_food", "street_food"
        RESTAURANT = "restaurant", "restaurant"
        CAFE = "cafe", "cafe"
        CATERING = "catering", "catering"

    ROLE_REQUIRED_FIELDS = {
        Role.VENDOR: ("vendor_type",),
        Role.SUPPLIER: ("business_name", "fssai_number"),
    }

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    role = models.CharField(max_length=20, choices=Role.choices)
    phone = models.CharField(max_length=20, blank=True, default="")

    street = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    pincode = models.CharField(
        max_length=6, blank=True, default="", validators=[validate_pincode]
    )

    # supplier variant
    business_name = models.CharField(max_length=200, blank=True, default="")
    fssai_number = models.CharField(
        max_length=14, blank=True, default="", validators=[validate_fssai_number]
    )
    is_verified = models.BooleanField(default=False)
    average_rating = models.DecimalField(
        max_digits=2, decimal_places=1, default=Decimal("0.0")
    )
    total_reviews = models.PositiveIntegerField(default=0)

    # vendor variant
    vendor_type = models.CharField(
        max_length=20, choices=VendorType.choices, blank=True, default=""
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [models.Index(fields=["role", "is_verified"], name="profile_role_verified_idx")]

    def __str__(self):
        """Readable representation for admin and debugging."""
        return f"Profile<{self.user_id}:{self.role}>"

    @property
    def is_supplier(self) -> bool:
        return self.role == self.Role.SUPPLIER

    @property
    def is_vendor(self) -> bool:
        return self.role == self.Role.VENDOR

    def clean(self):
        """Reject a profile that lacks the mandatory fields of its role."""
        required = self.ROLE_REQUIRED_FIELDS.get(self.role, ())
        missing = {
            name: f"This field is required for role '{self.role}'."
            for name in required
            if not getattr(self, name)
        }
        if missing:
            raise ValidationError(missing)
