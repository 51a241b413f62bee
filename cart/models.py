"""Cart app models.

One Cart per vendor. Each CartItem snapshots the product price when it is
added, so a later catalog price change shows up as a ``price_change`` issue
during validation instead of being applied silently. ``total_items`` and
``estimated_total`` are derived from the items and only written by
``recalculate_totals()``.
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from catalog.models import Product


class Cart(models.Model):
    """Staging area of selected products for a single vendor."""

    vendor = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="cart",
    )
    total_items = models.PositiveIntegerField(default=0, editable=False)
    estimated_total = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), editable=False
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Cart<{self.vendor_id} items={self.total_items}>"

    def recalculate_totals(self, items=None):
        """Recompute derived totals from the stored items and persist them."""
        if items is None:
            items = list(self.items.all())
        self.total_items = sum(item.quantity for item in items)
        self.estimated_total = sum(
            (item.line_total for item in items), Decimal("0.00")
        )
        self.save(update_fields=["total_items", "estimated_total", "updated_at"])


class CartItem(models.Model):
    """A product line in a cart with the price captured at add time."""

    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(
        Product, on_delete=models.CASCADE, related_name="cart_items"
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price_at_add = models.DecimalField(max_digits=10, decimal_places=2)
    price_unit = models.CharField(max_length=10, choices=Product.Unit.choices)
    notes = models.CharField(max_length=200, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("id",)
        constraints = [
            models.UniqueConstraint(
                fields=["cart", "product"], name="unique_product_per_cart"
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1), name="cart_item_quantity_positive"
            ),
        ]

    def __str__(self) -> str:
        return f"CartItem<{self.product_id} x{self.quantity}>"

    @property
    def line_total(self) -> Decimal:
        return self.price_at_add * self.quantity
