"""Orders app models.

A vendor checkout produces one ``Checkout`` record and one ``Order`` per
supplier in the cart. Each OrderItem snapshots the product name and the
price the vendor saw in the cart, so orders stay stable when the catalog
changes later. ``OrderStatusHistory`` is append-only: rows are created by
the order engine on placement and on every transition and never edited.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from catalog.models import Product


class OrderStatus(models.TextChoices):
    PENDING = "pending", "pending"
    ACCEPTED = "accepted", "accepted"
    REJECTED = "rejected", "rejected"
    PROCESSING = "processing", "processing"
    SHIPPED = "shipped", "shipped"
    DELIVERED = "delivered", "delivered"
    CANCELLED = "cancelled", "cancelled"


# current status -> statuses reachable from it
ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: (OrderStatus.ACCEPTED, OrderStatus.REJECTED, OrderStatus.CANCELLED),
    OrderStatus.ACCEPTED: (OrderStatus.PROCESSING,),
    OrderStatus.PROCESSING: (OrderStatus.SHIPPED,),
    OrderStatus.SHIPPED: (OrderStatus.DELIVERED,),
    OrderStatus.REJECTED: (),
    OrderStatus.DELIVERED: (),
    OrderStatus.CANCELLED: (),
}

# target status -> role allowed to move an order into it
TRANSITION_ROLES = {
    OrderStatus.ACCEPTED: "supplier",
    OrderStatus.REJECTED: "supplier",
    OrderStatus.PROCESSING: "supplier",
    OrderStatus.SHIPPED: "supplier",
    OrderStatus.DELIVERED: "supplier",
    OrderStatus.CANCELLED: "vendor",
}

# statuses whose stock is released back to the catalog
RESTOCKING_STATUSES = (OrderStatus.REJECTED, OrderStatus.CANCELLED)


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, ())


class PaymentMethod(models.TextChoices):
    CASH_ON_DELIVERY = "cash_on_delivery", "cash_on_delivery"
    ONLINE = "online", "online"
    BANK_TRANSFER = "bank_transfer", "bank_transfer"


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "pending"
    PAID = "paid", "paid"
    FAILED = "failed", "failed"
    REFUNDED = "refunded", "refunded"


class Checkout(models.Model):
    """One vendor checkout; groups the per-supplier orders it produced."""

    vendor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="checkouts",
    )
    reference = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    idempotency_key = models.CharField(max_length=64, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["vendor", "idempotency_key"],
                condition=models.Q(idempotency_key__isnull=False),
                name="unique_checkout_idempotency_key",
            ),
        ]

    def __str__(self) -> str:
        return f"Checkout<{self.reference}>"


class Order(models.Model):
    """A stock-reserving order from one vendor to one supplier."""

    order_number = models.CharField(max_length=40, unique=True, editable=False)
    checkout = models.ForeignKey(
        Checkout, on_delete=models.PROTECT, related_name="orders"
    )
    vendor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders_placed",
    )
    supplier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders_received",
    )
    status = models.CharField(
        max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING
    )

    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), editable=False
    )
    total_items = models.PositiveIntegerField(default=0, editable=False)

    delivery_street = models.CharField(max_length=200)
    delivery_city = models.CharField(max_length=100)
    delivery_state = models.CharField(max_length=100)
    delivery_pincode = models.CharField(max_length=6)
    expected_delivery_date = models.DateTimeField(null=True, blank=True)
    actual_delivery_date = models.DateTimeField(null=True, blank=True)

    payment_method = models.CharField(
        max_length=20, choices=PaymentMethod.choices, default=PaymentMethod.CASH_ON_DELIVERY
    )
    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )

    vendor_notes = models.CharField(max_length=500, blank=True, default="")
    supplier_notes = models.CharField(max_length=500, blank=True, default="")
    rejection_reason = models.CharField(max_length=500, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=["vendor", "status"], name="order_vendor_status_idx"),
            models.Index(fields=["supplier", "status"], name="order_supplier_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Order<{self.order_number} {self.status}>"

    @property
    def delivery_address(self) -> dict:
        return {
            "street": self.delivery_street,
            "city": self.delivery_city,
            "state": self.delivery_state,
            "pincode": self.delivery_pincode,
        }

    def recalculate_totals(self, items=None):
        """Derive ``total_items``/``total_amount`` from the order lines and persist them."""
        if items is None:
            items = list(self.items.all())
        self.total_items = sum(item.quantity for item in items)
        self.total_amount = sum((item.line_total for item in items), Decimal("0.00"))
        self.save(update_fields=["total_items", "total_amount", "updated_at"])


class OrderItem(models.Model):
    """A product line of an order, priced from the cart snapshot."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="order_items"
    )
    supplier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="order_items_supplied",
    )
    product_name = models.CharField(max_length=100)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    price_unit = models.CharField(max_length=10, choices=Product.Unit.choices)
    line_total = models.DecimalField(max_digits=12, decimal_places=2, editable=False)
    notes = models.CharField(max_length=200, blank=True, default="")

    class Meta:
        ordering = ("id",)
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1), name="order_item_quantity_positive"
            ),
        ]

    def __str__(self) -> str:
        return f"OrderItem<{self.product_name} x{self.quantity}>"

    def save(self, *args, **kwargs):
        self.line_total = self.unit_price * self.quantity
        super().save(*args, **kwargs)


class OrderStatusHistory(models.Model):
    """Append-only log entry: a status the order held, who set it and when."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="status_history")
    status = models.CharField(max_length=20, choices=OrderStatus.choices)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )
    notes = models.CharField(max_length=500, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("created_at", "id")
        verbose_name_plural = "order status history"

    def __str__(self) -> str:
        return f"{self.order_id}:{self.status}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Status history entries cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Status history entries cannot be deleted.")
