"""Product Catalog collaborator.

The cart and order services read products and move stock only through
``ProductCatalog``. Stock changes are single ``UPDATE`` statements built
from ``F()`` expressions; the decrement is conditioned on the current
quantity so two concurrent callers can never both succeed past zero.
"""

from typing import Optional

import structlog
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from .exceptions import InsufficientStock
from .models import Product

logger = structlog.get_logger(__name__)


class ProductCatalog:
    """Read products and apply guarded stock changes."""

    def get_by_id(self, product_id) -> Optional[Product]:
        return (
            Product.objects.select_related("supplier", "supplier__profile")
            .filter(pk=product_id)
            .first()
        )

    def lock_many(self, product_ids) -> dict:
        """Lock the given products (in id order) and return them keyed by id."""
        qs = (
            Product.objects.select_for_update()
            .filter(pk__in=sorted(set(product_ids)))
            .order_by("pk")
        )
        return {p.pk: p for p in qs}

    def decrement_available(self, product_id, amount: int) -> None:
        """Take ``amount`` units out of stock or raise ``InsufficientStock``."""
        if amount <= 0:
            raise ValueError("amount must be positive")
        updated = Product.objects.filter(
            pk=product_id,
            is_active=True,
            available_quantity__gte=amount,
        ).update(
            available_quantity=F("available_quantity") - amount,
            updated_at=timezone.now(),
        )
        if updated != 1:
            raise InsufficientStock(
                f"Insufficient stock for product #{product_id}.",
                field="quantity",
                product_id=product_id,
                requested=amount,
            )

    def increment_available(self, product_id, amount: int) -> None:
        """Put ``amount`` units back into stock."""
        if amount <= 0:
            raise ValueError("amount must be positive")
        updated = Product.objects.filter(pk=product_id).update(
            available_quantity=F("available_quantity") + amount,
            updated_at=timezone.now(),
        )
        if updated == 1:
            logger.info("stock_restored", product_id=product_id, quantity=amount)
        else:
            logger.warning("stock_restore_skipped", product_id=product_id, quantity=amount)

    def set_available(self, product_id, quantity: int) -> Product:
        """Replace the stock count of a product with a supplier's physical count.

        The row is locked first, so the write is ordered after any checkout
        that already holds the product.
        """
        if quantity < 0:
            raise ValueError("quantity must not be negative")
        with transaction.atomic():
            product = Product.objects.select_for_update().get(pk=product_id)
            previous = product.available_quantity
            product.available_quantity = quantity
            product.save(update_fields=["available_quantity", "updated_at"])
        logger.info("stock_set", product_id=product_id, previous=previous, quantity=quantity)
        return product

    def adjust_available(self, product_id, delta: int) -> Product:
        """Restock (positive ``delta``) or write off (negative ``delta``) units."""
        if delta > 0:
            self.increment_available(product_id, delta)
        elif delta < 0:
            self.decrement_available(product_id, -delta)
        return Product.objects.get(pk=product_id)
