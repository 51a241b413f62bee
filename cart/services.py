"""Cart Store.

All cart mutations go through ``CartStore``. Each mutation runs in one
transaction that locks the vendor's cart row first, so concurrent requests
for the same vendor are applied one after the other, and ends by recomputing
the cart totals. Product data comes from the ``ProductCatalog`` collaborator
and supplier verification from the ``UserDirectory`` collaborator.
"""

from decimal import Decimal

import structlog
from django.db import transaction

from catalog.exceptions import InsufficientStock, ProductNotFound
from catalog.services import ProductCatalog
from common.exceptions import BusinessRuleViolation
from profiles.directory import UserDirectory
from .exceptions import BelowMinimum, ItemNotFound, SupplierUnverified
from .models import Cart, CartItem

logger = structlog.get_logger(__name__)

ISSUE_UNAVAILABLE = "unavailable"
ISSUE_STOCK = "stock"
ISSUE_MINIMUM_ORDER = "minimum_order"
ISSUE_PRICE_CHANGE = "price_change"


def group_by_supplier(items):
    """Group cart or order lines by the supplier of their product.

    Returns a dict ``{supplier_id: [items]}`` in order of first appearance.
    """
    groups = {}
    for item in items:
        groups.setdefault(item.product.supplier_id, []).append(item)
    return groups


def _issue(kind, item, message, **extra):
    return {
        "type": kind,
        "product_id": item.product_id,
        "product_name": item.product.name,
        "quantity": item.quantity,
        "message": message,
        **extra,
    }


class CartStore:
    """Per-vendor cart operations with catalog validation."""

    def __init__(self, catalog=None, directory=None):
        self.catalog = catalog or ProductCatalog()
        self.directory = directory or UserDirectory()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_or_create(self, vendor) -> Cart:
        cart, _ = Cart.objects.get_or_create(vendor=vendor)
        return cart

    def load(self, vendor) -> Cart:
        """Return the vendor's cart after dropping lines for inactive products."""
        cart = self.get_or_create(vendor)
        stale = cart.items.filter(product__is_active=False)
        if stale.exists():
            with transaction.atomic():
                cart = self.lock(vendor)
                removed, _ = cart.items.filter(product__is_active=False).delete()
                cart.recalculate_totals()
            logger.info("cart_pruned", vendor_id=vendor.pk, removed=removed)
        return cart

    def validate(self, vendor) -> list:
        """Re-check every line against the live catalog without changing anything."""
        cart = Cart.objects.filter(vendor=vendor).first()
        if cart is None:
            return []

        issues = []
        for item in cart.items.select_related("product"):
            product = item.product
            if not product.is_active:
                issues.append(_issue(ISSUE_UNAVAILABLE, item, "Product is no longer available"))
                continue
            if item.quantity > product.available_quantity:
                issues.append(_issue(
                    ISSUE_STOCK, item,
                    f"Only {product.available_quantity} {product.price_unit} available",
                    available_quantity=product.available_quantity,
                ))
            if item.quantity < product.minimum_order_quantity:
                issues.append(_issue(
                    ISSUE_MINIMUM_ORDER, item,
                    f"Minimum order quantity is {product.minimum_order_quantity} {product.price_unit}",
                    minimum_order_quantity=product.minimum_order_quantity,
                ))
            if item.price_at_add != product.price_amount:
                issues.append(_issue(
                    ISSUE_PRICE_CHANGE, item,
                    f"Price has changed from ₹{item.price_at_add} to ₹{product.price_amount}",
                    old_price=str(item.price_at_add),
                    new_price=str(product.price_amount),
                ))
        return issues

    def summary(self, vendor) -> dict:
        """Cart lines grouped by supplier with per-group subtotals."""
        cart = self.get_or_create(vendor)
        items = list(
            cart.items.select_related("product", "product__supplier", "product__supplier__profile")
        )
        groups = []
        for supplier_id, lines in group_by_supplier(items).items():
            supplier = lines[0].product.supplier
            profile = getattr(supplier, "profile", None)
            groups.append({
                "supplier_id": supplier_id,
                "supplier_name": (profile.business_name if profile else "") or supplier.username,
                "items": lines,
                "subtotal": sum((line.line_total for line in lines), Decimal("0.00")),
                "total_items": sum(line.quantity for line in lines),
            })
        return {
            "total_items": cart.total_items,
            "estimated_total": cart.estimated_total,
            "supplier_groups": groups,
        }

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add_item(self, vendor, product_id, quantity: int, notes: str = "") -> Cart:
        """Add ``quantity`` of a product; an existing line is increased, not replaced."""
        if quantity < 1:
            raise BusinessRuleViolation("Quantity must be at least 1.", field="quantity")

        with transaction.atomic():
            cart = self.lock(vendor)
            product = self._active_product(product_id)
            if not self.directory.is_verified(product.supplier_id):
                raise SupplierUnverified(field="product_id", product_id=product.pk)
            self._check_minimum(product, quantity)

            item = cart.items.filter(product=product).first()
            new_quantity = quantity + (item.quantity if item else 0)
            self._check_stock(product, new_quantity)

            if item:
                item.quantity = new_quantity
                item.notes = notes or ""
                item.save(update_fields=["quantity", "notes", "updated_at"])
            else:
                CartItem.objects.create(
                    cart=cart,
                    product=product,
                    quantity=quantity,
                    price_at_add=product.price_amount,
                    price_unit=product.price_unit,
                    notes=notes or "",
                )
            cart.recalculate_totals()

        logger.info(
            "cart_item_added",
            vendor_id=vendor.pk,
            product_id=product.pk,
            quantity=quantity,
            line_quantity=new_quantity,
        )
        return cart

    def update_item_quantity(self, vendor, product_id, quantity: int) -> Cart:
        """Replace the stored quantity of a line; zero or less removes it."""
        if quantity <= 0:
            return self.remove_item(vendor, product_id)

        with transaction.atomic():
            cart = self.lock(vendor)
            item = cart.items.select_related("product").filter(product_id=product_id).first()
            if item is None:
                raise ItemNotFound(field="product_id", product_id=product_id)
            product = item.product
            if not product.is_active:
                raise ProductNotFound(field="product_id", product_id=product_id)
            self._check_minimum(product, quantity)
            self._check_stock(product, quantity)

            item.quantity = quantity
            item.save(update_fields=["quantity", "updated_at"])
            cart.recalculate_totals()

        logger.info("cart_item_updated", vendor_id=vendor.pk, product_id=product_id, quantity=quantity)
        return cart

    def remove_item(self, vendor, product_id) -> Cart:
        """Remove a line if present. Removing an absent line is a no-op."""
        with transaction.atomic():
            cart = self.lock(vendor)
            removed, _ = cart.items.filter(product_id=product_id).delete()
            if removed:
                cart.recalculate_totals()

        if removed:
            logger.info("cart_item_removed", vendor_id=vendor.pk, product_id=product_id)
        return cart

    def clear(self, vendor) -> Cart:
        """Empty the cart; the cart row itself is kept."""
        with transaction.atomic():
            cart = self.lock(vendor)
            cart.items.all().delete()
            cart.recalculate_totals(items=[])

        logger.info("cart_cleared", vendor_id=vendor.pk)
        return cart

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def lock(self, vendor) -> Cart:
        """Get-or-create the cart and lock its row until the transaction ends."""
        cart = self.get_or_create(vendor)
        return Cart.objects.select_for_update().get(pk=cart.pk)

    def _active_product(self, product_id):
        product = self.catalog.get_by_id(product_id)
        if product is None or not product.is_active:
            raise ProductNotFound(field="product_id", product_id=product_id)
        return product

    @staticmethod
    def _check_minimum(product, quantity):
        if quantity < product.minimum_order_quantity:
            raise BelowMinimum(
                f"Minimum order quantity is {product.minimum_order_quantity} {product.price_unit}",
                field="quantity",
                minimum_order_quantity=product.minimum_order_quantity,
            )

    @staticmethod
    def _check_stock(product, quantity):
        if quantity > product.available_quantity:
            raise InsufficientStock(
                f"Only {product.available_quantity} {product.price_unit} available",
                field="quantity",
                available_quantity=product.available_quantity,
            )
