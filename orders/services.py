"""Order Engine.

Turns a vendor's cart into one pending order per supplier and moves orders
through the status state machine.

Checkout validates every cart line against the locked catalog rows before
anything is written, then decrements stock, creates the orders and clears
the cart, all inside one transaction. A failure at any point leaves stock,
orders and cart exactly as they were.

Transitions are a compare-and-set on the status read under a row lock, so
of two concurrent identical requests exactly one succeeds and the other
gets ``InvalidTransition`` without touching the history. Rejection and
cancellation put back exactly the quantities stored on the order lines.
"""

from datetime import timedelta
from decimal import Decimal

import structlog
from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from cart.exceptions import EmptyCart
from cart.services import CartStore, group_by_supplier
from catalog.exceptions import InsufficientStock, ProductUnavailable
from catalog.services import ProductCatalog
from common.exceptions import DomainError, InvalidTransition
from profiles.directory import UserDirectory
from profiles.models import Profile
from .exceptions import OrderNotFound, RejectionReasonRequired, TransitionForbidden
from .models import (
    RESTOCKING_STATUSES,
    TRANSITION_ROLES,
    Checkout,
    Order,
    OrderItem,
    OrderStatus,
    OrderStatusHistory,
    PaymentMethod,
    can_transition,
)
from .numbering import MAX_ATTEMPTS, generate_order_number
from .signals import order_placed, order_status_changed, send_on_commit

logger = structlog.get_logger(__name__)

ACCEPTED_OR_LATER = (
    OrderStatus.ACCEPTED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)


def _rate(part, whole) -> float:
    return round(part / whole * 100, 1) if whole else 0.0


class OrderEngine:
    """Checkout, order queries and status transitions."""

    def __init__(self, catalog=None, carts=None, directory=None):
        self.catalog = catalog or ProductCatalog()
        self.directory = directory or UserDirectory()
        self.carts = carts or CartStore(catalog=self.catalog, directory=self.directory)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def orders_for(self, actor, role=None):
        """Orders visible to ``actor``: placed by a vendor or addressed to a supplier."""
        role = role or self.directory.get_role(actor.pk)
        if role == Profile.Role.VENDOR:
            return Order.objects.filter(vendor=actor)
        if role == Profile.Role.SUPPLIER:
            return Order.objects.filter(supplier=actor)
        return Order.objects.none()

    def get_order(self, actor, order_id) -> Order:
        order = (
            self.orders_for(actor)
            .select_related("vendor", "supplier")
            .prefetch_related("items", "status_history")
            .filter(pk=order_id)
            .first()
        )
        if order is None:
            raise OrderNotFound(order_id=order_id)
        return order

    def find_checkout(self, vendor, idempotency_key):
        if not idempotency_key:
            return None
        return Checkout.objects.filter(vendor=vendor, idempotency_key=idempotency_key).first()

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------
    def create_orders(
        self,
        vendor,
        *,
        delivery_address: dict,
        payment_method: str = PaymentMethod.CASH_ON_DELIVERY,
        vendor_notes: str = "",
        idempotency_key=None,
    ):
        """Place the vendor's cart.

        Returns ``(checkout, created)``. With an idempotency key that was
        already used by this vendor, the earlier checkout is returned and
        ``created`` is False.
        """
        existing = self.find_checkout(vendor, idempotency_key)
        if existing is not None:
            logger.info("checkout_replayed", vendor_id=vendor.pk, checkout=str(existing.reference))
            return existing, False

        try:
            with transaction.atomic():
                checkout, orders = self._place(
                    vendor,
                    delivery_address=delivery_address,
                    payment_method=payment_method,
                    vendor_notes=vendor_notes,
                    idempotency_key=idempotency_key or None,
                )
        except DomainError as exc:
            logger.warning("checkout_rejected", vendor_id=vendor.pk, reason=exc.code, **exc.context)
            raise
        except IntegrityError:
            # a concurrent request with the same key won the race
            existing = self.find_checkout(vendor, idempotency_key)
            if existing is None:
                raise
            return existing, False

        if orders is None:
            logger.info("checkout_replayed", vendor_id=vendor.pk, checkout=str(checkout.reference))
            return checkout, False

        logger.info(
            "checkout_completed",
            vendor_id=vendor.pk,
            checkout=str(checkout.reference),
            order_numbers=[o.order_number for o in orders],
            total=str(sum((o.total_amount for o in orders), Decimal("0.00"))),
        )
        return checkout, True

    def _place(self, vendor, *, delivery_address, payment_method, vendor_notes, idempotency_key):
        cart = self.carts.lock(vendor)
        # a request with the same key may have committed while we waited on the lock
        existing = self.find_checkout(vendor, idempotency_key)
        if existing is not None:
            return existing, None

        lines = list(cart.items.select_related("product").order_by("id"))
        if not lines:
            raise EmptyCart(field="cart")

        # pass 1: validate every line against the locked products
        products = self.catalog.lock_many([line.product_id for line in lines])
        for line in lines:
            product = products.get(line.product_id)
            if product is None or not product.is_active:
                raise ProductUnavailable(
                    f"{line.product.name} is no longer available.",
                    field="items",
                    product_id=line.product_id,
                )
            if line.quantity > product.available_quantity:
                raise InsufficientStock(
                    f"Only {product.available_quantity} {product.price_unit} of {product.name} available.",
                    field="items",
                    product_id=product.pk,
                    requested=line.quantity,
                    available_quantity=product.available_quantity,
                )

        # pass 2: reserve stock and write the orders
        checkout = Checkout.objects.create(vendor=vendor, idempotency_key=idempotency_key)
        expected = timezone.now() + timedelta(days=settings.BAZAARSETU_EXPECTED_DELIVERY_DAYS)
        orders = []
        for supplier_id, supplier_lines in group_by_supplier(lines).items():
            order = self._create_order(
                checkout=checkout,
                vendor=vendor,
                supplier_id=supplier_id,
                status=OrderStatus.PENDING,
                delivery_street=delivery_address["street"],
                delivery_city=delivery_address["city"],
                delivery_state=delivery_address["state"],
                delivery_pincode=delivery_address["pincode"],
                expected_delivery_date=expected,
                payment_method=payment_method,
                vendor_notes=vendor_notes or "",
            )
            items = []
            for line in supplier_lines:
                self.catalog.decrement_available(line.product_id, line.quantity)
                item = OrderItem(
                    order=order,
                    product_id=line.product_id,
                    supplier_id=supplier_id,
                    product_name=products[line.product_id].name,
                    quantity=line.quantity,
                    unit_price=line.price_at_add,
                    price_unit=line.price_unit,
                    notes=line.notes,
                )
                item.save()
                items.append(item)
            order.recalculate_totals(items)
            OrderStatusHistory.objects.create(
                order=order, status=OrderStatus.PENDING, changed_by=vendor, notes="Order placed"
            )
            send_on_commit(order_placed, Order, order=order)
            orders.append(order)

        self.carts.clear(vendor)
        return checkout, orders

    def _create_order(self, **fields) -> Order:
        """Insert an order under a fresh number, retrying on a number collision."""
        for attempt in range(1, MAX_ATTEMPTS + 1):
            number = generate_order_number()
            try:
                with transaction.atomic():
                    return Order.objects.create(order_number=number, **fields)
            except IntegrityError:
                if not Order.objects.filter(order_number=number).exists():
                    raise
                logger.warning("order_number_collision", order_number=number, attempt=attempt)
        raise IntegrityError("Could not generate a unique order number.")

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def transition(self, actor, order_id, target, *, notes: str = "", reason: str = "") -> Order:
        """Move an order visible to ``actor`` into ``target`` status."""
        role = self.directory.get_role(actor.pk)
        with transaction.atomic():
            order = (
                self.orders_for(actor, role)
                .select_for_update()
                .filter(pk=order_id)
                .first()
            )
            if order is None:
                raise OrderNotFound(order_id=order_id)
            if target not in OrderStatus.values:
                raise InvalidTransition(f"Unknown status '{target}'.", field="status")
            previous = order.status
            # the table decides legality; the role only who may take a legal step
            if not can_transition(previous, target):
                raise InvalidTransition(
                    f"Cannot change status from {previous} to {target}.",
                    field="status",
                    current_status=previous,
                    requested_status=target,
                )
            if TRANSITION_ROLES.get(target) != role:
                raise TransitionForbidden(
                    f"A {role} cannot set an order to {target}.", field="status"
                )
            reason = (reason or "").strip()
            if target == OrderStatus.REJECTED and not reason:
                raise RejectionReasonRequired(field="reason")

            now = timezone.now()
            changes = {"status": target, "updated_at": now}
            if target == OrderStatus.DELIVERED:
                changes["actual_delivery_date"] = now
            if target == OrderStatus.REJECTED:
                changes["rejection_reason"] = reason
            if notes and role == Profile.Role.SUPPLIER:
                changes["supplier_notes"] = notes

            updated = Order.objects.filter(pk=order.pk, status=previous).update(**changes)
            if updated != 1:
                raise InvalidTransition(
                    "Order status changed concurrently.", field="status", current_status=previous
                )
            OrderStatusHistory.objects.create(
                order=order, status=target, changed_by=actor, notes=reason or notes or ""
            )
            if target in RESTOCKING_STATUSES:
                self._restore_stock(order)

            order.refresh_from_db()
            send_on_commit(
                order_status_changed, Order, order=order, previous_status=previous, actor=actor
            )

        logger.info(
            "order_status_changed",
            order_number=order.order_number,
            from_status=previous,
            to_status=target,
            actor_id=actor.pk,
        )
        return order

    def accept(self, actor, order_id, notes: str = "") -> Order:
        return self.transition(actor, order_id, OrderStatus.ACCEPTED, notes=notes)

    def reject(self, actor, order_id, reason: str) -> Order:
        return self.transition(actor, order_id, OrderStatus.REJECTED, reason=reason)

    def cancel(self, actor, order_id, notes: str = "") -> Order:
        return self.transition(actor, order_id, OrderStatus.CANCELLED, notes=notes)

    def _restore_stock(self, order):
        for item in order.items.all():
            self.catalog.increment_available(item.product_id, item.quantity)

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------
    def analytics(self, actor) -> dict:
        role = self.directory.get_role(actor.pk)
        qs = self.orders_for(actor, role)
        delivered = Q(status=OrderStatus.DELIVERED)
        stats = qs.aggregate(
            total=Count("id"),
            pending=Count("id", filter=Q(status=OrderStatus.PENDING)),
            delivered=Count("id", filter=delivered),
            accepted=Count("id", filter=Q(status__in=ACCEPTED_OR_LATER)),
            amount=Sum("total_amount", filter=delivered),
        )
        amount = stats["amount"] or Decimal("0.00")

        if role == Profile.Role.SUPPLIER:
            return {
                "total_orders": stats["total"],
                "pending_orders": stats["pending"],
                "accepted_orders": stats["accepted"],
                "total_revenue": amount,
                "acceptance_rate": _rate(stats["accepted"], stats["total"]),
            }
        return {
            "total_orders": stats["total"],
            "pending_orders": stats["pending"],
            "delivered_orders": stats["delivered"],
            "total_spent": amount,
            "completion_rate": _rate(stats["delivered"], stats["total"]),
        }
