from decimal import Decimal
from unittest import mock

from django.test import TestCase

from cart.services import CartStore
from catalog.models import Product
from common.exceptions import InvalidTransition
from common.testing import ADDRESS, make_product, make_supplier, make_vendor
from orders.exceptions import OrderNotFound, RejectionReasonRequired, TransitionForbidden
from orders.models import ALLOWED_TRANSITIONS, Order, OrderStatus, OrderStatusHistory
from orders.services import OrderEngine
from orders.signals import order_status_changed


class TransitionTestBase(TestCase):
    def setUp(self):
        self.engine = OrderEngine()
        self.carts = CartStore()
        self.vendor = make_vendor()
        self.supplier = make_supplier()
        self.product = make_product(self.supplier, available_quantity=10, price_amount=Decimal("40.00"))
        self.order = self.place(3)

    def place(self, quantity, vendor=None, product=None):
        vendor = vendor or self.vendor
        self.carts.add_item(vendor, (product or self.product).id, quantity)
        checkout, _ = self.engine.create_orders(vendor, delivery_address=ADDRESS)
        return checkout.orders.get()

    def stock(self):
        return Product.objects.get(pk=self.product.pk).available_quantity

    def history(self, order=None):
        return list(
            OrderStatusHistory.objects.filter(order=order or self.order).values_list("status", flat=True)
        )


class HappyPathTests(TransitionTestBase):
    def test_full_lifecycle(self):
        self.engine.accept(self.supplier, self.order.id, notes="packing today")
        self.engine.transition(self.supplier, self.order.id, OrderStatus.PROCESSING)
        self.engine.transition(self.supplier, self.order.id, OrderStatus.SHIPPED)
        order = self.engine.transition(self.supplier, self.order.id, OrderStatus.DELIVERED)

        self.assertEqual(order.status, OrderStatus.DELIVERED)
        self.assertIsNotNone(order.actual_delivery_date)
        self.assertEqual(order.supplier_notes, "packing today")
        self.assertEqual(
            self.history(), ["pending", "accepted", "processing", "shipped", "delivered"]
        )
        # delivered orders keep their stock reservation
        self.assertEqual(self.stock(), 7)

    def test_skipping_states_is_invalid(self):
        with self.assertRaises(InvalidTransition):
            self.engine.transition(self.supplier, self.order.id, OrderStatus.SHIPPED)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.PENDING)
        self.assertEqual(self.history(), ["pending"])

    def test_status_changed_signal(self):
        seen = []

        def receiver(sender, order, previous_status, actor, **kwargs):
            seen.append((previous_status, order.status, actor.pk))

        order_status_changed.connect(receiver, sender=Order)
        self.addCleanup(order_status_changed.disconnect, receiver, sender=Order)
        with self.captureOnCommitCallbacks(execute=True):
            self.engine.accept(self.supplier, self.order.id)
        self.assertEqual(seen, [("pending", "accepted", self.supplier.pk)])


class CompensationTests(TransitionTestBase):
    def test_reject_restores_exact_quantity(self):
        self.assertEqual(self.stock(), 7)
        # supplier restocks in the meantime
        Product.objects.filter(pk=self.product.pk).update(available_quantity=20)

        order = self.engine.reject(self.supplier, self.order.id, "out of stock")

        self.assertEqual(order.status, OrderStatus.REJECTED)
        self.assertEqual(order.rejection_reason, "out of stock")
        self.assertEqual(self.history(), ["pending", "rejected"])
        self.assertEqual(self.stock(), 23)

    def test_reject_requires_reason(self):
        for reason in ("", "   "):
            with self.assertRaises(RejectionReasonRequired):
                self.engine.reject(self.supplier, self.order.id, reason)
        self.assertEqual(self.history(), ["pending"])
        self.assertEqual(self.stock(), 7)

    def test_vendor_cancels_pending_order(self):
        order = self.engine.cancel(self.vendor, self.order.id)
        self.assertEqual(order.status, OrderStatus.CANCELLED)
        self.assertEqual(self.stock(), 10)
        self.assertEqual(self.history(), ["pending", "cancelled"])

    def test_cancel_after_accept_is_invalid(self):
        self.engine.accept(self.supplier, self.order.id)
        with self.assertRaises(InvalidTransition):
            self.engine.cancel(self.vendor, self.order.id)
        self.assertEqual(self.stock(), 7)

    def test_stock_conservation_across_orders(self):
        original = 10
        second = self.place(4)
        third = self.place(2)
        self.engine.reject(self.supplier, second.id, "no delivery slot")
        self.engine.accept(self.supplier, third.id)

        reserved = sum(
            item.quantity
            for order in Order.objects.exclude(status__in=[OrderStatus.REJECTED, OrderStatus.CANCELLED])
            for item in order.items.all()
        )
        self.assertEqual(original, self.stock() + reserved)


class GuardTests(TransitionTestBase):
    def test_vendor_cannot_accept(self):
        with self.assertRaises(TransitionForbidden):
            self.engine.accept(self.vendor, self.order.id)
        self.assertEqual(self.history(), ["pending"])

    def test_supplier_cannot_cancel(self):
        with self.assertRaises(TransitionForbidden):
            self.engine.cancel(self.supplier, self.order.id)

    def test_other_parties_get_not_found(self):
        with self.assertRaises(OrderNotFound):
            self.engine.accept(make_supplier(), self.order.id)
        with self.assertRaises(OrderNotFound):
            self.engine.cancel(make_vendor(), self.order.id)
        with self.assertRaises(OrderNotFound):
            self.engine.accept(self.supplier, 99999)

    def test_double_accept_fails_second_time(self):
        self.engine.accept(self.supplier, self.order.id)
        with self.assertRaises(InvalidTransition):
            self.engine.accept(self.supplier, self.order.id)
        self.assertEqual(self.history(), ["pending", "accepted"])

    def test_lost_race_appends_nothing(self):
        # another request moved the order between our locked read and the update
        real_filter = Order.objects.filter

        def racing_filter(*args, **kwargs):
            if "status" in kwargs:
                Order.objects.all().update(status=OrderStatus.ACCEPTED)
            return real_filter(*args, **kwargs)

        with mock.patch.object(Order.objects, "filter", side_effect=racing_filter):
            with self.assertRaises(InvalidTransition):
                self.engine.reject(self.supplier, self.order.id, "late")
        self.assertEqual(self.history(), ["pending"])
        self.assertEqual(self.stock(), 7)

    def test_terminal_states_are_closed(self):
        terminal = [s for s, targets in ALLOWED_TRANSITIONS.items() if not targets]
        self.assertEqual(
            set(terminal), {OrderStatus.REJECTED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}
        )
        self.engine.cancel(self.vendor, self.order.id)
        for actor in (self.vendor, self.supplier):
            for target in OrderStatus.values:
                with self.assertRaises(InvalidTransition):
                    self.engine.transition(actor, self.order.id, target, reason="x")
        self.assertEqual(self.history(), ["pending", "cancelled"])

    def test_moving_back_to_pending_is_invalid_for_everyone(self):
        self.engine.accept(self.supplier, self.order.id)
        for actor in (self.vendor, self.supplier):
            with self.assertRaises(InvalidTransition):
                self.engine.transition(actor, self.order.id, OrderStatus.PENDING)
        self.assertEqual(self.history(), ["pending", "accepted"])

    def test_illegal_step_by_wrong_role_is_invalid(self):
        with self.assertRaises(InvalidTransition):
            self.engine.transition(self.vendor, self.order.id, OrderStatus.SHIPPED)

    def test_history_entries_are_append_only(self):
        entry = OrderStatusHistory.objects.get(order=self.order)
        entry.notes = "edited"
        with self.assertRaises(ValueError):
            entry.save()
        with self.assertRaises(ValueError):
            entry.delete()


class OrderNumberCollisionTests(TransitionTestBase):
    def test_collision_is_retried(self):
        taken = self.order.order_number
        self.carts.add_item(self.vendor, self.product.id, 1)
        with mock.patch(
            "orders.services.generate_order_number", side_effect=[taken, "BZS20260101000000-NEW00001"]
        ):
            checkout, _ = self.engine.create_orders(self.vendor, delivery_address=ADDRESS)
        self.assertEqual(checkout.orders.get().order_number, "BZS20260101000000-NEW00001")


class AnalyticsTests(TransitionTestBase):
    def test_vendor_and_supplier_dashboards(self):
        delivered = self.place(2)
        for target in (OrderStatus.ACCEPTED, OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED):
            self.engine.transition(self.supplier, delivered.id, target)
        rejected = self.place(1)
        self.engine.reject(self.supplier, rejected.id, "closed today")

        vendor_stats = self.engine.analytics(self.vendor)
        self.assertEqual(vendor_stats["total_orders"], 3)
        self.assertEqual(vendor_stats["pending_orders"], 1)
        self.assertEqual(vendor_stats["delivered_orders"], 1)
        self.assertEqual(vendor_stats["total_spent"], Decimal("80.00"))
        self.assertEqual(vendor_stats["completion_rate"], 33.3)

        supplier_stats = self.engine.analytics(self.supplier)
        self.assertEqual(supplier_stats["accepted_orders"], 1)
        self.assertEqual(supplier_stats["total_revenue"], Decimal("80.00"))
        self.assertEqual(supplier_stats["acceptance_rate"], 33.3)

        self.assertEqual(self.engine.analytics(make_supplier())["total_orders"], 0)
