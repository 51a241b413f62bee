"""Default receivers for the order lifecycle signals.

Delivery channels (SMS, e-mail, push) are out of scope; the receivers
record the notification that would be sent so it shows up in the logs.
"""

import structlog
from django.dispatch import receiver

from .models import Order
from .signals import order_placed, order_status_changed

logger = structlog.get_logger(__name__)


@receiver(order_placed, sender=Order, dispatch_uid="orders.notify_supplier_order_placed")
def notify_supplier_order_placed(sender, order, **kwargs):
    logger.info(
        "notification_queued",
        notification="order_placed",
        recipient_id=order.supplier_id,
        order_number=order.order_number,
        total_amount=str(order.total_amount),
    )


@receiver(order_status_changed, sender=Order, dispatch_uid="orders.notify_status_changed")
def notify_status_changed(sender, order, previous_status, actor=None, **kwargs):
    recipient_id = order.supplier_id if order.status == "cancelled" else order.vendor_id
    logger.info(
        "notification_queued",
        notification="order_status_changed",
        recipient_id=recipient_id,
        order_number=order.order_number,
        previous_status=previous_status,
        status=order.status,
    )
