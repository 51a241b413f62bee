"""Order lifecycle signals.

Both signals are sent with ``sender=Order`` only after the surrounding
transaction commits. Receivers run through ``send_robust``; a failing
receiver is logged and never affects the order.

- ``order_placed(order)``
- ``order_status_changed(order, previous_status, actor)``
"""

import structlog
from django.db import transaction
from django.dispatch import Signal

logger = structlog.get_logger(__name__)

order_placed = Signal()
order_status_changed = Signal()


def _dispatch(signal, sender, kwargs):
    for receiver, result in signal.send_robust(sender=sender, **kwargs):
        if isinstance(result, Exception):
            logger.error(
                "order_signal_receiver_failed",
                receiver=getattr(receiver, "__qualname__", repr(receiver)),
                error=str(result),
                exc_info=result,
            )


def send_on_commit(signal, sender, **kwargs):
    transaction.on_commit(lambda: _dispatch(signal, sender, kwargs), robust=True)
