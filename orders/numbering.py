"""Order number generation.

Numbers look like ``BZS20260118093012-3FA9C01B``: a configurable prefix,
the UTC creation second and eight random hex digits. The random part keeps
numbers generated in the same second apart without reading any counter;
the unique index on ``Order.order_number`` is the final guard.
"""

import secrets
from datetime import datetime, timezone as dt_timezone

from django.conf import settings

RANDOM_BYTES = 4
MAX_ATTEMPTS = 5


def generate_order_number(now=None) -> str:
    now = now or datetime.now(dt_timezone.utc)
    prefix = getattr(settings, "BAZAARSETU_ORDER_NUMBER_PREFIX", "BZS")
    stamp = now.astimezone(dt_timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"{prefix}{stamp}-{secrets.token_hex(RANDOM_BYTES).upper()}"
