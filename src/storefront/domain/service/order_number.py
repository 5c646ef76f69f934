"""Order numbers and payment references."""

from __future__ import annotations

import random
import string
from datetime import datetime

ORDER_PREFIX = "MMDR"
_ALPHABET = string.digits + string.ascii_uppercase


def generate_order_number(now: datetime, rng: random.Random | None = None) -> str:
    """``MMDR-YYYYMMDD-XXXXXXXX`` with eight random base-36 characters."""
    rng = rng or random.Random()
    suffix = "".join(rng.choice(_ALPHABET) for _ in range(8))
    return f"{ORDER_PREFIX}-{now:%Y%m%d}-{suffix}"


def payment_reference(epoch_ms: int) -> str:
    return f"txn_{epoch_ms}"
