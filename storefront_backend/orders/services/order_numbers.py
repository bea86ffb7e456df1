# orders/services/order_numbers.py

"""
Order number format: ORD-<epoch millis>-<9 random base36 chars>

Uniqueness is enforced by Order.order_number (unique); materialization
retries the insert on a collision.
"""

from __future__ import annotations

import secrets
import time

ORDER_NUMBER_PREFIX = "ORD"
_SUFFIX_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_SUFFIX_LENGTH = 9


def generate_order_number(*, now_ms: int | None = None) -> str:
    millis = int(time.time() * 1000) if now_ms is None else int(now_ms)
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{ORDER_NUMBER_PREFIX}-{millis}-{suffix}"
