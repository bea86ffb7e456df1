# products/services/inventory.py

"""
======================================================
PATH: products/services/inventory.py
======================================================
INVENTORY LEDGER SERVICES

Purpose:
- Read live availability for checkout validation.
- Decrement stock for materialized orders as ONE conditional UPDATE:
      UPDATE ... SET inventory_count = inventory_count - q
      WHERE id = ? AND inventory_count >= q
  (no read-modify-write from Python, so concurrent orders cannot lose updates
   or drive the count negative).

Rules:
- Quantities are integer units.
- A decrement that cannot be satisfied raises InsufficientInventoryError and
  changes nothing.
"""

from __future__ import annotations

import logging

from django.db.models import F

from products.models import Product

logger = logging.getLogger(__name__)


# ============================================================
# DOMAIN ERRORS
# ============================================================

class InventoryError(Exception):
    pass


class InsufficientInventoryError(InventoryError):
    pass


def _to_int_qty(value) -> int:
    """
    Quantity normalizer.
    HARD RULE: quantities are integer units in this system.
    """
    if value is None or value == "":
        return 0

    if isinstance(value, bool):
        raise ValueError("quantity must be a whole integer unit")

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        s = value.strip()
        if s.isdigit():
            return int(s)

    raise ValueError("quantity must be a whole integer unit")


def available_inventory(*, product_id) -> int | None:
    """
    Live inventory_count for a product, or None when the product does not exist.
    """
    count = (
        Product.objects.filter(pk=product_id)
        .values_list("inventory_count", flat=True)
        .first()
    )
    return None if count is None else int(count)


def decrement_inventory(*, product_id, quantity) -> int:
    """
    Atomically take `quantity` units from a product.

    Returns the number of units taken (0 for a zero quantity).
    Raises InsufficientInventoryError if the product is missing or short.
    """
    qty = _to_int_qty(quantity)
    if qty < 0:
        raise ValueError("quantity must be >= 0")
    if qty == 0:
        return 0

    updated = Product.objects.filter(
        pk=product_id,
        inventory_count__gte=qty,
    ).update(inventory_count=F("inventory_count") - qty)

    if updated != 1:
        available = available_inventory(product_id=product_id)
        if available is None:
            raise InsufficientInventoryError(f"Product {product_id} does not exist")
        raise InsufficientInventoryError(
            f"Insufficient inventory for product {product_id}. "
            f"Requested: {qty}, Available: {available}"
        )

    logger.info(
        "Inventory decremented",
        extra={"product_id": str(product_id), "quantity": qty},
    )
    return qty
