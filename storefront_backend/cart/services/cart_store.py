# cart/services/cart_store.py

"""
======================================================
PATH: cart/services/cart_store.py
======================================================
CART STORE

Purpose:
- Hold the buyer's working selection (product + quantity) and derive totals
  for display.
- The store is an explicit object built over a storage backend and passed
  to whoever needs it. There is no module-level cart.

Rules:
- Each product appears at most once; adding an existing product merges
  quantities.
- Quantities are positive integers. Setting a quantity <= 0 removes the line.
- Prices are the snapshot taken when the line was added. Totals never
  re-read the catalog; checkout re-validates against live data.
- No network / DB access during mutation.

Storage backends:
- SessionCartStorage: Django session (survives reloads for the same browser,
  not synced across devices)
- MemoryCartStorage: plain in-process list (tests, scripts)
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")

DEFAULT_SESSION_KEY = "storefront_cart"

# Per-line ceiling; keeps derived totals inside the rendered money columns.
MAX_LINE_QUANTITY = 999


class CartError(Exception):
    pass


class CartQuantityLimitError(CartError):
    pass


def _check_limit(qty: int) -> None:
    if qty > MAX_LINE_QUANTITY:
        raise CartQuantityLimitError(
            f"quantity cannot exceed {MAX_LINE_QUANTITY} per product"
        )


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_int_qty(value) -> int:
    """
    Quantity normalizer. Whole integer units only (may be <= 0 for updates).
    """
    if isinstance(value, bool):
        raise CartError("quantity must be a whole number")

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        s = value.strip()
        if s.lstrip("-").isdigit():
            return int(s)

    raise CartError("quantity must be a whole number")


# ============================================================
# CART LINE
# ============================================================

@dataclass
class CartLine:
    product_id: str
    name: str
    price: Decimal
    quantity: int
    image: str = ""

    @property
    def line_total(self) -> Decimal:
        return _money(self.price * self.quantity)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["price"] = str(_money(self.price))
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        return cls(
            product_id=str(data["product_id"]),
            name=str(data.get("name") or ""),
            price=_money(data.get("price")),
            quantity=int(data.get("quantity") or 0),
            image=str(data.get("image") or ""),
        )


# ============================================================
# PURE TOTALS
# ============================================================

def total_items(lines: Iterable[CartLine]) -> int:
    return sum(int(line.quantity) for line in lines)


def total_price(lines: Iterable[CartLine]) -> Decimal:
    """
    Sum of snapshot price * quantity, quantized to cents.
    """
    total = Decimal("0.00")
    for line in lines:
        total += Decimal(line.price) * int(line.quantity)
    return _money(total)


# ============================================================
# STORAGE BACKENDS
# ============================================================

class MemoryCartStorage:
    def __init__(self, rows: list[dict] | None = None):
        self._rows = list(rows or [])

    def load(self) -> list[dict]:
        return list(self._rows)

    def save(self, rows: list[dict]) -> None:
        self._rows = list(rows)


class SessionCartStorage:
    """
    Persists cart rows as JSON-safe dicts in a Django session.
    """

    def __init__(self, session, key: str = DEFAULT_SESSION_KEY):
        self.session = session
        self.key = key

    def load(self) -> list[dict]:
        rows = self.session.get(self.key) or []
        return list(rows) if isinstance(rows, list) else []

    def save(self, rows: list[dict]) -> None:
        self.session[self.key] = list(rows)
        self.session.modified = True


# ============================================================
# CART STORE
# ============================================================

class CartStore:
    def __init__(self, storage):
        self.storage = storage

    # -----------------------------
    # READ
    # -----------------------------
    def lines(self) -> list[CartLine]:
        out = []
        for row in self.storage.load():
            try:
                out.append(CartLine.from_dict(row))
            except (KeyError, TypeError, ValueError, ArithmeticError):
                logger.warning("Dropping malformed cart row", extra={"row": row})
        return out

    def get_total_items(self) -> int:
        return total_items(self.lines())

    def get_total_price(self) -> Decimal:
        return total_price(self.lines())

    # -----------------------------
    # WRITE
    # -----------------------------
    def _write(self, lines: list[CartLine]) -> list[CartLine]:
        self.storage.save([line.to_dict() for line in lines])
        return lines

    def add_item(self, product, quantity=1) -> CartLine:
        """
        Add `quantity` units of a product (a model instance or any object with
        id / name / price / image_url). Merges into an existing line.
        """
        qty = _to_int_qty(quantity)
        if qty <= 0:
            raise CartError("quantity must be >= 1")
        _check_limit(qty)

        product_id = str(product.id)
        lines = self.lines()

        for line in lines:
            if line.product_id == product_id:
                _check_limit(line.quantity + qty)
                line.quantity += qty
                self._write(lines)
                return line

        line = CartLine(
            product_id=product_id,
            name=str(product.name),
            price=_money(product.price),
            quantity=qty,
            image=str(getattr(product, "image_url", "") or ""),
        )
        lines.append(line)
        self._write(lines)
        return line

    def update_quantity(self, product_id, quantity) -> CartLine | None:
        """
        Set a line's quantity. quantity <= 0 removes the line (returns None).
        """
        qty = _to_int_qty(quantity)
        if qty <= 0:
            self.remove_item(product_id)
            return None
        _check_limit(qty)

        product_id = str(product_id)
        lines = self.lines()
        for line in lines:
            if line.product_id == product_id:
                line.quantity = qty
                self._write(lines)
                return line

        raise CartError(f"Product {product_id} is not in the cart")

    def remove_item(self, product_id) -> bool:
        product_id = str(product_id)
        lines = self.lines()
        kept = [line for line in lines if line.product_id != product_id]
        if len(kept) == len(lines):
            return False
        self._write(kept)
        return True

    def clear_cart(self) -> None:
        self.storage.save([])

    # -----------------------------
    # CHECKOUT
    # -----------------------------
    def to_checkout_items(self) -> list[dict]:
        """
        Cart lines in the shape the checkout endpoint accepts.
        """
        return [
            {
                "product_id": line.product_id,
                "name": line.name,
                "price": str(_money(line.price)),
                "quantity": line.quantity,
                "image": line.image,
            }
            for line in self.lines()
        ]


def session_cart(session, key: str = DEFAULT_SESSION_KEY) -> CartStore:
    return CartStore(SessionCartStorage(session, key))
