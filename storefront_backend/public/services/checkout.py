# public/services/checkout.py

"""
CHECKOUT SESSION INITIATOR (APPLICATION SERVICE)

Purpose:
- Validate a storefront cart against the live catalog + inventory
- Compute subtotal and shipping
- Create a hosted payment session and return its redirect URL

Validation order (first failure wins, nothing is created):
1) empty item list                          -> EmptyCheckoutError
2) every item has a product_id + quantity   -> InvalidCheckoutItemError
3) every product exists                     -> ProductNotFoundError
4) every product is published               -> ProductUnavailableError
5) per-product quantity <= inventory_count -> InsufficientInventoryError

Money rules:
- Unit prices come from the catalog, never from the client.
- shipping = flat rate, or 0.00 when subtotal >= free-shipping threshold.
- Non-zero shipping is sent as its own "Shipping" line item.

The validated items are echoed into session metadata so the completion
webhook can rebuild the order (see orders/services/materialization.py).
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.conf import settings

from products.models import Product
from public.services.stripe_checkout import PaymentProviderError, create_checkout_session

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")

# Stripe caps each metadata value at 500 characters.
METADATA_VALUE_LIMIT = 500

SHIPPING_LINE_NAME = "Shipping"


# ============================================================
# DOMAIN ERRORS
# ============================================================

class CheckoutError(Exception):
    pass


class EmptyCheckoutError(CheckoutError):
    pass


class InvalidCheckoutItemError(CheckoutError):
    pass


class ProductNotFoundError(CheckoutError):
    pass


class ProductUnavailableError(CheckoutError):
    pass


class InsufficientInventoryError(CheckoutError):
    pass


class PaymentSessionError(CheckoutError):
    pass


# ============================================================
# HELPERS
# ============================================================

def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_int_qty(value) -> int:
    if isinstance(value, bool):
        raise ValueError("quantity must be a whole integer unit")

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        s = value.strip()
        if s.isdigit():
            return int(s)

    raise ValueError("quantity must be a whole integer unit")


def _item_label(item, idx: int) -> str:
    name = str(item.get("name") or "").strip() if isinstance(item, dict) else ""
    return f"'{name}'" if name else f"#{idx + 1}"


def _storefront_cfg() -> dict:
    return dict(getattr(settings, "STOREFRONT", {}) or {})


def compute_shipping(subtotal: Decimal) -> Decimal:
    cfg = _storefront_cfg()
    flat = _money(cfg.get("FLAT_SHIPPING_RATE"))
    threshold = _money(cfg.get("FREE_SHIPPING_THRESHOLD"))
    if _money(subtotal) >= threshold:
        return Decimal("0.00")
    return flat


# ============================================================
# VALUES
# ============================================================

@dataclass(frozen=True)
class CheckoutLine:
    product: Product
    quantity: int
    description: str = ""
    image: str = ""

    @property
    def unit_price(self) -> Decimal:
        return _money(self.product.price)

    @property
    def line_total(self) -> Decimal:
        return _money(self.unit_price * self.quantity)


@dataclass(frozen=True)
class CheckoutResult:
    session_id: str
    url: str
    shipping_cost: Decimal
    subtotal: Decimal


# ============================================================
# VALIDATION
# ============================================================

def validate_checkout_items(items) -> list[CheckoutLine]:
    if not items:
        raise EmptyCheckoutError("No items provided")

    # 2) shape
    wanted = []
    for idx, item in enumerate(items):
        label = _item_label(item, idx)
        raw_id = item.get("product_id") if isinstance(item, dict) else None
        if raw_id in (None, "") or not str(raw_id).strip():
            raise InvalidCheckoutItemError(f"Item {label} is missing product ID")

        try:
            qty = _to_int_qty(item.get("quantity"))
        except ValueError:
            raise InvalidCheckoutItemError(f"Item {label} has an invalid quantity")
        if qty < 1:
            raise InvalidCheckoutItemError(f"Item {label} has an invalid quantity")

        wanted.append((idx, item, str(raw_id).strip(), qty))

    # 3) existence
    products_by_key = {}
    valid_ids = []
    for _, _, raw_id, _ in wanted:
        try:
            valid_ids.append(uuid.UUID(raw_id))
        except ValueError:
            continue
    found = Product.objects.in_bulk(valid_ids)

    for idx, item, raw_id, _ in wanted:
        try:
            product = found.get(uuid.UUID(raw_id))
        except ValueError:
            product = None
        if product is None:
            raise ProductNotFoundError(f"Product not found: {_item_label(item, idx)}")
        products_by_key[idx] = product

    # 4) publication
    for idx, _, _, _ in wanted:
        product = products_by_key[idx]
        if not product.is_published:
            raise ProductUnavailableError(f"{product.name} is no longer available")

    # 5) live inventory, summed per product (a product may be split across lines)
    requested = {}
    for idx, _, _, qty in wanted:
        product = products_by_key[idx]
        requested[product.pk] = requested.get(product.pk, 0) + qty
        if requested[product.pk] > int(product.inventory_count or 0):
            raise InsufficientInventoryError(
                f"Insufficient inventory for {product.name}. "
                f"Only {int(product.inventory_count or 0)} available."
            )

    lines = []
    for idx, item, _, qty in wanted:
        product = products_by_key[idx]
        client_price = item.get("price")
        try:
            if client_price not in (None, "") and _money(client_price) != _money(product.price):
                logger.warning(
                    "Client price differs from catalog price; using catalog price",
                    extra={"product_id": str(product.id), "client_price": str(client_price)},
                )
        except (InvalidOperation, ValueError, TypeError):
            logger.warning(
                "Unparseable client price ignored",
                extra={"product_id": str(product.id)},
            )

        lines.append(
            CheckoutLine(
                product=product,
                quantity=qty,
                description=str(item.get("description") or product.description or ""),
                image=str(item.get("image") or product.image_url or ""),
            )
        )

    return lines


# ============================================================
# METADATA
# ============================================================

def build_session_metadata(*, lines, shipping_cost: Decimal, user=None, email: str = "") -> dict:
    items_json = json.dumps(
        [
            {
                "product_id": str(line.product.id),
                "name": line.product.name,
                "price": str(line.unit_price),
                "quantity": line.quantity,
            }
            for line in lines
        ],
        separators=(",", ":"),
    )
    if len(items_json) > METADATA_VALUE_LIMIT:
        raise InvalidCheckoutItemError(
            "Too many different items for a single checkout. Please split your order."
        )

    user_id = getattr(user, "pk", None) if getattr(user, "is_authenticated", False) else None

    return {
        "items": items_json,
        "shipping_cost": str(_money(shipping_cost)),
        "user_id": "" if user_id is None else str(user_id),
        "email": email or "",
    }


# ============================================================
# ENTRYPOINT
# ============================================================

def start_checkout(
    *,
    items,
    success_url: str = "",
    cancel_url: str = "",
    user=None,
) -> CheckoutResult:
    lines = validate_checkout_items(items)

    subtotal = _money(sum((line.line_total for line in lines), Decimal("0.00")))
    shipping_cost = compute_shipping(subtotal)

    cfg = _storefront_cfg()
    base_url = (cfg.get("APP_BASE_URL") or "").rstrip("/")
    success_url = success_url or f"{base_url}/checkout/success?session_id={{CHECKOUT_SESSION_ID}}"
    cancel_url = cancel_url or f"{base_url}/cart"

    email = ""
    if user is not None and getattr(user, "is_authenticated", False):
        email = (getattr(user, "email", "") or "").strip()

    metadata = build_session_metadata(
        lines=lines, shipping_cost=shipping_cost, user=user, email=email
    )

    line_items = [
        {
            "name": line.product.name,
            "description": line.description,
            "image": line.image,
            "unit_amount": line.unit_price,
            "quantity": line.quantity,
        }
        for line in lines
    ]
    if shipping_cost > Decimal("0.00"):
        line_items.append(
            {
                "name": SHIPPING_LINE_NAME,
                "description": "Standard shipping",
                "unit_amount": shipping_cost,
                "quantity": 1,
            }
        )

    try:
        session = create_checkout_session(
            line_items=line_items,
            success_url=success_url,
            cancel_url=cancel_url,
            metadata=metadata,
            shipping_countries=list(cfg.get("SHIPPING_COUNTRIES") or []),
            collect_phone=bool(cfg.get("COLLECT_PHONE", True)),
            automatic_tax=bool(cfg.get("AUTOMATIC_TAX", False)),
            customer_email=email,
            currency=cfg.get("CURRENCY") or "usd",
        )
    except PaymentProviderError as e:
        logger.exception("Checkout session creation failed")
        raise PaymentSessionError("Failed to create checkout session") from e

    logger.info(
        "Checkout session started",
        extra={
            "session_id": session["id"],
            "subtotal": str(subtotal),
            "shipping_cost": str(shipping_cost),
            "line_count": len(lines),
        },
    )

    return CheckoutResult(
        session_id=session["id"],
        url=session["url"],
        shipping_cost=shipping_cost,
        subtotal=subtotal,
    )
