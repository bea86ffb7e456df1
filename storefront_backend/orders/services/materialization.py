# orders/services/materialization.py

"""
ORDER MATERIALIZATION (APPLICATION SERVICE)

Purpose:
- Turn a verified "checkout session completed" payload into exactly one Order
  plus its OrderLines, decrement inventory, and send the confirmation email.

Steps:
1) Idempotency: an Order already holding this payment_session_id is returned
   untouched (duplicate webhook delivery).
2) Extract items (from session metadata), email, shipping address, money
   fields and payment reference. Metadata is UNTRUSTED: every item is
   re-validated here.
3) Insert Order + OrderLines in ONE transaction (status = processing, since
   payment already succeeded). Order number collisions are retried.
4) Decrement inventory per item with the atomic ledger primitive. One item
   failing is logged and does not stop the others.
5) Dispatch the confirmation notification (best-effort, never raises).

Error semantics:
- Failures in 2) or 3) raise MaterializationError / DatabaseError so the
  webhook answers 5xx and the processor retries.
- 4) and 5) never raise.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction

from notifications.services import INTENT_CONFIRMATION, dispatch_order_notification
from orders.models import Order, OrderLine, normalize_shipping_address
from orders.services.order_numbers import generate_order_number
from products.models import Product
from products.services.inventory import InventoryError, decrement_inventory

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")

ORDER_NUMBER_ATTEMPTS = 3


# ============================================================
# DOMAIN ERRORS
# ============================================================

class MaterializationError(Exception):
    pass


class InvalidSessionPayloadError(MaterializationError):
    pass


# ============================================================
# HELPERS
# ============================================================

def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _from_minor_units(v) -> Decimal:
    """
    Processor amounts are integer minor units (cents).
    """
    if v is None or v == "":
        return Decimal("0.00")
    return _money(Decimal(int(v)) / Decimal(100))


def _ref_id(value) -> str:
    """
    Processor references arrive either as a bare id or as an expanded object.
    """
    if isinstance(value, dict):
        return str(value.get("id") or "")
    return str(value or "")


@dataclass(frozen=True)
class SessionItem:
    product_id: str
    name: str
    price: Decimal
    quantity: int


@dataclass(frozen=True)
class SessionOrderData:
    session_id: str
    email: str
    items: list
    shipping_address: dict
    shipping_cost: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    payment_intent_id: str
    user_id: int | None


# ============================================================
# EXTRACTION (untrusted metadata -> validated values)
# ============================================================

def parse_session_items(raw) -> list[SessionItem]:
    """
    Validate the item list echoed back through session metadata.

    Each item needs a UUID product_id, a name, price >= 0 and quantity >= 1.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw or "[]")
        except ValueError as e:
            raise InvalidSessionPayloadError("Session metadata items are not valid JSON") from e

    if not isinstance(raw, list) or not raw:
        raise InvalidSessionPayloadError("Session metadata contains no items")

    items = []
    for idx, row in enumerate(raw):
        if not isinstance(row, dict):
            raise InvalidSessionPayloadError(f"Item {idx} is not an object")

        try:
            product_id = str(uuid.UUID(str(row.get("product_id"))))
        except (TypeError, ValueError, AttributeError) as e:
            raise InvalidSessionPayloadError(f"Item {idx} has an invalid product_id") from e

        name = str(row.get("name") or "").strip()
        if not name:
            raise InvalidSessionPayloadError(f"Item {idx} has no name")

        try:
            price = _money(row.get("price"))
        except (InvalidOperation, TypeError, ValueError) as e:
            raise InvalidSessionPayloadError(f"Item {idx} has an invalid price") from e
        if price < Decimal("0.00"):
            raise InvalidSessionPayloadError(f"Item {idx} has a negative price")

        quantity = row.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidSessionPayloadError(f"Item {idx} has an invalid quantity")

        items.append(
            SessionItem(product_id=product_id, name=name, price=price, quantity=quantity)
        )

    return items


def _extract_shipping_address(session: dict) -> dict:
    customer = session.get("customer_details") or {}
    shipping = (
        session.get("shipping_details")
        or (session.get("collected_information") or {}).get("shipping_details")
        or {}
    )
    address = shipping.get("address") or customer.get("address") or {}

    return normalize_shipping_address(
        {
            "name": shipping.get("name") or customer.get("name") or "",
            "address_line1": address.get("line1"),
            "address_line2": address.get("line2"),
            "city": address.get("city"),
            "state": address.get("state"),
            "postal_code": address.get("postal_code"),
            "country": address.get("country"),
            "phone": customer.get("phone"),
        }
    )


def _resolve_user_id(raw) -> int | None:
    if raw in (None, ""):
        return None
    try:
        return (
            get_user_model()
            .objects.filter(pk=raw)
            .values_list("pk", flat=True)
            .first()
        )
    except (TypeError, ValueError, ValidationError):
        return None


def extract_session_order_data(session: dict) -> SessionOrderData:
    session_id = str(session.get("id") or "").strip()
    if not session_id:
        raise InvalidSessionPayloadError("Session payload has no id")

    metadata = session.get("metadata") or {}
    customer = session.get("customer_details") or {}

    items = parse_session_items(metadata.get("items"))

    email = (
        customer.get("email")
        or session.get("customer_email")
        or metadata.get("email")
        or ""
    ).strip()
    if not email:
        raise InvalidSessionPayloadError("Session payload has no customer email")

    totals = session.get("total_details") or {}
    try:
        if totals.get("amount_shipping"):
            shipping_cost = _from_minor_units(totals.get("amount_shipping"))
        else:
            shipping_cost = _money(metadata.get("shipping_cost"))
        tax_amount = _from_minor_units(totals.get("amount_tax"))

        if session.get("amount_total") is not None:
            total_amount = _from_minor_units(session.get("amount_total"))
        else:
            subtotal = sum((i.price * i.quantity for i in items), Decimal("0.00"))
            total_amount = _money(subtotal + shipping_cost + tax_amount)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidSessionPayloadError("Session payload has invalid amounts") from e

    return SessionOrderData(
        session_id=session_id,
        email=email,
        items=items,
        shipping_address=_extract_shipping_address(session),
        shipping_cost=shipping_cost,
        tax_amount=tax_amount,
        total_amount=total_amount,
        payment_intent_id=_ref_id(session.get("payment_intent")),
        user_id=_resolve_user_id(metadata.get("user_id")),
    )


# ============================================================
# INSERT (order + lines, one transaction)
# ============================================================

def _insert_order(data: SessionOrderData) -> tuple[Order, bool]:
    products = Product.objects.in_bulk([item.product_id for item in data.items])

    for attempt in range(1, ORDER_NUMBER_ATTEMPTS + 1):
        order_number = generate_order_number()
        try:
            with transaction.atomic():
                order = Order.objects.create(
                    order_number=order_number,
                    user_id=data.user_id,
                    email=data.email,
                    status=Order.STATUS_PROCESSING,
                    shipping_cost=data.shipping_cost,
                    tax_amount=data.tax_amount,
                    total_amount=data.total_amount,
                    shipping_address=data.shipping_address,
                    payment_session_id=data.session_id,
                    payment_intent_id=data.payment_intent_id,
                )
                OrderLine.objects.bulk_create(
                    [
                        OrderLine(
                            order=order,
                            product=products.get(uuid.UUID(item.product_id)),
                            product_ref=item.product_id,
                            product_name=item.name,
                            unit_price=item.price,
                            quantity=item.quantity,
                        )
                        for item in data.items
                    ]
                )
            return order, True
        except IntegrityError:
            existing = Order.objects.filter(payment_session_id=data.session_id).first()
            if existing is not None:
                # Concurrent delivery of the same event won the insert.
                return existing, False

            logger.warning(
                "Order number collision; retrying",
                extra={"order_number": order_number, "attempt": attempt},
            )

    raise MaterializationError(
        f"Could not allocate a unique order number for session {data.session_id}"
    )


# ============================================================
# INVENTORY (best-effort, per item)
# ============================================================

def _decrement_inventory_for(order: Order, items: list[SessionItem]) -> int:
    failures = 0
    for item in items:
        try:
            decrement_inventory(product_id=item.product_id, quantity=item.quantity)
        except (InventoryError, ValueError, DatabaseError):
            failures += 1
            logger.exception(
                "Inventory decrement failed for order item",
                extra={
                    "order_id": str(order.id),
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                },
            )
    return failures


# ============================================================
# ENTRYPOINT
# ============================================================

def materialize_order(session: dict) -> tuple[Order, bool]:
    """
    Create the order for a completed checkout session.

    Returns (order, created). created=False means the session was already
    materialized and nothing was changed.
    """
    session_id = str((session or {}).get("id") or "").strip()

    if session_id:
        existing = Order.objects.filter(payment_session_id=session_id).first()
        if existing is not None:
            logger.info(
                "Duplicate checkout completion; order already exists",
                extra={"session_id": session_id, "order_id": str(existing.id)},
            )
            return existing, False

    data = extract_session_order_data(session or {})

    order, created = _insert_order(data)
    if not created:
        logger.info(
            "Duplicate checkout completion; order already exists",
            extra={"session_id": session_id, "order_id": str(order.id)},
        )
        return order, False

    logger.info(
        "Order created",
        extra={
            "order_id": str(order.id),
            "order_number": order.order_number,
            "session_id": data.session_id,
            "line_count": len(data.items),
        },
    )

    _decrement_inventory_for(order, data.items)

    dispatch_order_notification(order, INTENT_CONFIRMATION)

    return order, True
