# orders/tests/helpers.py

"""
Shared fixtures for order tests: completed checkout-session payloads and
ready-made orders.
"""

import json
from decimal import Decimal

from orders.models import Order, OrderLine
from orders.services.order_numbers import generate_order_number


def completed_session(
    *,
    session_id="cs_test_001",
    items=(),
    email="buyer@example.com",
    amount_shipping=599,
    amount_tax=0,
    amount_total=None,
    shipping_cost="5.99",
    user_id="",
    payment_intent="pi_test_001",
):
    """
    A checkout.session.completed data object as the processor sends it.

    items: iterable of (product, quantity) or dicts already in metadata shape.
    """
    rows = []
    subtotal_cents = 0
    for entry in items:
        if isinstance(entry, dict):
            row = dict(entry)
        else:
            product, quantity = entry
            row = {
                "product_id": str(product.id),
                "name": product.name,
                "price": str(product.price),
                "quantity": quantity,
            }
            subtotal_cents += int(product.price * 100) * quantity
        rows.append(row)

    if amount_total is None:
        amount_total = subtotal_cents + int(amount_shipping or 0) + int(amount_tax or 0)

    return {
        "id": session_id,
        "object": "checkout.session",
        "amount_total": amount_total,
        "payment_intent": payment_intent,
        "customer_details": {
            "email": email,
            "name": "Ada Buyer",
            "phone": "+15555550100",
        },
        "shipping_details": {
            "name": "Ada Buyer",
            "address": {
                "line1": "1 Main St",
                "line2": "",
                "city": "Springfield",
                "state": "IL",
                "postal_code": "62701",
                "country": "US",
            },
        },
        "total_details": {
            "amount_shipping": amount_shipping,
            "amount_tax": amount_tax,
        },
        "metadata": {
            "items": json.dumps(rows, separators=(",", ":")),
            "shipping_cost": shipping_cost,
            "user_id": user_id,
            "email": email,
        },
    }


def make_order(
    *,
    product=None,
    quantity=1,
    status=Order.STATUS_PENDING,
    email="buyer@example.com",
    user=None,
    session_id=None,
):
    order = Order.objects.create(
        order_number=generate_order_number(),
        user=user,
        email=email,
        status=status,
        shipping_cost=Decimal("5.99"),
        tax_amount=Decimal("0.00"),
        total_amount=Decimal("5.99") + (product.price * quantity if product else Decimal("0.00")),
        shipping_address={"full_name": "Ada Buyer", "address_line1": "1 Main St"},
        payment_session_id=session_id or f"cs_{generate_order_number()}",
    )
    if product is not None:
        OrderLine.objects.create(
            order=order,
            product=product,
            product_ref=str(product.id),
            product_name=product.name,
            unit_price=product.price,
            quantity=quantity,
        )
    return order
