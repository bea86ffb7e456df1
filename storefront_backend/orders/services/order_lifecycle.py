"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed status transitions for Order
entities and applies admin status updates.

Transitions:
    pending    -> processing | cancelled
    processing -> shipped    | cancelled
    shipped    -> delivered
    delivered, cancelled: terminal

Side effects:
- Entering `processing` or `shipped` dispatches exactly one customer
  notification (best-effort).
- Re-submitting the current status is a no-op for status and sends nothing
  (tracking number may still change).
"""

from __future__ import annotations

import logging

from django.db import transaction

from notifications.services import (
    INTENT_PROCESSING,
    INTENT_SHIPPED,
    dispatch_order_notification,
)
from orders.models import Order

logger = logging.getLogger(__name__)

# ============================================================
# DOMAIN ERRORS
# ============================================================


class OrderLifecycleError(Exception):
    pass


class InvalidOrderStatusError(OrderLifecycleError):
    pass


class InvalidOrderTransitionError(OrderLifecycleError):
    pass


# ============================================================
# STATE DEFINITIONS
# ============================================================

VALID_STATUSES = {value for value, _ in Order.STATUS_CHOICES}

TERMINAL_STATES = {
    Order.STATUS_DELIVERED,
    Order.STATUS_CANCELLED,
}

ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING: {
        Order.STATUS_PROCESSING,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_PROCESSING: {
        Order.STATUS_SHIPPED,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_SHIPPED: {
        Order.STATUS_DELIVERED,
    },
}

NOTIFY_ON_ENTER = {
    Order.STATUS_PROCESSING: INTENT_PROCESSING,
    Order.STATUS_SHIPPED: INTENT_SHIPPED,
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str):
    if target_status not in VALID_STATUSES:
        raise InvalidOrderStatusError(f"Invalid status '{target_status}'")

    if not can_transition(from_status=order.status, to_status=target_status):
        raise InvalidOrderTransitionError(
            f"Order {order.order_number} cannot transition from "
            f"'{order.status}' to '{target_status}'"
        )


# ============================================================
# APPLY
# ============================================================


def update_order_status(
    *,
    order: Order,
    status: str | None = None,
    tracking_number: str | None = None,
) -> tuple[Order, bool]:
    """
    Apply an admin update. Returns (order, status_changed).

    status=None or the current status leaves the status untouched.
    """
    target = (status or order.status or "").strip()
    if target not in VALID_STATUSES:
        raise InvalidOrderStatusError(f"Invalid status '{target}'")

    with transaction.atomic():
        locked = Order.objects.select_for_update().get(pk=order.pk)

        status_changed = target != locked.status
        if status_changed:
            validate_transition(order=locked, target_status=target)
            previous = locked.status
            locked.status = target

        update_fields = ["status", "updated_at"] if status_changed else []

        if tracking_number is not None:
            tracking = tracking_number.strip()
            if tracking != locked.tracking_number:
                locked.tracking_number = tracking
                update_fields = [*(update_fields or ["updated_at"]), "tracking_number"]

        if update_fields:
            locked.save(update_fields=update_fields)

    if status_changed:
        logger.info(
            "Order status changed",
            extra={
                "order_id": str(locked.id),
                "from_status": previous,
                "to_status": target,
            },
        )

        intent = NOTIFY_ON_ENTER.get(target)
        if intent:
            dispatch_order_notification(locked, intent)

    return locked, status_changed
