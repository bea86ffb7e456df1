# notifications/services/mailer.py

"""
======================================================
PATH: notifications/services/mailer.py
======================================================
NOTIFICATION DISPATCH

Purpose:
- Render + send order emails (confirmation / processing / shipped)
- Send contact-form messages to the store inbox

Rules:
- Order notifications are BEST-EFFORT:
    - mail not configured => logged warning, returns False
    - send failure        => logged error, returns False
    - never raises into the caller (order flows must not roll back on mail)
- Contact form is SYNCHRONOUS and LOUD:
    - mail not configured => MailNotConfiguredError
    - send failure        => MailDeliveryError

Transport:
- Django email backend configured from EMAIL_URL (settings.NOTIFICATIONS["ENABLED"]
  is true only when EMAIL_URL is set).
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone
from django.utils.html import strip_tags

logger = logging.getLogger(__name__)


# ============================================================
# DOMAIN ERRORS
# ============================================================

class NotificationError(Exception):
    pass


class MailNotConfiguredError(NotificationError):
    pass


class MailDeliveryError(NotificationError):
    pass


class UnknownNotificationIntentError(NotificationError):
    pass


# ============================================================
# INTENTS
# ============================================================

INTENT_CONFIRMATION = "confirmation"
INTENT_PROCESSING = "processing"
INTENT_SHIPPED = "shipped"

ORDER_TEMPLATES = {
    INTENT_CONFIRMATION: (
        "Order Confirmation #{order_number}",
        "notifications/order_confirmation.html",
    ),
    INTENT_PROCESSING: (
        "Order #{order_number} is Being Processed",
        "notifications/order_processing.html",
    ),
    INTENT_SHIPPED: (
        "Order #{order_number} Has Shipped",
        "notifications/order_shipped.html",
    ),
}


# ============================================================
# CONFIG
# ============================================================

def _config() -> dict:
    return dict(getattr(settings, "NOTIFICATIONS", {}) or {})


def is_configured() -> bool:
    cfg = _config()
    return bool(cfg.get("ENABLED")) and bool(cfg.get("FROM_EMAIL"))


def _from_email() -> str:
    cfg = _config()
    store_name = cfg.get("STORE_NAME") or ""
    from_email = cfg.get("FROM_EMAIL") or ""
    return f"{store_name} <{from_email}>" if store_name else from_email


def _send(*, to: list[str], subject: str, html: str, reply_to: list[str] | None = None):
    message = EmailMultiAlternatives(
        subject=subject,
        body=strip_tags(html),
        from_email=_from_email(),
        to=to,
        reply_to=reply_to or None,
    )
    message.attach_alternative(html, "text/html")
    message.send(fail_silently=False)


# ============================================================
# ORDER NOTIFICATIONS
# ============================================================

def render_order_message(order, intent: str) -> tuple[str, str]:
    """
    (subject, html) for an order + intent.
    """
    if intent not in ORDER_TEMPLATES:
        raise UnknownNotificationIntentError(f"Unknown notification intent '{intent}'")

    subject_fmt, template_name = ORDER_TEMPLATES[intent]
    cfg = _config()
    address = dict(order.shipping_address or {})

    context = {
        "order": order,
        "lines": list(order.lines.all()),
        "address": address,
        "customer_name": address.get("name") or order.email,
        "subtotal": order.subtotal,
        "shipping_cost": Decimal(order.shipping_cost),
        "tax_amount": Decimal(order.tax_amount),
        "total_amount": Decimal(order.total_amount),
        "store_name": cfg.get("STORE_NAME") or "",
        "support_email": cfg.get("SUPPORT_EMAIL") or "",
        "year": timezone.now().year,
    }
    html = render_to_string(template_name, context)
    return subject_fmt.format(order_number=order.order_number), html


def dispatch_order_notification(order, intent: str) -> bool:
    """
    Best-effort order email. Returns True if the message was handed to the
    mail backend, False otherwise. Never raises.
    """
    log_extra = {
        "order_id": str(order.id),
        "order_number": order.order_number,
        "intent": intent,
    }

    if not is_configured():
        logger.warning("Mail not configured; skipping order notification", extra=log_extra)
        return False

    if not order.email:
        logger.warning("Order has no contact email; skipping notification", extra=log_extra)
        return False

    try:
        subject, html = render_order_message(order, intent)
        _send(to=[order.email], subject=subject, html=html)
    except Exception:
        logger.exception("Order notification failed", extra=log_extra)
        return False

    logger.info("Order notification sent", extra=log_extra)
    return True


# ============================================================
# CONTACT FORM
# ============================================================

def send_contact_message(*, name: str, email: str, message: str, subject: str = "") -> None:
    """
    Deliver a contact-form submission to the store inbox (reply-to = sender).
    """
    if not is_configured():
        logger.error("Contact form used while mail is not configured")
        raise MailNotConfiguredError("Email delivery is not configured")

    cfg = _config()
    to_email = cfg.get("CONTACT_EMAIL") or cfg.get("SUPPORT_EMAIL")
    if not to_email:
        raise MailNotConfiguredError("No contact inbox configured")

    html = render_to_string(
        "notifications/contact_message.html",
        {
            "name": name,
            "email": email,
            "subject": subject,
            "message": message,
            "store_name": cfg.get("STORE_NAME") or "",
        },
    )
    mail_subject = f"New Contact Form Submission from {name}"
    if subject:
        mail_subject = f"{mail_subject}: {subject}"

    try:
        _send(to=[to_email], subject=mail_subject, html=html, reply_to=[email])
    except Exception as e:
        logger.exception("Contact message delivery failed")
        raise MailDeliveryError("Failed to send message. Please try again.") from e

    logger.info("Contact message sent", extra={"reply_to": email})
