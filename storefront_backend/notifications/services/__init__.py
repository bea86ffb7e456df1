from .mailer import (
    INTENT_CONFIRMATION,
    INTENT_PROCESSING,
    INTENT_SHIPPED,
    MailDeliveryError,
    MailNotConfiguredError,
    NotificationError,
    UnknownNotificationIntentError,
    dispatch_order_notification,
    is_configured,
    render_order_message,
    send_contact_message,
)

__all__ = [
    "INTENT_CONFIRMATION",
    "INTENT_PROCESSING",
    "INTENT_SHIPPED",
    "MailDeliveryError",
    "MailNotConfiguredError",
    "NotificationError",
    "UnknownNotificationIntentError",
    "dispatch_order_notification",
    "is_configured",
    "render_order_message",
    "send_contact_message",
]
