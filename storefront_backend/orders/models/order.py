# orders/models/order.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

from orders.models.owner import AuthenticatedOwner, GuestOwner

ADDRESS_FIELDS = (
    "name",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "postal_code",
    "country",
    "phone",
)


def normalize_shipping_address(raw) -> dict:
    """
    Canonical shipping address dict.

    Accepts the legacy `full_name` key and maps it to `name`. Unknown keys
    are dropped; missing keys become "".
    """
    raw = dict(raw or {})
    if not raw.get("name") and raw.get("full_name"):
        raw["name"] = raw["full_name"]
    return {key: str(raw.get(key) or "").strip() for key in ADDRESS_FIELDS}


class Order(models.Model):
    """
    A paid storefront order.

    Key rules:
    - Created exactly once per completed payment session
      (payment_session_id is unique)
    - Line name/price are snapshots; later catalog edits never change them
    - Status only moves along orders/services/order_lifecycle.py transitions
    - Never deleted in normal operation
    """

    STATUS_PENDING = "pending"
    STATUS_PROCESSING = "processing"
    STATUS_SHIPPED = "shipped"
    STATUS_DELIVERED = "delivered"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_SHIPPED, "Shipped"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_number = models.CharField(
        max_length=40,
        unique=True,
        help_text="Human-readable order number (ORD-<millis>-<suffix>)",
    )

    # Null user => guest checkout
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    email = models.EmailField()

    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING
    )

    # Money fields (from the completed payment session)
    shipping_cost = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    tax_amount = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    shipping_address = models.JSONField(default=dict, blank=True)
    tracking_number = models.CharField(max_length=120, blank=True, default="")

    # Payment processor references (idempotency key = payment_session_id)
    payment_session_id = models.CharField(max_length=255, unique=True)
    payment_intent_id = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_orde_status_b1c9e4_idx"),
            models.Index(fields=["email"], name="orders_orde_email_5a0f3d_idx"),
        ]

    @property
    def subtotal(self) -> Decimal:
        return (
            Decimal(self.total_amount)
            - Decimal(self.shipping_cost)
            - Decimal(self.tax_amount)
        ).quantize(Decimal("0.01"))

    @property
    def owner(self):
        if self.user_id is not None:
            return AuthenticatedOwner(user_id=self.user_id, email=self.email)
        return GuestOwner(email=self.email)

    def save(self, *args, **kwargs):
        self.shipping_address = normalize_shipping_address(self.shipping_address)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.order_number} | {self.total_amount} | {self.status}"
