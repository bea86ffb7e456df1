# orders/models/order_line.py

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from products.models import Product


class OrderLine(models.Model):
    """
    Line items for Order.

    product_name / unit_price are snapshots taken at purchase time.
    product is a soft link: it survives as NULL if the product is deleted.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="lines",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_lines",
    )
    product_ref = models.CharField(
        max_length=64,
        help_text="Product id as it appeared in the checkout session",
    )

    product_name = models.CharField(max_length=255)
    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    class Meta:
        ordering = ["id"]

    @property
    def line_total(self) -> Decimal:
        return (Decimal(self.unit_price) * int(self.quantity)).quantize(
            Decimal("0.01")
        )

    def __str__(self):
        return f"{self.product_name} x{self.quantity}"
