# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.text import slugify


class Product(models.Model):
    """
    Represents a sellable catalog product.

    STOCK MODEL (IMPORTANT):
    - inventory_count is the authoritative count of purchasable units
    - it is mutated ONLY by admin edits and by order materialization
      (atomic conditional decrement, see products/services/inventory.py)
    - the column is unsigned: inventory never goes negative

    SLUG:
    - derived from name, unique
    - regenerated whenever the product is renamed
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, db_index=True)
    slug = models.SlugField(max_length=280, unique=True, blank=True)
    description = models.TextField(blank=True, default="")

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    inventory_count = models.PositiveIntegerField(default=0)

    image_url = models.URLField(blank=True, default="")

    is_published = models.BooleanField(default=False)
    featured = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["is_published", "featured"],
                name="products_pr_is_publ_4e7d2a_idx",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.slug})"

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "Product name is required"})

        if self.price is None or Decimal(self.price) < Decimal("0.00"):
            raise ValidationError({"price": "Price must be non-negative"})

    def _stored_name(self):
        if self._state.adding:
            return None
        return (
            Product.objects.filter(pk=self.pk).values_list("name", flat=True).first()
        )

    def save(self, *args, **kwargs):
        if not self.slug or self._stored_name() not in (None, self.name):
            self.slug = unique_slug_for(self.name, exclude_pk=self.pk)
            update_fields = kwargs.get("update_fields")
            if update_fields is not None and "slug" not in update_fields:
                kwargs["update_fields"] = [*update_fields, "slug"]
        super().save(*args, **kwargs)


def unique_slug_for(name: str, *, exclude_pk=None) -> str:
    """
    Slug from a product name; clashes get a numeric suffix (-2, -3, ...).
    """
    base = slugify(name or "")[:270] or "product"
    taken = Product.objects.filter(slug__startswith=base)
    if exclude_pk is not None:
        taken = taken.exclude(pk=exclude_pk)
    taken_slugs = set(taken.values_list("slug", flat=True))

    if base not in taken_slugs:
        return base

    i = 2
    while f"{base}-{i}" in taken_slugs:
        i += 1
    return f"{base}-{i}"
