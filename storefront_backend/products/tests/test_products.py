# products/tests/test_products.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.test import TestCase

from products.models import Product


class ProductModelTests(TestCase):
    """
    Product model tests.

    GUARANTEES:
    - Products can be created safely
    - Slugs are derived from name, unique, and follow renames
    - Pricing is sane
    """

    def test_product_creation(self):
        """A valid product should be created successfully."""
        product = Product.objects.create(
            name="Canvas Tote Bag",
            price=Decimal("18.00"),
            inventory_count=4,
            is_published=True,
        )

        self.assertEqual(product.name, "Canvas Tote Bag")
        self.assertEqual(product.slug, "canvas-tote-bag")
        self.assertEqual(product.inventory_count, 4)

    def test_slug_clash_gets_numeric_suffix(self):
        """Two products with the same name get distinct slugs."""
        first = Product.objects.create(name="Ceramic Mug", price=Decimal("12.50"))
        second = Product.objects.create(name="Ceramic Mug", price=Decimal("13.50"))
        third = Product.objects.create(name="Ceramic Mug", price=Decimal("14.50"))

        self.assertEqual(first.slug, "ceramic-mug")
        self.assertEqual(second.slug, "ceramic-mug-2")
        self.assertEqual(third.slug, "ceramic-mug-3")

    def test_rename_regenerates_slug(self):
        product = Product.objects.create(name="Wool Beanie", price=Decimal("24.00"))

        product.name = "Merino Beanie"
        product.save()

        product.refresh_from_db()
        self.assertEqual(product.slug, "merino-beanie")

    def test_rename_with_update_fields_persists_slug(self):
        product = Product.objects.create(name="Desk Lamp", price=Decimal("64.00"))

        product.name = "Reading Lamp"
        product.save(update_fields=["name"])

        product.refresh_from_db()
        self.assertEqual(product.slug, "reading-lamp")

    def test_save_without_rename_keeps_slug(self):
        product = Product.objects.create(name="Linen Notebook", price=Decimal("9.99"))
        original = product.slug

        product.price = Decimal("11.00")
        product.save()

        product.refresh_from_db()
        self.assertEqual(product.slug, original)

    def test_slug_must_be_unique(self):
        """Slug duplication must be rejected at the database level."""
        Product.objects.create(name="Pin Set", price=Decimal("7.50"))

        with self.assertRaises(IntegrityError):
            Product.objects.create(name="Other", slug="pin-set", price=Decimal("1.00"))

    def test_negative_price_fails_validation(self):
        product = Product(name="Broken", price=Decimal("-1.00"))

        with self.assertRaises(ValidationError):
            product.full_clean()

    def test_product_string_representation(self):
        """__str__ should be human readable."""
        product = Product.objects.create(name="Cough Drops", price=Decimal("3.00"))

        self.assertIn("Cough Drops", str(product))
