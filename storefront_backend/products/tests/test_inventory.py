# products/tests/test_inventory.py

import uuid
from decimal import Decimal

from django.test import TestCase

from products.models import Product
from products.services.inventory import (
    InsufficientInventoryError,
    available_inventory,
    decrement_inventory,
)


class InventoryDecrementTests(TestCase):
    """
    Inventory ledger tests.

    GUARANTEES:
    - Decrement is exact for satisfiable requests
    - inventory_count never goes negative
    - A failed decrement changes nothing
    """

    def setUp(self):
        self.product = Product.objects.create(
            name="Ceramic Mug",
            price=Decimal("12.50"),
            inventory_count=5,
            is_published=True,
        )

    def test_decrement_reduces_count(self):
        taken = decrement_inventory(product_id=self.product.id, quantity=3)

        self.assertEqual(taken, 3)
        self.product.refresh_from_db()
        self.assertEqual(self.product.inventory_count, 2)

    def test_decrement_to_exactly_zero(self):
        decrement_inventory(product_id=self.product.id, quantity=5)

        self.product.refresh_from_db()
        self.assertEqual(self.product.inventory_count, 0)

    def test_decrement_beyond_stock_is_rejected_and_count_unchanged(self):
        with self.assertRaises(InsufficientInventoryError) as ctx:
            decrement_inventory(product_id=self.product.id, quantity=6)

        self.assertIn("Available: 5", str(ctx.exception))
        self.product.refresh_from_db()
        self.assertEqual(self.product.inventory_count, 5)

    def test_repeated_decrements_never_go_negative(self):
        decrement_inventory(product_id=self.product.id, quantity=4)

        with self.assertRaises(InsufficientInventoryError):
            decrement_inventory(product_id=self.product.id, quantity=4)

        self.product.refresh_from_db()
        self.assertEqual(self.product.inventory_count, 1)

    def test_zero_quantity_is_noop(self):
        self.assertEqual(decrement_inventory(product_id=self.product.id, quantity=0), 0)
        self.product.refresh_from_db()
        self.assertEqual(self.product.inventory_count, 5)

    def test_fractional_quantity_is_rejected(self):
        with self.assertRaises(ValueError):
            decrement_inventory(product_id=self.product.id, quantity=1.5)

    def test_missing_product(self):
        with self.assertRaises(InsufficientInventoryError) as ctx:
            decrement_inventory(product_id=uuid.uuid4(), quantity=1)

        self.assertIn("does not exist", str(ctx.exception))

    def test_available_inventory(self):
        self.assertEqual(available_inventory(product_id=self.product.id), 5)
        self.assertIsNone(available_inventory(product_id=uuid.uuid4()))
