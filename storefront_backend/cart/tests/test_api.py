# cart/tests/test_api.py

from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from cart.services import MAX_LINE_QUANTITY
from products.models import Product


class CartApiTests(TestCase):
    """
    Session cart endpoints.

    GUARANTEES:
    - Cart survives across requests for the same client session
    - Back-to-back adds of one product produce a single merged line
    - Unpublished / unknown products cannot be added
    """

    def setUp(self):
        self.client = APIClient()
        self.product = Product.objects.create(
            name="Canvas Tote Bag",
            price=Decimal("18.00"),
            inventory_count=10,
            is_published=True,
        )

    def _add(self, product_id, quantity):
        return self.client.post(
            "/api/cart/items/",
            {"product_id": str(product_id), "quantity": quantity},
            format="json",
        )

    def test_empty_cart(self):
        res = self.client.get("/api/cart/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["items"], [])
        self.assertEqual(res.json()["total_items"], 0)
        self.assertEqual(res.json()["total_price"], "0.00")

    def test_back_to_back_adds_merge(self):
        self._add(self.product.id, 1)
        res = self._add(self.product.id, 2)

        self.assertEqual(res.status_code, 200, res.content)
        items = res.json()["items"]
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]["quantity"], 3)
        self.assertEqual(res.json()["total_price"], "54.00")

        again = self.client.get("/api/cart/")
        self.assertEqual(again.json()["total_items"], 3)

    def test_update_and_remove(self):
        self._add(self.product.id, 1)

        res = self.client.patch(
            f"/api/cart/items/{self.product.id}/", {"quantity": 5}, format="json"
        )
        self.assertEqual(res.json()["total_items"], 5)

        res = self.client.patch(
            f"/api/cart/items/{self.product.id}/", {"quantity": 0}, format="json"
        )
        self.assertEqual(res.json()["items"], [])

        res = self.client.delete(f"/api/cart/items/{self.product.id}/")
        self.assertEqual(res.status_code, 404)

    def test_clear(self):
        self._add(self.product.id, 2)

        res = self.client.post("/api/cart/clear/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["total_items"], 0)

    def test_unpublished_product_rejected(self):
        self.product.is_published = False
        self.product.save()

        res = self._add(self.product.id, 1)

        self.assertEqual(res.status_code, 400)
        self.assertIn("no longer available", res.json()["error"])

    def test_unknown_product_rejected(self):
        res = self._add("00000000-0000-0000-0000-000000000000", 1)
        self.assertEqual(res.status_code, 404)

    def test_oversized_quantity_is_400(self):
        res = self._add(self.product.id, 10**12)

        self.assertEqual(res.status_code, 400)
        self.assertEqual(self.client.get("/api/cart/").json()["items"], [])

    def test_merge_past_line_limit_is_400(self):
        self._add(self.product.id, MAX_LINE_QUANTITY)

        res = self._add(self.product.id, 1)

        self.assertEqual(res.status_code, 400)
        self.assertIn("cannot exceed", res.json()["error"])
        self.assertEqual(
            self.client.get("/api/cart/").json()["total_items"], MAX_LINE_QUANTITY
        )

    def test_update_past_line_limit_is_400(self):
        self._add(self.product.id, 1)

        res = self.client.patch(
            f"/api/cart/items/{self.product.id}/",
            {"quantity": MAX_LINE_QUANTITY + 1},
            format="json",
        )

        self.assertEqual(res.status_code, 400)
