# orders/tests/test_api.py

from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from orders.models import Order
from orders.tests.helpers import make_order
from products.models import Product

User = get_user_model()

DISPATCH = "orders.services.order_lifecycle.dispatch_order_notification"


class AdminOrderApiTests(TestCase):
    """
    Admin order endpoints.

    GUARANTEES:
    - Only staff can list / update orders
    - PUT applies the transition table (400 on invalid moves)
    - Processing / shipped transitions notify exactly once
    - Editing the catalog afterwards never changes order lines
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            username="admin", password="password123", is_staff=True
        )
        self.customer = User.objects.create_user(
            username="shopper", password="password123", email="shopper@example.com"
        )
        self.product = Product.objects.create(
            name="Ceramic Mug",
            price=Decimal("12.50"),
            inventory_count=10,
            is_published=True,
        )
        self.order = make_order(product=self.product, quantity=2)

    def test_non_staff_forbidden(self):
        self.client.force_authenticate(user=self.customer)

        self.assertEqual(self.client.get("/api/admin/orders/").status_code, 403)
        self.assertEqual(
            self.client.put(
                f"/api/admin/orders/{self.order.id}/", {"status": "processing"}, format="json"
            ).status_code,
            403,
        )

    def test_list_and_filter(self):
        make_order(product=self.product, status=Order.STATUS_SHIPPED)
        self.client.force_authenticate(user=self.admin)

        res = self.client.get("/api/admin/orders/?status=pending")

        self.assertEqual(res.status_code, 200)
        rows = res.json()["results"]
        self.assertEqual([row["id"] for row in rows], [str(self.order.id)])
        self.assertEqual(rows[0]["owner"], {"type": "guest", "email": "buyer@example.com"})

    def test_detail(self):
        self.client.force_authenticate(user=self.admin)

        res = self.client.get(f"/api/admin/orders/{self.order.id}/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["lines"][0]["product_name"], "Ceramic Mug")
        self.assertEqual(res.json()["subtotal"], "25.00")

    def test_put_processing_notifies_once_then_noop(self):
        self.client.force_authenticate(user=self.admin)
        url = f"/api/admin/orders/{self.order.id}/"

        with mock.patch(DISPATCH) as dispatch:
            first = self.client.put(url, {"status": "processing"}, format="json")
            second = self.client.put(url, {"status": "processing"}, format="json")

        self.assertEqual(first.status_code, 200, first.content)
        self.assertEqual(second.status_code, 200, second.content)
        self.assertEqual(first.json()["status"], "processing")
        self.assertEqual(dispatch.call_count, 1)
        self.assertEqual(dispatch.call_args.args[1], "processing")

    def test_put_invalid_transition(self):
        self.client.force_authenticate(user=self.admin)

        res = self.client.put(
            f"/api/admin/orders/{self.order.id}/", {"status": "delivered"}, format="json"
        )

        self.assertEqual(res.status_code, 400)
        self.assertIn("cannot transition", res.json()["error"])

    def test_put_unknown_order(self):
        self.client.force_authenticate(user=self.admin)

        res = self.client.put(
            "/api/admin/orders/00000000-0000-0000-0000-000000000000/",
            {"status": "processing"},
            format="json",
        )
        self.assertEqual(res.status_code, 404)

    def test_snapshot_unchanged_after_admin_product_edit(self):
        self.client.force_authenticate(user=self.admin)

        edit = self.client.patch(
            f"/api/admin/products/{self.product.id}/",
            {"name": "Giant Mug", "price": "40.00"},
            format="json",
        )
        self.assertEqual(edit.status_code, 200, edit.content)

        res = self.client.get(f"/api/admin/orders/{self.order.id}/")
        line = res.json()["lines"][0]
        self.assertEqual(line["product_name"], "Ceramic Mug")
        self.assertEqual(line["unit_price"], "12.50")


class CustomerOrderApiTests(TestCase):
    """
    Customer history + guest lookup.

    GUARANTEES:
    - History includes account orders and guest orders with the account email
    - Lookup needs the right order number AND email
    """

    def setUp(self):
        self.client = APIClient()
        self.product = Product.objects.create(
            name="Ceramic Mug", price=Decimal("12.50"), inventory_count=10
        )
        self.user = User.objects.create_user(
            username="shopper", password="password123", email="shopper@example.com"
        )
        self.account_order = make_order(
            product=self.product, user=self.user, email="shopper@example.com"
        )
        self.guest_order = make_order(product=self.product, email="SHOPPER@example.com")
        self.other_order = make_order(product=self.product, email="else@example.com")

    def test_history_requires_auth(self):
        self.assertEqual(self.client.get("/api/orders/").status_code, 401)

    def test_history_lists_account_and_guest_orders(self):
        self.client.force_authenticate(user=self.user)

        res = self.client.get("/api/orders/")

        self.assertEqual(res.status_code, 200)
        ids = {row["id"] for row in res.json()["results"]}
        self.assertEqual(ids, {str(self.account_order.id), str(self.guest_order.id)})

    def test_guest_lookup(self):
        res = self.client.get(
            "/api/orders/lookup/",
            {"order_number": self.guest_order.order_number, "email": "shopper@example.com"},
        )

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["id"], str(self.guest_order.id))

    def test_guest_lookup_wrong_email(self):
        res = self.client.get(
            "/api/orders/lookup/",
            {"order_number": self.guest_order.order_number, "email": "else@example.com"},
        )
        self.assertEqual(res.status_code, 404)

    def test_guest_lookup_requires_both_fields(self):
        res = self.client.get("/api/orders/lookup/", {"order_number": "ORD-1"})
        self.assertEqual(res.status_code, 400)
