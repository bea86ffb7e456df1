# orders/tests/test_materialization.py

from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase, override_settings

from orders.models import Order, OrderLine
from orders.services.materialization import (
    InvalidSessionPayloadError,
    MaterializationError,
    materialize_order,
    parse_session_items,
)
from orders.tests.helpers import completed_session
from products.models import Product


class MaterializationTests(TestCase):
    """
    Order materialization tests.

    GUARANTEES:
    - One completed session => exactly one Order (+ lines), status processing
    - Re-delivery of the same session creates nothing new
    - Line snapshots come from the session, not the live catalog
    - Inventory is decremented per item; one failure does not stop siblings
    - Confirmation mail is best-effort
    """

    def setUp(self):
        self.mug = Product.objects.create(
            name="Ceramic Mug",
            price=Decimal("12.50"),
            inventory_count=10,
            is_published=True,
        )
        self.lamp = Product.objects.create(
            name="Desk Lamp",
            price=Decimal("64.00"),
            inventory_count=1,
            is_published=True,
        )

    # -----------------------------
    # HAPPY PATH
    # -----------------------------
    def test_creates_order_lines_and_decrements_inventory(self):
        session = completed_session(items=[(self.mug, 2)])

        order, created = materialize_order(session)

        self.assertTrue(created)
        self.assertEqual(order.status, Order.STATUS_PROCESSING)
        self.assertEqual(order.email, "buyer@example.com")
        self.assertEqual(order.payment_session_id, "cs_test_001")
        self.assertEqual(order.payment_intent_id, "pi_test_001")
        self.assertEqual(order.shipping_cost, Decimal("5.99"))
        self.assertEqual(order.total_amount, Decimal("30.99"))
        self.assertEqual(order.subtotal, Decimal("25.00"))
        self.assertTrue(order.order_number.startswith("ORD-"))

        lines = list(order.lines.all())
        self.assertEqual(len(lines), 1)
        self.assertEqual(lines[0].product_id, self.mug.id)
        self.assertEqual(lines[0].product_name, "Ceramic Mug")
        self.assertEqual(lines[0].unit_price, Decimal("12.50"))
        self.assertEqual(lines[0].quantity, 2)

        self.mug.refresh_from_db()
        self.assertEqual(self.mug.inventory_count, 8)

    def test_shipping_address_is_canonical(self):
        order, _ = materialize_order(completed_session(items=[(self.mug, 1)]))

        self.assertEqual(
            order.shipping_address,
            {
                "name": "Ada Buyer",
                "address_line1": "1 Main St",
                "address_line2": "",
                "city": "Springfield",
                "state": "IL",
                "postal_code": "62701",
                "country": "US",
                "phone": "+15555550100",
            },
        )

    def test_shipping_falls_back_to_metadata_hint(self):
        session = completed_session(items=[(self.mug, 1)], amount_shipping=0, shipping_cost="5.99")

        order, _ = materialize_order(session)

        self.assertEqual(order.shipping_cost, Decimal("5.99"))

    def test_sends_confirmation_email(self):
        order, _ = materialize_order(completed_session(items=[(self.mug, 1)]))

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["buyer@example.com"])
        self.assertIn(order.order_number, mail.outbox[0].subject)

    # -----------------------------
    # IDEMPOTENCY
    # -----------------------------
    def test_same_session_twice_creates_one_order(self):
        session = completed_session(items=[(self.mug, 2)])

        first, created_first = materialize_order(session)
        second, created_second = materialize_order(session)

        self.assertTrue(created_first)
        self.assertFalse(created_second)
        self.assertEqual(first.id, second.id)
        self.assertEqual(Order.objects.filter(payment_session_id="cs_test_001").count(), 1)
        self.assertEqual(OrderLine.objects.count(), 1)

        self.mug.refresh_from_db()
        self.assertEqual(self.mug.inventory_count, 8)
        self.assertEqual(len(mail.outbox), 1)

    def test_order_number_collision_is_retried(self):
        materialize_order(completed_session(session_id="cs_a", items=[(self.mug, 1)]))
        taken = Order.objects.get(payment_session_id="cs_a").order_number

        with mock.patch(
            "orders.services.materialization.generate_order_number",
            side_effect=[taken, "ORD-1-FRESHNUMB"],
        ):
            order, created = materialize_order(
                completed_session(session_id="cs_b", items=[(self.mug, 1)])
            )

        self.assertTrue(created)
        self.assertEqual(order.order_number, "ORD-1-FRESHNUMB")

    def test_order_number_exhaustion_raises(self):
        materialize_order(completed_session(session_id="cs_a", items=[(self.mug, 1)]))
        taken = Order.objects.get(payment_session_id="cs_a").order_number

        with mock.patch(
            "orders.services.materialization.generate_order_number",
            return_value=taken,
        ):
            with self.assertRaises(MaterializationError):
                materialize_order(
                    completed_session(session_id="cs_b", items=[(self.mug, 1)])
                )

        self.assertFalse(Order.objects.filter(payment_session_id="cs_b").exists())

    # -----------------------------
    # SNAPSHOTS
    # -----------------------------
    def test_line_snapshot_survives_catalog_edit(self):
        order, _ = materialize_order(completed_session(items=[(self.mug, 1)]))

        self.mug.name = "Giant Mug"
        self.mug.price = Decimal("99.00")
        self.mug.save()

        line = order.lines.get()
        line.refresh_from_db()
        self.assertEqual(line.product_name, "Ceramic Mug")
        self.assertEqual(line.unit_price, Decimal("12.50"))

    def test_line_survives_product_deletion(self):
        order, _ = materialize_order(completed_session(items=[(self.mug, 1)]))

        self.mug.delete()

        line = order.lines.get()
        self.assertIsNone(line.product_id)
        self.assertEqual(line.product_name, "Ceramic Mug")

    # -----------------------------
    # PARTIAL INVENTORY FAILURE
    # -----------------------------
    def test_inventory_failure_does_not_abort_siblings(self):
        session = completed_session(items=[(self.lamp, 3), (self.mug, 2)])

        order, created = materialize_order(session)

        self.assertTrue(created)
        self.assertEqual(order.lines.count(), 2)

        self.lamp.refresh_from_db()
        self.mug.refresh_from_db()
        self.assertEqual(self.lamp.inventory_count, 1)
        self.assertEqual(self.mug.inventory_count, 8)

    def test_mail_failure_does_not_fail_order(self):
        with mock.patch(
            "notifications.services.mailer.EmailMultiAlternatives.send",
            side_effect=OSError("smtp down"),
        ):
            order, created = materialize_order(completed_session(items=[(self.mug, 1)]))

        self.assertTrue(created)
        self.assertTrue(Order.objects.filter(pk=order.pk).exists())

    @override_settings(NOTIFICATIONS={"ENABLED": False, "FROM_EMAIL": ""})
    def test_unconfigured_mail_is_noop(self):
        order, created = materialize_order(completed_session(items=[(self.mug, 1)]))

        self.assertTrue(created)
        self.assertEqual(len(mail.outbox), 0)

    # -----------------------------
    # UNTRUSTED METADATA
    # -----------------------------
    def test_invalid_metadata_raises_and_creates_nothing(self):
        session = completed_session(
            items=[{"product_id": "not-a-uuid", "name": "X", "price": "1.00", "quantity": 1}],
            amount_total=100,
        )

        with self.assertRaises(InvalidSessionPayloadError):
            materialize_order(session)

        self.assertEqual(Order.objects.count(), 0)

    def test_missing_email_raises(self):
        session = completed_session(items=[(self.mug, 1)], email="")
        session["customer_email"] = None

        with self.assertRaises(InvalidSessionPayloadError):
            materialize_order(session)

    def test_parse_session_items_rejects_bad_shapes(self):
        pid = str(self.mug.id)
        bad = [
            "[]",
            "not json",
            [{"product_id": pid, "name": "", "price": "1.00", "quantity": 1}],
            [{"product_id": pid, "name": "Mug", "price": "-1.00", "quantity": 1}],
            [{"product_id": pid, "name": "Mug", "price": "1.00", "quantity": 0}],
            [{"product_id": pid, "name": "Mug", "price": "1.00", "quantity": "2"}],
            [{"product_id": pid, "name": "Mug", "price": "abc", "quantity": 1}],
        ]
        for raw in bad:
            with self.assertRaises(InvalidSessionPayloadError):
                parse_session_items(raw)

    def test_user_id_in_metadata_links_account(self):
        user = get_user_model().objects.create_user(
            username="ada", password="password123", email="buyer@example.com"
        )

        order, _ = materialize_order(
            completed_session(items=[(self.mug, 1)], user_id=str(user.pk))
        )

        self.assertEqual(order.user_id, user.pk)
        self.assertFalse(order.owner.is_guest)
