# public/tests/test_webhook.py

import json
import time
from decimal import Decimal

from django.core import mail
from django.test import TestCase
from rest_framework.test import APIClient

from orders.models import Order
from orders.tests.helpers import completed_session
from products.models import Product
from public.services.stripe_checkout import compute_stripe_signature

URL = "/api/webhooks/payment/"
SECRET = "whsec_storefront_test"


def _event(event_type, obj, event_id="evt_1"):
    return {"id": event_id, "type": event_type, "data": {"object": obj}}


class PaymentWebhookTests(TestCase):
    """
    POST /api/webhooks/payment/

    GUARANTEES:
    - Unsigned / mis-signed bodies are rejected and create nothing
    - checkout.session.completed creates exactly one order per session
    - Other event types are acknowledged
    - Processing failures answer 500 so the processor retries
    """

    def setUp(self):
        self.client = APIClient()
        self.product = Product.objects.create(
            name="Linen Tote",
            price=Decimal("10.00"),
            inventory_count=10,
            is_published=True,
        )

    def _deliver(self, event, *, secret=SECRET, timestamp=None, signature=None):
        body = json.dumps(event).encode("utf-8")
        if signature is None:
            ts = int(time.time()) if timestamp is None else timestamp
            sig = compute_stripe_signature(raw_body=body, timestamp=ts, secret=secret)
            signature = f"t={ts},v1={sig}"
        return self.client.post(
            URL,
            data=body,
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE=signature,
        )

    def test_completed_session_creates_order(self):
        session = completed_session(items=[(self.product, 2)])

        res = self._deliver(_event("checkout.session.completed", session))

        self.assertEqual(res.status_code, 200, res.content)
        self.assertEqual(res.json(), {"received": True})

        order = Order.objects.get(payment_session_id="cs_test_001")
        self.assertEqual(order.status, Order.STATUS_PROCESSING)
        self.assertEqual(order.total_amount, Decimal("25.99"))
        self.assertEqual(order.lines.count(), 1)

        self.product.refresh_from_db()
        self.assertEqual(self.product.inventory_count, 8)
        self.assertEqual(len(mail.outbox), 1)

    def test_redelivery_is_idempotent(self):
        event = _event("checkout.session.completed", completed_session(items=[(self.product, 2)]))

        first = self._deliver(event)
        second = self._deliver(event)

        self.assertEqual(first.status_code, 200)
        self.assertEqual(second.status_code, 200)
        self.assertEqual(Order.objects.filter(payment_session_id="cs_test_001").count(), 1)

        self.product.refresh_from_db()
        self.assertEqual(self.product.inventory_count, 8)
        self.assertEqual(len(mail.outbox), 1)

    def test_bad_signature_creates_nothing(self):
        event = _event("checkout.session.completed", completed_session(items=[(self.product, 1)]))

        res = self._deliver(event, secret="whsec_wrong")

        self.assertEqual(res.status_code, 400)
        self.assertFalse(Order.objects.exists())

    def test_missing_signature(self):
        body = json.dumps(_event("checkout.session.completed", {})).encode("utf-8")
        res = self.client.post(URL, data=body, content_type="application/json")
        self.assertEqual(res.status_code, 400)

    def test_stale_signature(self):
        event = _event("checkout.session.completed", completed_session(items=[(self.product, 1)]))

        res = self._deliver(event, timestamp=int(time.time()) - 3600)

        self.assertEqual(res.status_code, 400)
        self.assertFalse(Order.objects.exists())

    def test_unknown_event_is_acknowledged(self):
        res = self._deliver(_event("customer.created", {"id": "cus_1"}))
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {"received": True})

    def test_payment_intent_events_are_noops(self):
        res = self._deliver(_event("payment_intent.succeeded", {"id": "pi_1"}))
        self.assertEqual(res.status_code, 200)
        self.assertFalse(Order.objects.exists())

    def test_unprocessable_session_is_500(self):
        session = completed_session(items=[(self.product, 1)])
        session["metadata"]["items"] = "not json"

        res = self._deliver(_event("checkout.session.completed", session))

        self.assertEqual(res.status_code, 500)
        self.assertFalse(Order.objects.exists())

    def test_malformed_event_data_is_400(self):
        for data in ("cs_test_001", {"object": "cs_test_001"}, None):
            with self.subTest(data=data):
                res = self._deliver(
                    {"id": "evt_2", "type": "checkout.session.completed", "data": data}
                )
                self.assertEqual(res.status_code, 400)

        self.assertFalse(Order.objects.exists())

    def test_signed_non_json_body(self):
        body = b"not json"
        ts = int(time.time())
        sig = compute_stripe_signature(raw_body=body, timestamp=ts, secret=SECRET)

        res = self.client.post(
            URL,
            data=body,
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE=f"t={ts},v1={sig}",
        )

        self.assertEqual(res.status_code, 400)
