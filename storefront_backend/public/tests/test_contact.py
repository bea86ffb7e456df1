# public/tests/test_contact.py

from unittest import mock

from django.core import mail
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

URL = "/api/contact/"

PAYLOAD = {
    "name": "Ada Buyer",
    "email": "ada@example.com",
    "subject": "Wholesale",
    "message": "Do you sell in bulk?",
}


class ContactApiTests(TestCase):
    """
    POST /api/contact/

    GUARANTEES:
    - Delivered to the store inbox with the sender as reply-to
    - Fails loudly (500) when mail is not configured or delivery fails
    """

    def setUp(self):
        self.client = APIClient()

    def test_sends_message(self):
        res = self.client.post(URL, PAYLOAD, format="json")

        self.assertEqual(res.status_code, 200, res.content)
        self.assertTrue(res.json()["success"])
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].reply_to, ["ada@example.com"])
        self.assertIn("Do you sell in bulk?", mail.outbox[0].body)

    def test_blank_message_is_400(self):
        res = self.client.post(URL, {**PAYLOAD, "message": "   "}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(len(mail.outbox), 0)

    def test_unconfigured_mail_is_500(self):
        with override_settings(NOTIFICATIONS={"ENABLED": False, "FROM_EMAIL": ""}):
            res = self.client.post(URL, PAYLOAD, format="json")

        self.assertEqual(res.status_code, 500)
        self.assertIn("error", res.json())
        self.assertEqual(len(mail.outbox), 0)

    def test_delivery_failure_is_500(self):
        with mock.patch(
            "django.core.mail.EmailMultiAlternatives.send",
            side_effect=OSError("smtp down"),
        ):
            res = self.client.post(URL, PAYLOAD, format="json")

        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.json()["error"], "Failed to send message. Please try again.")
