# public/views/stripe_webhook.py
"""
PAYMENT WEBHOOK (Stripe)

POST /api/webhooks/payment/

Rules:
- Signature is verified over the RAW body BEFORE anything is parsed.
  Bad/missing signature => 400, nothing is created.
- A signed body that is not an event object (or a completion without a
  session object) => 400.
- checkout.session.completed => materialize the order (exactly once per
  session; redeliveries answer 200 without side effects).
- A short allow-list of other events is acknowledged as a no-op.
- Unknown events are logged and acknowledged (200).
- Materialization failures answer 500 so Stripe retries the delivery.
"""

from __future__ import annotations

import json
import logging

from django.db import DatabaseError
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import JSONParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from orders.services.materialization import MaterializationError, materialize_order
from public.serializers import WebhookAckSerializer
from public.services.stripe_checkout import verify_stripe_signature

logger = logging.getLogger(__name__)

EVENT_CHECKOUT_COMPLETED = "checkout.session.completed"

# Acknowledged without action: the order is driven by checkout.session.completed.
ACKNOWLEDGED_EVENTS = {
    "payment_intent.succeeded",
    "payment_intent.payment_failed",
}


class WebhookThrottle(AnonRateThrottle):
    scope = "webhook"


class StripeWebhookView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    parser_classes = [JSONParser]
    throttle_classes = [WebhookThrottle]

    @extend_schema(
        tags=["Webhooks"],
        request=None,
        responses={
            200: WebhookAckSerializer,
            400: OpenApiResponse(description="Invalid signature / body"),
            500: OpenApiResponse(description="Processing failed (Stripe retries)"),
        },
        description="Stripe event receiver (signed).",
    )
    def post(self, request, *args, **kwargs):
        raw_body = getattr(request, "body", b"") or b""
        signature = request.headers.get("Stripe-Signature")

        logger.info("Payment webhook received")

        if not verify_stripe_signature(raw_body=raw_body, signature=signature):
            logger.warning("Invalid payment webhook signature")
            return Response({"error": "Invalid signature"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            event = json.loads(raw_body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            logger.warning("Signed webhook body is not valid JSON")
            return Response({"error": "Invalid payload"}, status=status.HTTP_400_BAD_REQUEST)

        if not isinstance(event, dict):
            return Response({"error": "Invalid payload"}, status=status.HTTP_400_BAD_REQUEST)

        event_type = str(event.get("type") or "")
        event_id = str(event.get("id") or "")
        log_extra = {"event_type": event_type, "event_id": event_id}

        if event_type == EVENT_CHECKOUT_COMPLETED:
            data = event.get("data")
            session = data.get("object") if isinstance(data, dict) else None
            if not isinstance(session, dict):
                logger.warning("Checkout completion without a session object", extra=log_extra)
                return Response({"error": "Invalid payload"}, status=status.HTTP_400_BAD_REQUEST)

            try:
                order, created = materialize_order(session)
            except (MaterializationError, DatabaseError):
                logger.exception("Order materialization failed", extra=log_extra)
                return Response(
                    {"error": "Webhook processing failed"},
                    status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                )

            logger.info(
                "Checkout completion processed",
                extra={**log_extra, "order_id": str(order.id), "created": created},
            )

        elif event_type in ACKNOWLEDGED_EVENTS:
            logger.info("Payment event acknowledged", extra=log_extra)

        else:
            logger.info("Unhandled payment event type", extra=log_extra)

        return Response({"received": True}, status=status.HTTP_200_OK)
