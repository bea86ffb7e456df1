# PATH: public/serializers.py

"""
PUBLIC SERIALIZERS (STOREFRONT)

Purpose:
- Shared schema contracts for the public endpoints.
- Keeps public/views thin.

Used by:
- public/views/checkout.py        (checkout session + success)
- public/views/stripe_webhook.py  (webhook ack)
- public/views/contact.py         (contact form)

Notes:
- Checkout items are validated by public/services/checkout.py (ordered
  business checks with item-specific messages), so the request serializer
  only checks the envelope.
"""

from __future__ import annotations

from rest_framework import serializers


class CheckoutRequestSerializer(serializers.Serializer):
    items = serializers.ListField(
        child=serializers.DictField(), required=False, allow_empty=True, default=list
    )
    successUrl = serializers.URLField(required=False, allow_blank=True)
    cancelUrl = serializers.URLField(required=False, allow_blank=True)


class CheckoutResponseSerializer(serializers.Serializer):
    sessionId = serializers.CharField()
    url = serializers.URLField()
    shippingCost = serializers.DecimalField(max_digits=10, decimal_places=2)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)


class CheckoutSuccessQuerySerializer(serializers.Serializer):
    session_id = serializers.CharField(max_length=255)


class CheckoutSuccessResponseSerializer(serializers.Serializer):
    session_id = serializers.CharField()
    order_ready = serializers.BooleanField()
    order_number = serializers.CharField(allow_null=True)
    status = serializers.CharField(allow_null=True)
    total_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, allow_null=True
    )


class WebhookAckSerializer(serializers.Serializer):
    received = serializers.BooleanField()


class ContactMessageSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=120)
    email = serializers.EmailField()
    subject = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    message = serializers.CharField(max_length=5000)

    def validate_name(self, value: str):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")
        return v

    def validate_message(self, value: str):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("message cannot be blank")
        return v
