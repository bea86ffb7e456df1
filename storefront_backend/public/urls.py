# public/urls.py
"""
PUBLIC API URLS (STOREFRONT)

Mounted at /api/ in backend/urls.py:

- POST /api/checkout/
- GET  /api/checkout/success/?session_id=<id>
- POST /api/webhooks/payment/
- POST /api/contact/
"""

from __future__ import annotations

from django.urls import path

from public.views.checkout import CheckoutSuccessView, CheckoutView
from public.views.contact import ContactView
from public.views.stripe_webhook import StripeWebhookView

app_name = "public"

urlpatterns = [
    path("checkout/", CheckoutView.as_view(), name="checkout"),
    path("checkout/success/", CheckoutSuccessView.as_view(), name="checkout-success"),
    path("webhooks/payment/", StripeWebhookView.as_view(), name="payment-webhook"),
    path("contact/", ContactView.as_view(), name="contact"),
]
