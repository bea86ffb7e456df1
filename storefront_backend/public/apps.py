# public/apps.py

"""
PUBLIC APP CONFIG

Public storefront (AllowAny) module:
- Checkout session initiation (hosted payment page)
- Payment webhook (order materialization)
- Checkout success polling
- Contact form
"""

from django.apps import AppConfig


class PublicConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "public"
    verbose_name = "Public Storefront"
