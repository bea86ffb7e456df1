"""
PATH: cart/urls.py

CART URLS

Mounted at /api/cart/
"""

from django.urls import path

from cart.views import AddCartItemView, CartDetailView, CartItemView, ClearCartView

app_name = "cart"

urlpatterns = [
    path("", CartDetailView.as_view(), name="cart-detail"),
    path("clear/", ClearCartView.as_view(), name="cart-clear"),
    path("items/", AddCartItemView.as_view(), name="cart-add-item"),
    path("items/<uuid:product_id>/", CartItemView.as_view(), name="cart-item"),
]
