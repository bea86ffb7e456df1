from .api import (
    AddCartItemView,
    CartDetailView,
    CartItemView,
    ClearCartView,
)

__all__ = [
    "AddCartItemView",
    "CartDetailView",
    "CartItemView",
    "ClearCartView",
]
