# products/views/__init__.py

"""
Products views package exports.

Purpose:
- Central export point for router imports.
"""

from .product import AdminProductViewSet, ProductViewSet

__all__ = [
    "ProductViewSet",
    "AdminProductViewSet",
]
