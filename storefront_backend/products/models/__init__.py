"""
PATH: products/models/__init__.py

Products models export surface.
"""

from .product import Product, unique_slug_for

__all__ = [
    "Product",
    "unique_slug_for",
]
