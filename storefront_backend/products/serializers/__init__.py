# products/serializers/__init__.py

from .product import AdminProductSerializer, ProductSerializer

__all__ = [
    "ProductSerializer",
    "AdminProductSerializer",
]
