# products/serializers/product.py

"""
PRODUCT SERIALIZERS

Purpose:
- ProductSerializer: public storefront shape (published products only are
  ever passed in; no admin-only flags exposed).
- AdminProductSerializer: full CRUD shape for store admins.

Rules:
- slug is always server-derived from name (read-only)
- price is non-negative, 2dp
- inventory_count is a whole, non-negative unit count
"""

from decimal import Decimal

from rest_framework import serializers

from products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """
    Public product shape.

    GUARANTEES:
    - in_stock is derived from inventory_count (backend is source of truth)
    """

    in_stock = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "price",
            "image_url",
            "inventory_count",
            "in_stock",
            "featured",
        ]
        read_only_fields = fields

    def get_in_stock(self, obj) -> bool:
        return int(obj.inventory_count or 0) > 0


class AdminProductSerializer(serializers.ModelSerializer):
    name = serializers.CharField(required=True, allow_blank=False, max_length=255)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "price",
            "inventory_count",
            "image_url",
            "is_published",
            "featured",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "slug",
            "created_at",
            "updated_at",
        ]

    def validate_name(self, value: str):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")
        return v

    def validate_price(self, value):
        # Keep consistent with Product.clean(): non-negative (0 allowed)
        if value is None or value < Decimal("0.00"):
            raise serializers.ValidationError("Price must be non-negative")
        return value
