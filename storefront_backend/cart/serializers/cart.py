"""
PATH: cart/serializers/cart.py

CART SERIALIZERS

Purpose:
- Render a CartStore (lines + derived totals) for the storefront.
- Validate add / update inputs.

Money rule:
- price is the snapshot taken when the line was added; totals are derived
  from snapshots, never from live catalog data.
"""

from rest_framework import serializers

from cart.services import MAX_LINE_QUANTITY


class CartLineSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    name = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    quantity = serializers.IntegerField()
    image = serializers.CharField(allow_blank=True)
    # price (8 integer digits) x MAX_LINE_QUANTITY (3 digits)
    line_total = serializers.DecimalField(max_digits=14, decimal_places=2)


class CartSerializer(serializers.Serializer):
    """
    Serializes a CartStore instance.
    """

    items = serializers.SerializerMethodField()
    total_items = serializers.SerializerMethodField()
    total_price = serializers.SerializerMethodField()

    def get_items(self, store) -> list:
        return CartLineSerializer(store.lines(), many=True).data

    def get_total_items(self, store) -> int:
        return store.get_total_items()

    def get_total_price(self, store) -> str:
        return str(store.get_total_price())


class AddCartItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(
        min_value=1, max_value=MAX_LINE_QUANTITY, default=1
    )


class UpdateCartItemInputSerializer(serializers.Serializer):
    # quantity <= 0 removes the line
    quantity = serializers.IntegerField(max_value=MAX_LINE_QUANTITY)
