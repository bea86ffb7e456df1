# orders/serializers/order.py

"""
ORDER SERIALIZERS

Purpose:
- Read shape for admin + customer order views (lines are snapshots).
- Input shape for admin status updates.

Rules:
- Money fields are server-owned and read-only.
- owner is rendered as a tagged value: {"type": "user", "user_id": ...}
  or {"type": "guest", "email": ...}
"""

from rest_framework import serializers

from orders.models import AuthenticatedOwner, Order, OrderLine


class OrderLineSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True, allow_null=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderLine
        fields = [
            "id",
            "product_id",
            "product_ref",
            "product_name",
            "unit_price",
            "quantity",
            "line_total",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    lines = OrderLineSerializer(many=True, read_only=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    owner = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "owner",
            "email",
            "status",
            "subtotal",
            "shipping_cost",
            "tax_amount",
            "total_amount",
            "shipping_address",
            "tracking_number",
            "payment_intent_id",
            "lines",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_owner(self, obj) -> dict:
        owner = obj.owner
        if isinstance(owner, AuthenticatedOwner):
            return {"type": "user", "user_id": owner.user_id}
        return {"type": "guest", "email": owner.email}


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES, required=False)
    tracking_number = serializers.CharField(
        required=False, allow_blank=True, max_length=120
    )

    def validate(self, attrs):
        if "status" not in attrs and "tracking_number" not in attrs:
            raise serializers.ValidationError("Provide status and/or tracking_number")
        return attrs


class OrderLookupQuerySerializer(serializers.Serializer):
    order_number = serializers.CharField(max_length=40)
    email = serializers.EmailField()
