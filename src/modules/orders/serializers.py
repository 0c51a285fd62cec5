"""Order DRF serializers for API input/output.

Input serializers check the payload shape; business rules live in the
service layer, which receives pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderItem, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class ShippingAddressSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    phone = serializers.CharField(max_length=20)
    address = serializers.CharField()
    city = serializers.CharField(max_length=120)
    state = serializers.CharField(max_length=120)
    pincode = serializers.CharField(max_length=10)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the checkout payload."""

    items = CreateOrderItemSerializer(
        many=True,
        allow_empty=False,
        error_messages={
            "required": "Order items are required",
            "empty": "Order items are required",
            "not_a_list": "Order items are required",
        },
    )
    shipping_address = ShippingAddressSerializer(
        error_messages={"required": "Shipping address is required"}
    )
    notes = serializers.CharField(required=False, default="", allow_blank=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Line item snapshot; never reads the live product."""

    product_id = serializers.UUIDField(read_only=True)
    vendor_id = serializers.UUIDField(read_only=True)
    price = serializers.DecimalField(
        source="unit_price", max_digits=10, decimal_places=2, read_only=True
    )

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "vendor_id",
            "title",
            "image",
            "price",
            "quantity",
            "subtotal",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "user_id",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Order projection with owner, items, address and history."""

    user_id = serializers.UUIDField(read_only=True)
    user_name = serializers.CharField(source="user.name", read_only=True)
    user_email = serializers.EmailField(source="user.email", read_only=True)
    shipping_address = serializers.DictField(
        source="shipping_address_snapshot", read_only=True
    )
    items = OrderItemSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "user_id",
            "user_name",
            "user_email",
            "items",
            "shipping_address",
            "total_amount",
            "status",
            "payment_method",
            "payment_status",
            "tracking_number",
            "notes",
            "cancel_reason",
            "delivered_at",
            "created_at",
            "updated_at",
            "status_history",
        ]
        read_only_fields = fields


class OrderListSerializer(OrderSerializer):
    """List rows: the projection without the audit trail."""

    class Meta(OrderSerializer.Meta):
        fields = [f for f in OrderSerializer.Meta.fields if f != "status_history"]
        read_only_fields = fields
