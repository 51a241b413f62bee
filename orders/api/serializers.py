"""Orders API serializers.

Input serializers for checkout and status changes, and the read serializer
returning an order with its lines and status history.
"""

from rest_framework import serializers

from orders.models import Order, OrderItem, OrderStatus, OrderStatusHistory, PaymentMethod
from profiles.validators import validate_pincode


class DeliveryAddressSerializer(serializers.Serializer):
    street = serializers.CharField(max_length=200)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    pincode = serializers.CharField(max_length=6, validators=[validate_pincode])


class CheckoutSerializer(serializers.Serializer):
    """Input serializer for POST /api/orders/ (places the vendor's cart)."""

    delivery_address = DeliveryAddressSerializer()
    payment_method = serializers.ChoiceField(
        choices=PaymentMethod.choices, default=PaymentMethod.CASH_ON_DELIVERY
    )
    vendor_notes = serializers.CharField(
        max_length=500, required=False, allow_blank=True, default=""
    )


class StatusUpdateSerializer(serializers.Serializer):
    """Input serializer for PATCH /api/orders/{id}/status/."""

    status = serializers.ChoiceField(choices=OrderStatus.choices)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class NotesSerializer(serializers.Serializer):
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class RejectSerializer(serializers.Serializer):
    # emptiness is checked by the engine so it reports rejection_reason_required
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product",
            "product_name",
            "supplier",
            "quantity",
            "unit_price",
            "price_unit",
            "line_total",
            "notes",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusHistory
        fields = ["status", "changed_by", "notes", "created_at"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for returning a complete order representation."""

    items = OrderItemSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)
    delivery_address = serializers.DictField(read_only=True)
    checkout = serializers.UUIDField(source="checkout.reference", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "checkout",
            "vendor",
            "supplier",
            "status",
            "items",
            "total_items",
            "total_amount",
            "delivery_address",
            "expected_delivery_date",
            "actual_delivery_date",
            "payment_method",
            "payment_status",
            "vendor_notes",
            "supplier_notes",
            "rejection_reason",
            "status_history",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
