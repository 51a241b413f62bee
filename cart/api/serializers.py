"""Cart API serializers.

Input serializers for adding and updating cart lines, and output
serializers for the cart, its lines, and the supplier-grouped summary.
"""

from rest_framework import serializers

from cart.models import Cart, CartItem


class CartItemAddSerializer(serializers.Serializer):
    """Input serializer for POST /api/cart/items/."""

    product_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")


class CartItemUpdateSerializer(serializers.Serializer):
    """Input serializer for PATCH /api/cart/items/{product_id}/ (0 removes the line)."""

    quantity = serializers.IntegerField(min_value=0)


class CartItemSerializer(serializers.ModelSerializer):
    """Read serializer for a cart line with live product data alongside the snapshot."""

    product_name = serializers.CharField(source="product.name", read_only=True)
    supplier = serializers.IntegerField(source="product.supplier_id", read_only=True)
    current_price = serializers.DecimalField(
        source="product.price_amount", max_digits=10, decimal_places=2, read_only=True
    )
    available_quantity = serializers.IntegerField(source="product.available_quantity", read_only=True)
    minimum_order_quantity = serializers.IntegerField(
        source="product.minimum_order_quantity", read_only=True
    )
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product",
            "product_name",
            "supplier",
            "quantity",
            "price_at_add",
            "price_unit",
            "current_price",
            "available_quantity",
            "minimum_order_quantity",
            "line_total",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CartSerializer(serializers.ModelSerializer):
    """Read serializer for the whole cart."""

    items = CartItemSerializer(many=True, read_only=True)

    class Meta:
        model = Cart
        fields = [
            "id",
            "vendor",
            "items",
            "total_items",
            "estimated_total",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class SupplierGroupSerializer(serializers.Serializer):
    supplier_id = serializers.IntegerField()
    supplier_name = serializers.CharField()
    items = CartItemSerializer(many=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_items = serializers.IntegerField()


class CartSummarySerializer(serializers.Serializer):
    total_items = serializers.IntegerField()
    estimated_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    supplier_groups = SupplierGroupSerializer(many=True)
