"""Catalog API serializers.

Read serializer exposing a product with its supplier summary, a create
serializer, a patch serializer for everything except stock, and the stock
and category serializers. The supplier is always the authenticated user and
never taken from the payload.
"""

from rest_framework import serializers

from catalog.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for returning a complete product representation."""

    supplier_name = serializers.SerializerMethodField()
    supplier_verified = serializers.SerializerMethodField()
    formatted_price = serializers.CharField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "supplier",
            "supplier_name",
            "supplier_verified",
            "name",
            "description",
            "category",
            "price_amount",
            "price_unit",
            "formatted_price",
            "minimum_order_quantity",
            "available_quantity",
            "quality_grade",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def _profile(self, obj):
        return getattr(obj.supplier, "profile", None)

    def get_supplier_name(self, obj):
        prof = self._profile(obj)
        return (prof.business_name if prof else "") or obj.supplier.username

    def get_supplier_verified(self, obj):
        prof = self._profile(obj)
        return bool(prof and prof.is_verified)


class ProductWriteSerializer(serializers.ModelSerializer):
    """Create serializer for a supplier's new product, including its opening stock."""

    class Meta:
        model = Product
        fields = [
            "name",
            "description",
            "category",
            "price_amount",
            "price_unit",
            "minimum_order_quantity",
            "available_quantity",
            "quality_grade",
            "is_active",
        ]
        extra_kwargs = {
            "name": {"min_length": 2},
            "price_amount": {"min_value": 0},
            "minimum_order_quantity": {"min_value": 1},
            "available_quantity": {"min_value": 0},
        }

    def create(self, validated_data):
        request = self.context["request"]
        return Product.objects.create(supplier=request.user, **validated_data)


class ProductPatchSerializer(serializers.ModelSerializer):
    """Patch serializer for descriptive and pricing fields.

    Stock is not patchable here; it changes through the stock endpoint so a
    stale read of the product can never be written back over it.
    """

    class Meta:
        model = Product
        fields = [
            "name",
            "description",
            "category",
            "price_amount",
            "price_unit",
            "minimum_order_quantity",
            "quality_grade",
            "is_active",
        ]
        extra_kwargs = {
            "name": {"min_length": 2},
            "price_amount": {"min_value": 0},
            "minimum_order_quantity": {"min_value": 1},
        }

    def validate(self, attrs):
        if "available_quantity" in self.initial_data:
            raise serializers.ValidationError(
                {"available_quantity": "Use the stock endpoint to change stock."}
            )
        unknown = set(self.initial_data) - set(self.fields)
        if unknown:
            raise serializers.ValidationError(
                {name: "This field cannot be updated." for name in sorted(unknown)}
            )
        return attrs

    def update(self, instance, validated_data):
        for name, value in validated_data.items():
            setattr(instance, name, value)
        instance.save(update_fields=list(validated_data) + ["updated_at"])
        return instance


class StockUpdateSerializer(serializers.Serializer):
    """Either an absolute stock count or a relative adjustment, not both."""

    available_quantity = serializers.IntegerField(min_value=0, required=False)
    adjustment = serializers.IntegerField(required=False)

    def validate(self, attrs):
        given = [name for name in ("available_quantity", "adjustment") if name in attrs]
        if len(given) != 1:
            raise serializers.ValidationError(
                {"available_quantity": "Provide exactly one of available_quantity or adjustment."}
            )
        if attrs.get("adjustment") == 0:
            raise serializers.ValidationError({"adjustment": "Must not be zero."})
        return attrs


class CategorySummarySerializer(serializers.Serializer):
    category = serializers.CharField()
    count = serializers.IntegerField()
    avg_price = serializers.DecimalField(max_digits=10, decimal_places=2)
