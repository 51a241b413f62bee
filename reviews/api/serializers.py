"""Reviews API serializers.

Input serializers for creating and patching a review, the read serializer
and the serializer for orders still waiting for a review.
"""

from rest_framework import serializers

from orders.models import Order
from reviews.models import Review


def _aspect():
    return serializers.IntegerField(min_value=1, max_value=5, required=False, allow_null=True)


class ReviewCreateSerializer(serializers.Serializer):
    """Input serializer for creating a new review."""

    supplier = serializers.IntegerField(min_value=1)
    order = serializers.IntegerField(min_value=1)
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(min_length=10, max_length=1000)
    quality_rating = _aspect()
    delivery_rating = _aspect()
    communication_rating = _aspect()
    value_rating = _aspect()


class ReviewPatchSerializer(serializers.ModelSerializer):
    """Patch serializer; the reviewed supplier and order cannot be changed."""

    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    comment = serializers.CharField(min_length=10, max_length=1000, required=False)
    quality_rating = _aspect()
    delivery_rating = _aspect()
    communication_rating = _aspect()
    value_rating = _aspect()

    class Meta:
        model = Review
        fields = [
            "rating",
            "comment",
            "quality_rating",
            "delivery_rating",
            "communication_rating",
            "value_rating",
        ]

    def validate(self, attrs):
        unknown = set(self.initial_data) - set(self.fields)
        if unknown:
            raise serializers.ValidationError(
                {name: "This field cannot be updated." for name in sorted(unknown)}
            )
        return attrs


class ReviewOutputSerializer(serializers.ModelSerializer):
    """Read serializer for returning a review."""

    vendor_name = serializers.CharField(source="vendor.username", read_only=True)
    order_number = serializers.CharField(source="order.order_number", read_only=True)

    class Meta:
        model = Review
        fields = [
            "id",
            "vendor",
            "vendor_name",
            "supplier",
            "order",
            "order_number",
            "rating",
            "comment",
            "quality_rating",
            "delivery_rating",
            "communication_rating",
            "value_rating",
            "supplier_response",
            "responded_at",
            "helpful_votes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PendingReviewSerializer(serializers.ModelSerializer):
    supplier_name = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "supplier",
            "supplier_name",
            "total_amount",
            "actual_delivery_date",
        ]
        read_only_fields = fields

    def get_supplier_name(self, obj):
        profile = getattr(obj.supplier, "profile", None)
        return (profile.business_name if profile else "") or obj.supplier.username


class ReviewResponseSerializer(serializers.Serializer):
    """Input serializer for the supplier's answer to a review."""

    comment = serializers.CharField(max_length=500)
