"""Profiles API serializers.

Contains serializers for:
- reading a profile,
- partially updating a profile (owner-only),
- listing suppliers.

Role, verification and rating fields are never writable through the API;
verification is granted by staff in the admin and ratings are recomputed by
the reviews app.
"""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from ..models import Profile

User = get_user_model()


def _apply_user_updates(user, data: dict):
    for attr, val in data.items():
        setattr(user, attr, val if val is not None else "")
    if data:
        user.save(update_fields=list(data.keys()))


def _coalesce_fields(data: dict, keys: set):
    for k in keys:
        if data.get(k) is None:
            data[k] = ""


class ProfileDetailSerializer(serializers.ModelSerializer):
    """Read-only detail serializer (coalesces selected string fields to '')."""

    username = serializers.CharField(source="user.username", read_only=True)
    first_name = serializers.CharField(source="user.first_name", read_only=True)
    last_name = serializers.CharField(source="user.last_name", read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = Profile
        fields = [
            "user",
            "username",
            "first_name",
            "last_name",
            "email",
            "role",
            "phone",
            "street",
            "city",
            "state",
            "pincode",
            "business_name",
            "fssai_number",
            "is_verified",
            "average_rating",
            "total_reviews",
            "vendor_type",
            "created_at",
        ]
        read_only_fields = fields

    _no_null = {"first_name", "last_name", "phone", "street", "city", "state"}

    def to_representation(self, instance: Profile):
        data = super().to_representation(instance)
        _coalesce_fields(data, self._no_null)
        return data


class ProfilePatchSerializer(serializers.ModelSerializer):
    """
    Partial update of the caller's own profile.

    Supplier-only fields are rejected for vendors and vice versa, so a
    profile never carries the other role's data.
    """

    first_name = serializers.CharField(
        source="user.first_name", required=False, allow_blank=True, allow_null=True
    )
    last_name = serializers.CharField(
        source="user.last_name", required=False, allow_blank=True, allow_null=True
    )
    email = serializers.EmailField(
        source="user.email", required=False, allow_blank=True, allow_null=True
    )

    SUPPLIER_ONLY = {"business_name", "fssai_number"}
    VENDOR_ONLY = {"vendor_type"}

    class Meta:
        model = Profile
        fields = [
            "first_name",
            "last_name",
            "email",
            "phone",
            "street",
            "city",
            "state",
            "pincode",
            "business_name",
            "fssai_number",
            "vendor_type",
        ]
        extra_kwargs = {
            "phone": {"required": False, "allow_blank": True},
            "street": {"required": False, "allow_blank": True},
            "city": {"required": False, "allow_blank": True},
            "state": {"required": False, "allow_blank": True},
            "pincode": {"required": False, "allow_blank": True},
            "business_name": {"required": False, "allow_blank": False},
            "fssai_number": {"required": False, "allow_blank": False},
            "vendor_type": {"required": False, "allow_blank": False},
        }

    def validate(self, attrs):
        instance = self.instance
        forbidden = self.VENDOR_ONLY if instance.is_supplier else self.SUPPLIER_ONLY
        given = forbidden & set(self.initial_data.keys())
        if given:
            raise serializers.ValidationError(
                {name: f"Not applicable to role '{instance.role}'." for name in sorted(given)}
            )
        return attrs

    def update(self, instance: Profile, validated_data):
        """Handle nested user fields and normalize None -> ''."""
        _apply_user_updates(instance.user, validated_data.pop("user", {}))
        for attr, val in validated_data.items():
            setattr(instance, attr, val if val is not None else "")
        if "fssai_number" in validated_data:
            # A changed licence must be re-checked by staff.
            instance.is_verified = False
        instance.save()
        return instance


class SupplierListSerializer(serializers.ModelSerializer):
    """List serializer for suppliers (no nulls for selected fields)."""

    username = serializers.CharField(source="user.username", read_only=True)

    class Meta:
        model = Profile
        fields = [
            "user",
            "username",
            "business_name",
            "phone",
            "city",
            "state",
            "is_verified",
            "average_rating",
            "total_reviews",
        ]

    _no_null = {"phone", "city", "state"}

    def to_representation(self, instance):
        data = super().to_representation(instance)
        _coalesce_fields(data, self._no_null)
        return data
