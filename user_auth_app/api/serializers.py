"""Auth API serializers.

Registration is split per role: ``RegistrationSerializer`` validates the
account fields and the ``role`` tag, then ``profile_serializer_for`` picks the
variant serializer that carries the mandatory fields of that role
(``VendorRegistrationSerializer`` or ``SupplierRegistrationSerializer``).
Login authenticates credentials.
"""

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from profiles.models import Profile
from profiles.validators import validate_fssai_number, validate_pincode

User = get_user_model()


class RegistrationSerializer(serializers.Serializer):
    """Validate the account part of a registration and the role tag."""

    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    repeated_password = serializers.CharField(write_only=True, min_length=6)
    role = serializers.ChoiceField(choices=Profile.Role.choices)

    def validate_username(self, value):
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError(_("Username already taken."))
        return value

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError(_("Email already in use."))
        return value

    def validate(self, attrs):
        if attrs["password"] != attrs["repeated_password"]:
            raise serializers.ValidationError(
                {"repeated_password": _("Passwords do not match.")}
            )
        validate_password(attrs["password"])
        return attrs


class _ProfileRegistrationSerializer(serializers.Serializer):
    """Fields shared by both role variants."""

    phone = serializers.RegexField(
        r"^\+?\d{10,13}$",
        error_messages={"invalid": "Valid phone number is required."},
    )
    street = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    city = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    state = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    pincode = serializers.CharField(
        max_length=6, required=False, allow_blank=True, default="",
        validators=[validate_pincode],
    )

    def to_profile_fields(self) -> dict:
        return dict(self.validated_data)


class VendorRegistrationSerializer(_ProfileRegistrationSerializer):
    """Vendor variant: the kind of food business is mandatory."""

    vendor_type = serializers.ChoiceField(choices=Profile.VendorType.choices)


class SupplierRegistrationSerializer(_ProfileRegistrationSerializer):
    """Supplier variant: business name and FSSAI licence are mandatory."""

    business_name = serializers.CharField(max_length=200)
    fssai_number = serializers.CharField(validators=[validate_fssai_number])

    def validate_fssai_number(self, value):
        if Profile.objects.filter(fssai_number=value).exists():
            raise serializers.ValidationError(_("FSSAI number already registered."))
        return value


PROFILE_VARIANTS = {
    Profile.Role.VENDOR: VendorRegistrationSerializer,
    Profile.Role.SUPPLIER: SupplierRegistrationSerializer,
}


def profile_serializer_for(role, data):
    """Return the variant serializer instance for ``role``."""
    return PROFILE_VARIANTS[role](data=data)


@transaction.atomic
def register_user(account: RegistrationSerializer, profile: _ProfileRegistrationSerializer):
    """Create the user and its role-specific profile in one transaction."""
    data = dict(account.validated_data)
    data.pop("repeated_password", None)
    role = data.pop("role")
    raw_password = data.pop("password")
    user = User(**data)
    user.set_password(raw_password)
    user.save()
    Profile.objects.create(user=user, role=role, **profile.to_profile_fields())
    return user


class LoginSerializer(serializers.Serializer):
    """Authenticate username/password and attach the user to validated data."""

    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        user = authenticate(
            username=attrs.get("username"),
            password=attrs.get("password"),
        )
        if not user:
            raise serializers.ValidationError({"detail": "Invalid Credentials"})
        attrs["user"] = user
        return attrs
