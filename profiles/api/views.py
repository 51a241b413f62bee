"""Profiles API views.

Provides endpoints to retrieve a single profile (by user id), to update the
owner's own profile, and to list suppliers. Authentication is required for
profile reads and writes; write access is limited to the profile owner.
"""

from django.shortcuts import get_object_or_404
from rest_framework import generics
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated

from common.api.pagination import DefaultPagination
from common.api.responses import envelope, paginated_envelope
from ..models import Profile
from .permissions import IsProfileOwner
from .serializers import (
    ProfileDetailSerializer,
    ProfilePatchSerializer,
    SupplierListSerializer,
)


class ProfileView(generics.RetrieveUpdateAPIView):
    """
    API endpoint for retrieving or partially updating a single profile.

    - GET `/api/profile/{pk}/` returns the profile for the given user id (`pk`).
    - PATCH `/api/profile/{pk}/` updates only the fields provided and is restricted
      to the owner of the profile (the authenticated user with id `pk`).
    """

    queryset = Profile.objects.select_related("user")
    http_method_names = ["get", "patch", "head", "options"]

    def get_permissions(self):
        """Require ownership for PATCH; otherwise authentication only."""
        if self.request.method == "PATCH":
            return [IsAuthenticated(), IsProfileOwner()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        if self.request.method == "PATCH":
            return ProfilePatchSerializer
        return ProfileDetailSerializer

    def get_object(self):
        user_id = int(self.kwargs["pk"])
        if self.request.method == "PATCH" and self.request.user.id != user_id:
            raise PermissionDenied("You are only allowed to update your own profile.")
        obj = get_object_or_404(self.queryset, user_id=user_id)
        self.check_object_permissions(self.request, obj)
        return obj

    def retrieve(self, request, *args, **kwargs):
        data = ProfileDetailSerializer(self.get_object()).data
        return envelope("Profile retrieved successfully", {"profile": data})

    def partial_update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        instance.refresh_from_db()
        data = ProfileDetailSerializer(instance).data
        return envelope("Profile updated successfully", {"profile": data})


class SupplierListView(generics.ListAPIView):
    """
    GET `/api/suppliers/` lists supplier profiles.

    Query parameters:
    - `verified` (`true`/`false`) restricts to verified or unverified suppliers
    - `city` case-insensitive city match
    """

    serializer_class = SupplierListSerializer
    permission_classes = [AllowAny]
    pagination_class = DefaultPagination

    def get_queryset(self):
        qs = Profile.objects.select_related("user").filter(role=Profile.Role.SUPPLIER)
        params = self.request.query_params

        verified = params.get("verified")
        if verified is not None:
            if verified not in ("true", "false"):
                raise ValidationError({"verified": "Must be 'true' or 'false'."})
            qs = qs.filter(is_verified=(verified == "true"))

        city = params.get("city")
        if city:
            qs = qs.filter(city__iexact=city)

        return qs.order_by("-average_rating", "user_id")

    def list(self, request, *args, **kwargs):
        page = self.paginate_queryset(self.get_queryset())
        data = self.get_serializer(page, many=True).data
        return paginated_envelope(
            self.paginator, "Suppliers retrieved successfully", "suppliers", data
        )
