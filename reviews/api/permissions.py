"""Reviews API permissions."""

from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsReviewOwner(BasePermission):
    """Allow modifications or deletion only by the vendor who wrote the review."""

    message = "Only the review owner may modify this review."

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        user = request.user
        return bool(user and user.is_authenticated and obj.vendor_id == user.id)
