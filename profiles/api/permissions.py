"""Profiles API permissions.

Role gates shared by the marketplace endpoints plus the owner-only
permission used by profile updates.
"""

from rest_framework.permissions import BasePermission, SAFE_METHODS

from profiles.directory import role_of
from profiles.models import Profile


class IsVendor(BasePermission):
    """Allow access only to authenticated users with a vendor profile."""

    message = "Only vendors can perform this action."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return role_of(user) == Profile.Role.VENDOR


class IsSupplier(BasePermission):
    """Allow access only to authenticated users with a supplier profile."""

    message = "Only suppliers can perform this action."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return role_of(user) == Profile.Role.SUPPLIER


class IsProfileOwner(BasePermission):
    """
    Object-level permission that allows write access only to the profile owner.

    - SAFE methods (GET/HEAD/OPTIONS) are always allowed.
    - For write methods (e.g., PATCH), the user must be authenticated and
      match the profile's owner (`obj.user_id == request.user.id`).
    """

    message = "You may only modify your own profile."

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        return request.user.is_authenticated and obj.user_id == request.user.id
