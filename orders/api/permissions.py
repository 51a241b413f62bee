"""Orders API permissions."""

from rest_framework.permissions import BasePermission

from profiles.directory import role_of
from profiles.models import Profile


class IsMarketplaceUser(BasePermission):
    """Allows access only to authenticated users with a vendor or supplier profile.

    Order reads and status changes are scoped to the caller's role by the
    order engine; users without a role have no orders to see.
    """

    message = "Only vendors and suppliers can access orders."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return role_of(user) in Profile.Role.values
