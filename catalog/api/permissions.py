"""Catalog API permissions."""

from rest_framework.permissions import BasePermission


class IsProductOwner(BasePermission):
    """Allow modifications only for the supplier who listed the product.

    Note: Read permissions (e.g., GET on detail) are handled separately by the view.
    """

    message = "Only the supplier of this product can modify it."

    def has_object_permission(self, request, view, obj):
        return request.user.is_authenticated and obj.supplier_id == request.user.id
