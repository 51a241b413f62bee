"""User Directory collaborator.

Read-only view over profiles used by the cart and order services to answer
"what role does this user have" and "is this supplier verified" without
depending on the profile model's layout.
"""

from typing import Optional

from .models import Profile


class UserDirectory:
    """Role and verification lookups keyed by user id."""

    def get_role(self, user_id) -> Optional[str]:
        return (
            Profile.objects.filter(user_id=user_id)
            .values_list("role", flat=True)
            .first()
        )

    def is_verified(self, user_id) -> bool:
        return Profile.objects.filter(
            user_id=user_id, role=Profile.Role.SUPPLIER, is_verified=True
        ).exists()


def role_of(user) -> str:
    """Role of an authenticated user object, or '' if it has no profile."""
    profile = getattr(user, "profile", None)
    return getattr(profile, "role", "") if profile else ""
