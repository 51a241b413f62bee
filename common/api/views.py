"""Public platform statistics.

GET /api/base-info/ returns aggregate counters for the landing page:
review count, average review rating (one decimal), verified supplier
count and active product count.
"""

from django.db.models import Avg
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from catalog.models import Product
from common.api.responses import envelope
from profiles.models import Profile
from reviews.models import Review
from reviews.services import round_rating


class BaseInfoView(APIView):
    """Publicly accessible endpoint exposing platform statistics."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        review_stats = Review.objects.aggregate(avg=Avg("rating"))
        data = {
            "review_count": Review.objects.count(),
            "average_rating": float(round_rating(review_stats["avg"])),
            "verified_supplier_count": Profile.objects.filter(
                role=Profile.Role.SUPPLIER, is_verified=True
            ).count(),
            "active_product_count": Product.objects.filter(is_active=True).count(),
        }
        return envelope("Platform statistics retrieved successfully", data, status=status.HTTP_200_OK)
