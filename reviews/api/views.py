"""Reviews API views.

List and create reviews on the same endpoint. Supports filtering by
supplier_id, vendor_id and rating, and ordering by updated_at or rating.
Retrieve/patch/delete a single review with owner-only modifications. The
pending endpoint lists the caller's delivered orders without a review.
Suppliers answer reviews of themselves; any user can mark a review helpful.
"""

from rest_framework import generics, status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.api.pagination import DefaultPagination
from common.api.responses import envelope, paginated_envelope
from profiles.api.permissions import IsSupplier, IsVendor
from reviews import services
from reviews.models import Review
from .permissions import IsReviewOwner
from .serializers import (
    PendingReviewSerializer,
    ReviewCreateSerializer,
    ReviewOutputSerializer,
    ReviewPatchSerializer,
    ReviewResponseSerializer,
)


# ----------------------------- helpers (module-level) -----------------------------

def _int_param(params, name, lo=None, hi=None):
    value = params.get(name)
    if not value:
        return None
    if not value.isdigit() or (lo is not None and int(value) < lo) or (hi is not None and int(value) > hi):
        raise ValidationError({name: "Must be a valid integer."})
    return int(value)


def _apply_filters_and_ordering(qs, params):
    """Filter by ids and rating and apply ordering; raises ValidationError on bad input."""
    supplier_id = _int_param(params, "supplier_id")
    if supplier_id is not None:
        qs = qs.filter(supplier_id=supplier_id)

    vendor_id = _int_param(params, "vendor_id")
    if vendor_id is not None:
        qs = qs.filter(vendor_id=vendor_id)

    rating = _int_param(params, "rating", 1, 5)
    if rating is not None:
        qs = qs.filter(rating=rating)

    ordering = params.get("ordering")
    if ordering:
        allowed = {"updated_at", "-updated_at", "rating", "-rating"}
        if ordering not in allowed:
            raise ValidationError(
                {"ordering": "Allowed values: updated_at, -updated_at, rating, -rating."}
            )
        return qs.order_by(ordering, "-id")
    return qs.order_by("-updated_at", "-id")


# --------------------------------------- views ---------------------------------------

class ReviewListCreateAPIView(generics.ListCreateAPIView):
    """GET: list reviews (public, filter/order). POST: create review (vendor-only)."""

    queryset = Review.objects.select_related("vendor", "order")
    pagination_class = DefaultPagination

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsVendor()]
        return [AllowAny()]

    def get_serializer_class(self):
        return ReviewOutputSerializer if self.request.method == "GET" else ReviewCreateSerializer

    def get_queryset(self):
        return _apply_filters_and_ordering(super().get_queryset(), self.request.query_params)

    def list(self, request, *args, **kwargs):
        page = self.paginate_queryset(self.get_queryset())
        data = ReviewOutputSerializer(page, many=True).data
        return paginated_envelope(self.paginator, "Reviews retrieved successfully", "reviews", data)

    def create(self, request, *args, **kwargs):
        ser = ReviewCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = dict(ser.validated_data)
        review = services.create_review(
            request.user,
            supplier_id=data.pop("supplier"),
            order_id=data.pop("order"),
            **data,
        )
        return envelope(
            "Review created successfully",
            {"review": ReviewOutputSerializer(review).data},
            status=status.HTTP_201_CREATED,
        )


class ReviewDetailUpdateDeleteAPIView(generics.RetrieveUpdateDestroyAPIView):
    """GET: any caller. PATCH/DELETE: owner-only."""

    queryset = Review.objects.select_related("vendor", "order")
    http_method_names = ["get", "patch", "delete", "head", "options"]

    def get_permissions(self):
        if self.request.method in ("PATCH", "DELETE"):
            return [IsAuthenticated(), IsReviewOwner()]
        return [AllowAny()]

    def retrieve(self, request, *args, **kwargs):
        review = self.get_object()
        return envelope("Review retrieved successfully", {"review": ReviewOutputSerializer(review).data})

    def partial_update(self, request, *args, **kwargs):
        """Update rating, comment or aspect ratings; return the full review."""
        instance = self.get_object()
        ser = ReviewPatchSerializer(instance, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        review = services.update_review(instance, ser.validated_data)
        return envelope("Review updated successfully", {"review": ReviewOutputSerializer(review).data})

    def destroy(self, request, *args, **kwargs):
        """Delete the review (owner-only) and return 204 No Content."""
        services.delete_review(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)


class PendingReviewListAPIView(APIView):
    """GET /api/reviews/pending/ -> delivered orders of the vendor without a review."""

    permission_classes = [IsAuthenticated, IsVendor]

    def get(self, request):
        orders = services.pending_reviews(request.user)
        return envelope(
            "Pending reviews retrieved successfully",
            {"orders": PendingReviewSerializer(orders, many=True).data},
        )


class ReviewResponseAPIView(APIView):
    """POST /api/reviews/<id>/response/ -> the reviewed supplier answers once."""

    permission_classes = [IsAuthenticated, IsSupplier]

    def post(self, request, pk):
        ser = ReviewResponseSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        review = services.respond_to_review(request.user, pk, ser.validated_data["comment"])
        return envelope("Response added successfully", {"review": ReviewOutputSerializer(review).data})


class ReviewHelpfulAPIView(APIView):
    """POST /api/reviews/<id>/helpful/ -> mark a review as helpful (once per user)."""

    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        review = services.mark_helpful(request.user, pk)
        return envelope("Review marked as helpful", {"helpful_votes": review.helpful_votes})
