from django.urls import path
from .views import (
    PendingReviewListAPIView,
    ReviewDetailUpdateDeleteAPIView,
    ReviewHelpfulAPIView,
    ReviewListCreateAPIView,
    ReviewResponseAPIView,
)

urlpatterns = [
    path("reviews/", ReviewListCreateAPIView.as_view(), name="review-list"),
    path("reviews/pending/", PendingReviewListAPIView.as_view(), name="review-pending"),
    path("reviews/<int:pk>/", ReviewDetailUpdateDeleteAPIView.as_view(), name="review-detail"),
    path("reviews/<int:pk>/response/", ReviewResponseAPIView.as_view(), name="review-response"),
    path("reviews/<int:pk>/helpful/", ReviewHelpfulAPIView.as_view(), name="review-helpful"),
]
