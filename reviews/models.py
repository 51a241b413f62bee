"""Reviews app models.

A vendor can review a supplier once per delivered order. The overall
rating is required; the aspect ratings are optional. Ratings are
constrained between 1 and 5. The reviewed supplier may answer once, and
any user may mark a review as helpful once.
"""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinLengthValidator, MinValueValidator
from django.db import models

from orders.models import Order

RATING_VALIDATORS = [MinValueValidator(1), MaxValueValidator(5)]


class Review(models.Model):
    """A vendor's review of a supplier for one delivered order."""

    vendor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="reviews_written",
    )
    supplier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="reviews_received",
    )
    order = models.ForeignKey(Order, on_delete=models.PROTECT, related_name="reviews")

    rating = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS)
    comment = models.TextField(
        max_length=1000, validators=[MinLengthValidator(10)]
    )
    quality_rating = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=RATING_VALIDATORS
    )
    delivery_rating = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=RATING_VALIDATORS
    )
    communication_rating = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=RATING_VALIDATORS
    )
    value_rating = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=RATING_VALIDATORS
    )

    supplier_response = models.TextField(max_length=500, blank=True, default="")
    responded_at = models.DateTimeField(null=True, blank=True)
    helpful_votes = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["vendor", "supplier", "order"],
                name="unique_review_per_vendor_supplier_order",
            ),
            models.CheckConstraint(
                condition=models.Q(rating__gte=1, rating__lte=5),
                name="review_rating_between_1_and_5",
            ),
        ]
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:
        return f"Review<{self.id} {self.vendor_id}->{self.supplier_id} {self.rating}>"


class HelpfulVote(models.Model):
    """One user's "helpful" mark on a review; ``Review.helpful_votes`` counts them."""

    review = models.ForeignKey(Review, on_delete=models.CASCADE, related_name="helpful_marks")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="helpful_marks",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["review", "user"], name="unique_helpful_vote_per_user"),
        ]
