"""Review Engine.

Reviews are gated on order state: the vendor must have placed the order,
the order must be addressed to the reviewed supplier and it must be
delivered. Every write recomputes the supplier's rating aggregate on the
profile inside the same transaction.
"""

from decimal import ROUND_HALF_UP, Decimal

import structlog
from django.db import IntegrityError, transaction
from django.db.models import Avg, Count, F
from django.utils import timezone

from orders.exceptions import OrderNotFound
from orders.models import Order, OrderStatus
from profiles.models import Profile
from .exceptions import (
    DuplicateReview,
    OwnReviewVote,
    ResponseAlreadyExists,
    ReviewNotAllowed,
    ReviewNotFound,
)
from .models import HelpfulVote, Review

logger = structlog.get_logger(__name__)

ASPECT_FIELDS = ("quality_rating", "delivery_rating", "communication_rating", "value_rating")
EDITABLE_FIELDS = ("rating", "comment") + ASPECT_FIELDS


def round_rating(value) -> Decimal:
    if value is None:
        return Decimal("0.0")
    return Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def recalculate_supplier_rating(supplier_id):
    """Store the supplier's average rating (1 decimal) and review count on its profile."""
    stats = Review.objects.filter(supplier_id=supplier_id).aggregate(
        average=Avg("rating"), total=Count("id")
    )
    average = round_rating(stats["average"])
    Profile.objects.filter(user_id=supplier_id, role=Profile.Role.SUPPLIER).update(
        average_rating=average, total_reviews=stats["total"]
    )
    logger.info(
        "supplier_rating_recalculated",
        supplier_id=supplier_id,
        average_rating=str(average),
        total_reviews=stats["total"],
    )


def pending_reviews(vendor):
    """Delivered orders of the vendor that have no review yet."""
    return (
        Order.objects.filter(vendor=vendor, status=OrderStatus.DELIVERED, reviews__isnull=True)
        .select_related("supplier", "supplier__profile")
        .order_by("-actual_delivery_date", "-id")
    )


def create_review(vendor, *, supplier_id, order_id, rating, comment, **aspects) -> Review:
    order = Order.objects.filter(pk=order_id, vendor=vendor).first()
    if order is None:
        raise OrderNotFound(field="order", order_id=order_id)
    if order.supplier_id != supplier_id:
        raise ReviewNotAllowed(
            "This order was not supplied by the selected supplier.", field="supplier"
        )
    if order.status != OrderStatus.DELIVERED:
        raise ReviewNotAllowed(field="order", order_status=order.status)
    if Review.objects.filter(vendor=vendor, supplier_id=supplier_id, order=order).exists():
        raise DuplicateReview(field="order")

    fields = {k: v for k, v in aspects.items() if k in ASPECT_FIELDS}
    try:
        with transaction.atomic():
            review = Review.objects.create(
                vendor=vendor,
                supplier_id=supplier_id,
                order=order,
                rating=rating,
                comment=comment,
                **fields,
            )
            recalculate_supplier_rating(supplier_id)
    except IntegrityError:
        raise DuplicateReview(field="order")

    logger.info(
        "review_created",
        review_id=review.pk,
        vendor_id=vendor.pk,
        supplier_id=supplier_id,
        order_number=order.order_number,
        rating=rating,
    )
    return review


@transaction.atomic
def update_review(review: Review, changes: dict) -> Review:
    fields = [k for k in EDITABLE_FIELDS if k in changes]
    for name in fields:
        setattr(review, name, changes[name])
    if fields:
        review.save(update_fields=fields + ["updated_at"])
        recalculate_supplier_rating(review.supplier_id)
    return review


@transaction.atomic
def delete_review(review: Review) -> None:
    supplier_id = review.supplier_id
    review.delete()
    recalculate_supplier_rating(supplier_id)


def respond_to_review(supplier, review_id, comment: str) -> Review:
    """Attach the reviewed supplier's one-time public answer to a review."""
    review = Review.objects.filter(pk=review_id, supplier=supplier).first()
    if review is None:
        raise ReviewNotFound(review_id=review_id)
    now = timezone.now()
    answered = Review.objects.filter(pk=review.pk, supplier_response="").update(
        supplier_response=comment, responded_at=now, updated_at=now
    )
    if not answered:
        raise ResponseAlreadyExists(field="comment", review_id=review.pk)
    review.refresh_from_db()
    logger.info("review_answered", review_id=review.pk, supplier_id=supplier.pk)
    return review


def mark_helpful(user, review_id) -> Review:
    """Count ``user`` as finding the review helpful; a repeat mark changes nothing."""
    review = Review.objects.filter(pk=review_id).first()
    if review is None:
        raise ReviewNotFound(review_id=review_id)
    if review.vendor_id == user.pk:
        raise OwnReviewVote(review_id=review.pk)

    with transaction.atomic():
        _, created = HelpfulVote.objects.get_or_create(review=review, user=user)
        if created:
            Review.objects.filter(pk=review.pk).update(helpful_votes=F("helpful_votes") + 1)
    review.refresh_from_db(fields=["helpful_votes"])
    return review
