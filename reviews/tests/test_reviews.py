from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase, APIClient

from common.testing import auth, error_fields, make_supplier, make_vendor, place_order
from profiles.models import Profile
from reviews.models import Review


class ReviewAPITestBase(APITestCase):
    def setUp(self):
        self.vendor = make_vendor()
        self.supplier = make_supplier()
        self.order = place_order(self.vendor, self.supplier)
        self.client = APIClient()
        auth(self.client, self.vendor)
        self.url = reverse("review-list")

    def payload(self, **overrides):
        data = {
            "supplier": self.supplier.id,
            "order": self.order.id,
            "rating": 4,
            "comment": "Fresh produce, delivered on time.",
            "quality_rating": 5,
        }
        data.update(overrides)
        return data

    def profile(self):
        return Profile.objects.get(user=self.supplier)

class ReviewCreateTests(ReviewAPITestBase):
    def test_vendor_reviews_delivered_order(self):
        resp = self.client.post(self.url, self.payload(), format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        review = resp.data["data"]["review"]
        self.assertEqual(review["order_number"], self.order.order_number)
        self.assertEqual(review["quality_rating"], 5)
        self.assertIsNone(review["delivery_rating"])

        profile = self.profile()
        self.assertEqual(profile.total_reviews, 1)
        self.assertEqual(profile.average_rating, Decimal("4.0"))

    def test_second_review_for_same_order_conflicts(self):
        self.client.post(self.url, self.payload(), format="json")
        resp = self.client.post(self.url, self.payload(rating=1), format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["code"], "duplicate_review")
        self.assertEqual(Review.objects.count(), 1)

    def test_undelivered_order_not_reviewable(self):
        pending = place_order(self.vendor, self.supplier, deliver=False)
        resp = self.client.post(self.url, self.payload(order=pending.id), format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["code"], "review_not_allowed")

    def test_supplier_must_match_order(self):
        resp = self.client.post(self.url, self.payload(supplier=make_supplier().id), format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["code"], "review_not_allowed")

    def test_other_vendors_order_is_not_found(self):
        client = APIClient()
        auth(client, make_vendor())
        resp = client.post(self.url, self.payload(), format="json")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_field_validation(self):
        resp = self.client.post(self.url, self.payload(rating=6, comment="short"), format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(error_fields(resp), {"rating", "comment"})

    def test_supplier_cannot_write_reviews(self):
        client = APIClient()
        auth(client, self.supplier)
        resp = client.post(self.url, self.payload(), format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

class ReviewUpdateDeleteTests(ReviewAPITestBase):
    def setUp(self):
        super().setUp()
        resp = self.client.post(self.url, self.payload(rating=2), format="json")
        self.review_url = reverse("review-detail", kwargs={"pk": resp.data["data"]["review"]["id"]})
        second_order = place_order(self.vendor, self.supplier)
        self.client.post(self.url, self.payload(order=second_order.id, rating=5), format="json")

    def test_average_rounded_to_one_decimal(self):
        self.assertEqual(self.profile().average_rating, Decimal("3.5"))

    def test_owner_patch_recomputes_rating(self):
        resp = self.client.patch(self.review_url, {"rating": 4}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["data"]["review"]["rating"], 4)
        self.assertEqual(self.profile().average_rating, Decimal("4.5"))

    def test_patch_cannot_move_review(self):
        resp = self.client.patch(self.review_url, {"order": 1}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("order", error_fields(resp))

    def test_non_owner_cannot_patch_or_delete(self):
        client = APIClient()
        auth(client, make_vendor())
        self.assertEqual(client.patch(self.review_url, {"rating": 1}, format="json").status_code, 403)
        self.assertEqual(client.delete(self.review_url).status_code, 403)

    def test_delete_recomputes_rating(self):
        resp = self.client.delete(self.review_url)
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        profile = self.profile()
        self.assertEqual(profile.total_reviews, 1)
        self.assertEqual(profile.average_rating, Decimal("5.0"))

    def test_public_list_with_filters(self):
        resp = APIClient().get(self.url, {"supplier_id": self.supplier.id, "ordering": "-rating"})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([r["rating"] for r in resp.data["data"]["reviews"]], [5, 2])
        resp = APIClient().get(self.url, {"rating": "5"})
        self.assertEqual(resp.data["data"]["pagination"]["total"], 1)

class PendingReviewTests(ReviewAPITestBase):
    def test_lists_delivered_orders_without_review(self):
        place_order(self.vendor, self.supplier, deliver=False)
        resp = self.client.get(reverse("review-pending"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([o["id"] for o in resp.data["data"]["orders"]], [self.order.id])

        self.client.post(self.url, self.payload(), format="json")
        resp = self.client.get(reverse("review-pending"))
        self.assertEqual(resp.data["data"]["orders"], [])


class SupplierResponseTests(ReviewAPITestBase):
    def setUp(self):
        super().setUp()
        resp = self.client.post(self.url, self.payload(), format="json")
        self.review_id = resp.data["data"]["review"]["id"]
        self.response_url = reverse("review-response", kwargs={"pk": self.review_id})
        self.supplier_client = APIClient()
        auth(self.supplier_client, self.supplier)

    def test_reviewed_supplier_answers_once(self):
        resp = self.supplier_client.post(self.response_url, {"comment": "Thank you, see you next week!"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        review = resp.data["data"]["review"]
        self.assertEqual(review["supplier_response"], "Thank you, see you next week!")
        self.assertIsNotNone(review["responded_at"])

        resp = self.supplier_client.post(self.response_url, {"comment": "Edited answer"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["code"], "response_exists")
        self.assertEqual(
            Review.objects.get(pk=self.review_id).supplier_response, "Thank you, see you next week!"
        )

    def test_blank_answer_rejected(self):
        resp = self.supplier_client.post(self.response_url, {"comment": "   "}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("comment", error_fields(resp))

    def test_other_supplier_gets_404(self):
        client = APIClient()
        auth(client, make_supplier())
        resp = client.post(self.response_url, {"comment": "Not my review"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(Review.objects.get(pk=self.review_id).supplier_response, "")

    def test_vendor_cannot_answer(self):
        resp = self.client.post(self.response_url, {"comment": "Answering myself"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)


class HelpfulVoteTests(ReviewAPITestBase):
    def setUp(self):
        super().setUp()
        resp = self.client.post(self.url, self.payload(), format="json")
        self.helpful_url = reverse("review-helpful", kwargs={"pk": resp.data["data"]["review"]["id"]})

    def test_each_user_counts_once(self):
        first, second = APIClient(), APIClient()
        auth(first, make_vendor())
        auth(second, self.supplier)

        resp = first.post(self.helpful_url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["data"]["helpful_votes"], 1)
        self.assertEqual(first.post(self.helpful_url).data["data"]["helpful_votes"], 1)
        self.assertEqual(second.post(self.helpful_url).data["data"]["helpful_votes"], 2)

    def test_author_cannot_vote(self):
        resp = self.client.post(self.helpful_url)
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.data["code"], "own_review_vote")

    def test_anonymous_and_missing_review(self):
        self.assertEqual(APIClient().post(self.helpful_url).status_code, status.HTTP_401_UNAUTHORIZED)
        resp = self.client.post(reverse("review-helpful", kwargs={"pk": 99999}))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
