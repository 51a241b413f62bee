from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from common.testing import make_product, make_supplier, make_vendor, place_order
from reviews.models import Review


class BaseInfoAPITests(TestCase):
    """
    Tests for GET /api/base-info/

    - No authentication required (AllowAny).
    - Returns counts for reviews, verified suppliers and active products.
    - Returns average rating rounded to 1 decimal; 0.0 if no reviews.
    """

    def setUp(self):
        self.client = APIClient()
        self.url = reverse("base-info")

    def test_no_data_returns_zeros(self):
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, 200)
        data = res.data["data"]
        self.assertEqual(data["review_count"], 0)
        self.assertEqual(data["average_rating"], 0.0)
        self.assertEqual(data["verified_supplier_count"], 0)
        self.assertEqual(data["active_product_count"], 0)

    def test_counts_and_average_rating(self):
        vendor = make_vendor()
        supplier = make_supplier()
        make_supplier(verified=False)
        make_product(supplier, is_active=False)

        for rating in (5, 4, 4):
            order = place_order(vendor, supplier)
            Review.objects.create(
                vendor=vendor, supplier=supplier, order=order, rating=rating,
                comment="Good quality stock",
            )

        res = self.client.get(self.url)
        data = res.data["data"]
        self.assertEqual(data["review_count"], 3)
        self.assertEqual(data["average_rating"], 4.3)
        self.assertEqual(data["verified_supplier_count"], 1)
        # place_order lists one product per order
        self.assertEqual(data["active_product_count"], 3)
