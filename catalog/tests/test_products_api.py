from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase, APIClient

from catalog.models import Product
from catalog.services import ProductCatalog
from common.testing import auth, error_fields, make_product, make_supplier, make_vendor


class ProductListTests(APITestCase):
    def setUp(self):
        self.supplier = make_supplier()
        self.other = make_supplier()
        make_product(self.supplier, name="Red Onion", price_amount=Decimal("40.00"))
        make_product(self.supplier, name="Basmati Rice", category="grains_cereals", price_amount=Decimal("95.00"))
        make_product(self.other, name="Tomato", price_amount=Decimal("30.00"))
        make_product(self.other, name="Old Stock", is_active=False)
        self.url = reverse("product-list")

    def test_public_list_hides_inactive(self):
        resp = APIClient().get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        names = {p["name"] for p in resp.data["data"]["products"]}
        self.assertEqual(names, {"Red Onion", "Basmati Rice", "Tomato"})
        self.assertEqual(resp.data["data"]["pagination"]["total"], 3)

    def test_filters(self):
        resp = APIClient().get(self.url, {"supplier_id": self.supplier.id, "max_price": "50"})
        self.assertEqual([p["name"] for p in resp.data["data"]["products"]], ["Red Onion"])

        resp = APIClient().get(self.url, {"category": "grains_cereals"})
        self.assertEqual([p["name"] for p in resp.data["data"]["products"]], ["Basmati Rice"])

        resp = APIClient().get(self.url, {"search": "toma"})
        self.assertEqual([p["name"] for p in resp.data["data"]["products"]], ["Tomato"])

    def test_ordering_by_price(self):
        resp = APIClient().get(self.url, {"ordering": "price_amount"})
        prices = [p["price_amount"] for p in resp.data["data"]["products"]]
        self.assertEqual(prices, ["30.00", "40.00", "95.00"])

    def test_invalid_filters_400(self):
        resp = APIClient().get(self.url, {"category": "jewellery"})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("category", error_fields(resp))
        resp = APIClient().get(self.url, {"ordering": "secret"})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)


class ProductWriteTests(APITestCase):
    def setUp(self):
        self.supplier = make_supplier()
        self.client = APIClient()
        self.payload = {
            "name": "Green Chilli",
            "description": "Spicy green chillies",
            "category": "vegetables",
            "price_amount": "60.00",
            "price_unit": "kg",
            "minimum_order_quantity": 2,
            "available_quantity": 50,
        }

    def test_supplier_creates_product(self):
        auth(self.client, self.supplier)
        resp = self.client.post(reverse("product-list"), self.payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        product = resp.data["data"]["product"]
        self.assertEqual(product["supplier"], self.supplier.id)
        self.assertEqual(product["formatted_price"], "₹60.00/kg")

    def test_vendor_cannot_create_product(self):
        auth(self.client, make_vendor())
        resp = self.client.post(reverse("product-list"), self.payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_negative_stock_rejected(self):
        auth(self.client, self.supplier)
        payload = dict(self.payload, available_quantity=-1, minimum_order_quantity=0)
        resp = self.client.post(reverse("product-list"), payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue({"available_quantity", "minimum_order_quantity"} <= error_fields(resp))

    def test_owner_patches_and_deactivates(self):
        product = make_product(self.supplier)
        auth(self.client, self.supplier)
        url = reverse("product-detail", kwargs={"pk": product.id})

        resp = self.client.patch(url, {"price_amount": "45.50"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["data"]["product"]["price_amount"], "45.50")

        resp = self.client.delete(url)
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        product.refresh_from_db()
        self.assertFalse(product.is_active)
        self.assertTrue(Product.objects.filter(pk=product.id).exists())

    def test_other_supplier_cannot_patch(self):
        product = make_product(self.supplier)
        auth(self.client, make_supplier())
        url = reverse("product-detail", kwargs={"pk": product.id})
        resp = self.client.patch(url, {"price_amount": "1.00"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_patch_rejects_stock_field(self):
        product = make_product(self.supplier, available_quantity=10)
        auth(self.client, self.supplier)
        url = reverse("product-detail", kwargs={"pk": product.id})
        resp = self.client.patch(url, {"available_quantity": 500}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("available_quantity", error_fields(resp))
        product.refresh_from_db()
        self.assertEqual(product.available_quantity, 10)


class ProductStockTests(APITestCase):
    def setUp(self):
        self.supplier = make_supplier()
        self.product = make_product(self.supplier, available_quantity=10)
        self.client = APIClient()
        auth(self.client, self.supplier)
        self.url = reverse("product-stock", kwargs={"pk": self.product.id})

    def stock(self):
        return Product.objects.get(pk=self.product.pk).available_quantity

    def test_set_absolute_count(self):
        resp = self.client.patch(self.url, {"available_quantity": 40}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["data"]["product"]["available_quantity"], 40)
        self.assertEqual(self.stock(), 40)

    def test_restock_adds_to_live_count(self):
        ProductCatalog().decrement_available(self.product.id, 4)
        resp = self.client.patch(self.url, {"adjustment": 20}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(self.stock(), 26)

    def test_write_off_beyond_stock_rejected(self):
        resp = self.client.patch(self.url, {"adjustment": -11}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["code"], "insufficient_stock")
        self.assertEqual(self.stock(), 10)

    def test_exactly_one_field_required(self):
        resp = self.client.patch(self.url, {"available_quantity": 5, "adjustment": 1}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        resp = self.client.patch(self.url, {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        resp = self.client.patch(self.url, {"available_quantity": -1}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.stock(), 10)

    def test_other_supplier_forbidden(self):
        client = APIClient()
        auth(client, make_supplier())
        resp = client.patch(self.url, {"available_quantity": 0}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.stock(), 10)

    def test_inactive_product_not_found(self):
        self.product.is_active = False
        self.product.save()
        resp = self.client.patch(self.url, {"available_quantity": 3}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)


class ProductCategoryTests(APITestCase):
    def test_counts_and_average_price_of_active_products(self):
        supplier = make_supplier()
        make_product(supplier, price_amount=Decimal("40.00"))
        make_product(supplier, price_amount=Decimal("50.00"))
        make_product(supplier, category="dairy", price_amount=Decimal("60.00"))
        make_product(supplier, category="dairy", is_active=False)

        resp = APIClient().get(reverse("product-categories"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [dict(c) for c in resp.data["data"]["categories"]],
            [
                {"category": "dairy", "count": 1, "avg_price": "60.00"},
                {"category": "vegetables", "count": 2, "avg_price": "45.00"},
            ],
        )


class SupplierProductListTests(APITestCase):
    def setUp(self):
        self.supplier = make_supplier()
        make_product(self.supplier, name="Paneer")
        make_product(self.supplier, name="Ghee", is_active=False)
        make_product(make_supplier(), name="Curd")
        self.client = APIClient()
        auth(self.client, self.supplier)
        self.url = reverse("product-mine")

    def names(self, resp):
        return {p["name"] for p in resp.data["data"]["products"]}

    def test_defaults_to_active_own_products(self):
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(self.names(resp), {"Paneer"})

    def test_status_filter(self):
        self.assertEqual(self.names(self.client.get(self.url, {"status": "inactive"})), {"Ghee"})
        self.assertEqual(self.names(self.client.get(self.url, {"status": "all"})), {"Paneer", "Ghee"})
        resp = self.client.get(self.url, {"status": "archived"})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_vendor_forbidden(self):
        client = APIClient()
        auth(client, make_vendor())
        self.assertEqual(client.get(self.url).status_code, status.HTTP_403_FORBIDDEN)
