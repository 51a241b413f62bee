from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase, APIClient

from common.testing import auth, error_fields, make_supplier, make_vendor
from profiles.directory import UserDirectory
from profiles.models import Profile


class ProfileGetTests(APITestCase):
    def setUp(self):
        self.vendor = make_vendor(username="ramesh")
        self.supplier = make_supplier(username="freshmandi")
        self.client = APIClient()
        auth(self.client, self.vendor)

    def test_get_supplier_profile(self):
        resp = self.client.get(reverse("profile-detail", kwargs={"pk": self.supplier.id}))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        profile = resp.data["data"]["profile"]
        self.assertEqual(profile["username"], "freshmandi")
        self.assertEqual(profile["role"], "supplier")
        self.assertTrue(profile["is_verified"])

    def test_unknown_user_404(self):
        resp = self.client.get(reverse("profile-detail", kwargs={"pk": 99999}))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["code"], "not_found")

    def test_requires_authentication(self):
        resp = APIClient().get(reverse("profile-detail", kwargs={"pk": self.vendor.id}))
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(resp.data["success"])


class ProfilePatchTests(APITestCase):
    def setUp(self):
        self.vendor = make_vendor()
        self.supplier = make_supplier()
        self.client = APIClient()

    def test_owner_can_patch_contact_fields(self):
        auth(self.client, self.vendor)
        url = reverse("profile-detail", kwargs={"pk": self.vendor.id})
        resp = self.client.patch(url, {"city": "Nagpur", "first_name": "Ramesh"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["data"]["profile"]["city"], "Nagpur")
        self.vendor.refresh_from_db()
        self.assertEqual(self.vendor.first_name, "Ramesh")

    def test_cannot_patch_foreign_profile(self):
        auth(self.client, self.vendor)
        url = reverse("profile-detail", kwargs={"pk": self.supplier.id})
        resp = self.client.patch(url, {"city": "Hamburg"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_vendor_cannot_set_supplier_fields(self):
        auth(self.client, self.vendor)
        url = reverse("profile-detail", kwargs={"pk": self.vendor.id})
        resp = self.client.patch(url, {"business_name": "Sneaky"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("business_name", error_fields(resp))

    def test_verification_flag_is_read_only(self):
        supplier = make_supplier(verified=False)
        auth(self.client, supplier)
        url = reverse("profile-detail", kwargs={"pk": supplier.id})
        self.client.patch(url, {"is_verified": True, "average_rating": "5.0"}, format="json")
        profile = Profile.objects.get(user=supplier)
        self.assertFalse(profile.is_verified)
        self.assertEqual(str(profile.average_rating), "0.0")

    def test_changing_fssai_resets_verification(self):
        auth(self.client, self.supplier)
        url = reverse("profile-detail", kwargs={"pk": self.supplier.id})
        resp = self.client.patch(url, {"fssai_number": "99999999999999"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(Profile.objects.get(user=self.supplier).is_verified)


class SupplierListTests(APITestCase):
    def setUp(self):
        make_supplier(username="verified_pune", city="Pune")
        make_supplier(username="verified_mumbai", city="Mumbai")
        make_supplier(username="pending_pune", city="Pune", verified=False)
        make_vendor()
        self.url = reverse("supplier-list")

    def test_lists_only_suppliers_publicly(self):
        resp = APIClient().get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["data"]["pagination"]["total"], 3)

    def test_verified_and_city_filters(self):
        resp = APIClient().get(self.url, {"verified": "true", "city": "pune"})
        names = [s["username"] for s in resp.data["data"]["suppliers"]]
        self.assertEqual(names, ["verified_pune"])


class UserDirectoryTests(APITestCase):
    def test_role_and_verification_lookup(self):
        directory = UserDirectory()
        vendor = make_vendor()
        supplier = make_supplier(verified=False)
        self.assertEqual(directory.get_role(vendor.id), "vendor")
        self.assertEqual(directory.get_role(supplier.id), "supplier")
        self.assertIsNone(directory.get_role(99999))
        self.assertFalse(directory.is_verified(supplier.id))
        self.assertFalse(directory.is_verified(vendor.id))
