from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase, APIClient

from common.testing import PASSWORD, make_supplier


class LoginTests(APITestCase):
    def setUp(self):
        self.url = reverse("login")
        self.client = APIClient()
        self.user = make_supplier(username="freshmandi")

    def test_login_success(self):
        payload = {"username": "freshmandi", "password": PASSWORD}
        resp = self.client.post(self.url, payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.data["data"]
        self.assertIn("token", data)
        self.assertEqual(data["username"], "freshmandi")
        self.assertEqual(data["user_id"], self.user.id)
        self.assertEqual(data["role"], "supplier")

    def test_login_token_is_stable(self):
        payload = {"username": "freshmandi", "password": PASSWORD}
        first = self.client.post(self.url, payload, format="json").data["data"]["token"]
        second = self.client.post(self.url, payload, format="json").data["data"]["token"]
        self.assertEqual(first, second)

    def test_login_wrong_password(self):
        payload = {"username": "freshmandi", "password": "wrongPassword"}
        resp = self.client.post(self.url, payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(resp.data["success"])
        self.assertEqual(resp.data["errors"][0]["message"], "Invalid Credentials")

    def test_login_missing_fields(self):
        resp = self.client.post(self.url, {"username": "freshmandi"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["errors"][0]["field"], "password")
