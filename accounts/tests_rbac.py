"""
Minimal RBAC tests: role- and capability-based access control.
- Staff token hitting admin endpoint returns 403
- Staff without a capability cannot write guarded resources
- Admin passes every capability check
"""
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User


class RBACTests(TestCase):
    def setUp(self):
        self.client = APIClient()

        self.admin = User.objects.create_user(
            username="owner",
            password="pass12345",
            full_name="Owner",
            role="admin",
        )
        self.staff = User.objects.create_user(
            username="desk",
            password="pass12345",
            full_name="Front Desk",
            role="staff",
        )
        self.seating_manager = User.objects.create_user(
            username="seats",
            password="pass12345",
            full_name="Seat Manager",
            role="staff",
            permissions=["manage_seating"],
        )

    def _auth_header(self, user: User) -> dict:
        token = str(AccessToken.for_user(user))
        return {"HTTP_AUTHORIZATION": f"Bearer {token}"}

    def test_no_token_returns_401(self):
        res = self.client.get("/api/students")
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.data["code"], "not_authenticated")

    def test_staff_hitting_admin_endpoint_returns_403(self):
        self.client.credentials(**self._auth_header(self.staff))
        res = self.client.get("/api/users")
        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.data["code"], "permission_denied")

    def test_staff_can_read_students(self):
        self.client.credentials(**self._auth_header(self.staff))
        res = self.client.get("/api/students")
        self.assertEqual(res.status_code, 200)

    def test_staff_without_capability_cannot_create_shift(self):
        self.client.credentials(**self._auth_header(self.staff))
        res = self.client.post("/api/shifts", {"title": "Night"}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_staff_with_capability_can_create_shift(self):
        self.client.credentials(**self._auth_header(self.seating_manager))
        res = self.client.post("/api/shifts", {"title": "Night"}, format="json")
        self.assertEqual(res.status_code, 201)

    def test_admin_passes_capability_checks(self):
        self.assertTrue(self.admin.has_capability("manage_expenses"))
        self.assertFalse(self.staff.has_capability("manage_expenses"))
        self.client.credentials(**self._auth_header(self.admin))
        res = self.client.post("/api/shifts", {"title": "Night"}, format="json")
        self.assertEqual(res.status_code, 201)

    def test_capability_message_names_permission(self):
        self.client.credentials(**self._auth_header(self.staff))
        res = self.client.post("/api/expenses", {"title": "Rent", "amount": "10"}, format="json")
        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.data["message"], "Missing permission: manage_expenses")
