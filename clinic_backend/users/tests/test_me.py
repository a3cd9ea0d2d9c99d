# users/tests/test_me.py

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from permissions.roles import (
    ALL_CAPABILITIES,
    CAP_LEDGER_POST,
    CAP_POS_SELL,
    effective_capabilities_for,
    user_has_capability,
)

User = get_user_model()


class MeAndCapabilityTests(TestCase):
    def test_role_capabilities(self):
        seller = User.objects.create_user(email="seller@clinic.test", password="x", role="optics_seller")
        accountant = User.objects.create_user(email="acc@clinic.test", password="x", role="accountant")

        self.assertTrue(user_has_capability(seller, CAP_POS_SELL))
        self.assertFalse(user_has_capability(seller, CAP_LEDGER_POST))
        self.assertTrue(user_has_capability(accountant, CAP_LEDGER_POST))

    def test_superuser_gets_everything(self):
        boss = User.objects.create_superuser(email="boss@clinic.test", password="x")
        self.assertEqual(effective_capabilities_for(boss), set(ALL_CAPABILITIES))

    def test_username_only_user_gets_local_email(self):
        user = User.objects.create_user(username="Nurse1", password="x")
        self.assertEqual(user.email, "nurse1@local.test")
        self.assertEqual(user.role, User.ROLE_RECEPTIONIST)

    def test_me_endpoint(self):
        user = User.objects.create_user(email="rx@clinic.test", password="x", role="medicine_seller")
        client = APIClient()
        client.force_authenticate(user)

        res = client.get("/api/auth/me/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["role"], "medicine_seller")
        self.assertIn("inventory.edit", res.data["capabilities"])
