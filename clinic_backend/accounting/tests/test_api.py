# accounting/tests/test_api.py

from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from accounting.models import Category, JournalEntry
from accounting.tests.helpers import balance, make_user, seed_funds


class LedgerApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.accountant = make_user(role="accountant")
        self.receptionist = make_user(role="receptionist")
        self.client.force_authenticate(self.accountant)

    def _post_entry(self, **overrides):
        payload = {
            "account": "hospital",
            "direction": "income",
            "category": "Consultation",
            "amount": "300.00",
            "description": "OPD",
        }
        payload.update(overrides)
        return self.client.post("/api/accounting/journal-entries/", payload, format="json")

    def test_post_entry_returns_entity_and_balance(self):
        res = self._post_entry()

        self.assertEqual(res.status_code, 201)
        self.assertTrue(res.data["ok"])
        self.assertEqual(res.data["entity"]["account"], "hospital")
        self.assertEqual(res.data["entity"]["category_name"], "Consultation")
        self.assertIsNotNone(res.data["entity"]["rollup_transaction_no"])
        self.assertEqual(res.data["account_balance"], "300.00")

    def test_expense_over_balance_is_conflict(self):
        res = self._post_entry(direction="expense", amount="1.00")

        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data["error_kind"], "InsufficientBalance")
        self.assertFalse(res.data["retryable"])

    def test_category_by_id(self):
        category = Category.objects.create(name="Lab", direction="income")

        res = self._post_entry(category=str(category.pk))

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["entity"]["category"], category.pk)

    def test_edit_and_delete(self):
        entry_id = self._post_entry().data["entity"]["id"]

        res = self.client.patch(
            f"/api/accounting/journal-entries/{entry_id}/", {"amount": "450.00"}, format="json"
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["account_balance"], "450.00")
        self.assertEqual(balance("main"), Decimal("450.00"))

        res = self.client.delete(f"/api/accounting/journal-entries/{entry_id}/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["account_balance"], "0.00")
        self.assertFalse(JournalEntry.objects.exists())

    def test_edit_rollup_is_rejected(self):
        entry = self._post_entry().data["entity"]
        rollup = JournalEntry.objects.get(transaction_no=entry["rollup_transaction_no"])

        res = self.client.patch(
            f"/api/accounting/journal-entries/{rollup.pk}/", {"amount": "1.00"}, format="json"
        )

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error_kind"], "ValidationError")

    def test_list_filters(self):
        self._post_entry()
        self._post_entry(account="optics", category="Eye Test")

        res = self.client.get("/api/accounting/journal-entries/?account=optics&is_rollup=false")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["account"], "optics")

    def test_fund_transfers(self):
        res = self.client.post(
            "/api/accounting/fund-transfers/",
            {"account": "medicine", "direction": "fund_in", "investor_name": "Partner A", "amount": "900"},
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        transfer_id = res.data["entity"]["id"]

        res = self.client.post(
            "/api/accounting/fund-transfers/",
            {"account": "medicine", "direction": "fund_out", "investor_name": "Partner A", "amount": "901"},
            format="json",
        )
        self.assertEqual(res.status_code, 409)

        res = self.client.patch(
            f"/api/accounting/fund-transfers/{transfer_id}/", {"amount": "600"}, format="json"
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["account_balance"], "600.00")

    def test_accounts_summary_and_verify(self):
        seed_funds("optics", "100.00")

        accounts = self.client.get("/api/accounting/accounts/")
        self.assertEqual(accounts.status_code, 200)
        self.assertEqual(len(accounts.data), 5)

        summary = self.client.get("/api/accounting/accounts/optics/summary/")
        self.assertEqual(summary.status_code, 200)
        self.assertEqual(summary.data["total_fund_in"], "100.00")

        verify = self.client.get("/api/accounting/verify/")
        self.assertTrue(verify.data["ok"])

    def test_categories(self):
        res = self.client.post(
            "/api/accounting/categories/", {"name": "Salary", "direction": "expense"}, format="json"
        )
        self.assertEqual(res.status_code, 201)

        dup = self.client.post(
            "/api/accounting/categories/", {"name": "salary", "direction": "expense"}, format="json"
        )
        self.assertEqual(dup.status_code, 400)

        res = self.client.patch(
            f"/api/accounting/categories/{res.data['id']}/", {"is_active": False}, format="json"
        )
        self.assertEqual(res.status_code, 200)
        self.assertFalse(res.data["is_active"])

    def test_category_patch_with_malformed_id_is_404(self):
        for category_id in ("abc", "999999"):
            res = self.client.patch(
                f"/api/accounting/categories/{category_id}/", {"is_active": False}, format="json"
            )
            self.assertEqual(res.status_code, 404, category_id)
            self.assertEqual(res.data["error_kind"], "NotFound")

    def test_receptionist_has_no_ledger_access(self):
        self.client.force_authenticate(self.receptionist)

        self.assertEqual(self.client.get("/api/accounting/journal-entries/").status_code, 403)
        self.assertEqual(self._post_entry().status_code, 403)

    def test_anonymous_is_rejected(self):
        self.client.force_authenticate(None)
        self.assertEqual(self.client.get("/api/accounting/accounts/").status_code, 401)
