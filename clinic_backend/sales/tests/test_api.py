# sales/tests/test_api.py

from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from accounting.tests.helpers import balance, make_user
from inventory.models import StockItem
from sales.tests.helpers import optics_stock


class SaleApiTests(TestCase):
    """
    POS endpoints return {ok, entity, account_balance} or
    {ok: false, error_kind, detail} with a mapped HTTP status.
    """

    def setUp(self):
        self.client = APIClient()
        self.seller = make_user(role="optics_seller")
        self.admin = make_user(role="admin")
        self.receptionist = make_user(role="receptionist")
        self.frame, self.lens = optics_stock()

    def _create(self, **overrides):
        payload = {
            "account": "optics",
            "items": [
                {"stock_item_id": self.frame.pk, "quantity": 1},
                {"stock_item_id": self.lens.pk, "quantity": 2},
            ],
            "fitting_price": "150.00",
            "discount_percent": "10",
            "advance_payment": "1000.00",
            "payment_method": "cash",
            "customer_name": "Karim",
        }
        payload.update(overrides)
        return self.client.post("/api/sales/", payload, format="json")

    def test_create_sale(self):
        self.client.force_authenticate(self.seller)

        res = self._create()

        self.assertEqual(res.status_code, 201)
        self.assertTrue(res.data["ok"])
        sale = res.data["entity"]
        # (1500 + 2000 + 150) * 0.9
        self.assertEqual(sale["total_amount"], "3285.00")
        self.assertEqual(sale["due_amount"], "2285.00")
        self.assertEqual(len(sale["items"]), 2)
        self.assertEqual(len(sale["payments"]), 1)
        self.assertTrue(sale["payments"][0]["is_advance"])
        self.assertEqual(res.data["account_balance"], "1000.00")

    def test_create_sale_insufficient_stock(self):
        self.client.force_authenticate(self.seller)

        res = self._create(items=[{"stock_item_id": self.lens.pk, "quantity": 9}])

        self.assertEqual(res.status_code, 409)
        self.assertFalse(res.data["ok"])
        self.assertEqual(res.data["error_kind"], "InsufficientStock")
        self.assertEqual(StockItem.objects.get(pk=self.lens.pk).quantity, 4)

    def test_create_sale_advance_over_total(self):
        self.client.force_authenticate(self.seller)

        res = self._create(advance_payment="99999.00")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error_kind"], "InvalidPayment")

    def test_collect_and_deliver(self):
        self.client.force_authenticate(self.seller)
        sale_id = self._create().data["entity"]["id"]

        over = self.client.post(f"/api/sales/{sale_id}/payments/", {"amount": "5000.00"}, format="json")
        self.assertEqual(over.status_code, 400)
        self.assertEqual(over.data["error_kind"], "InvalidPayment")

        self.client.post(f"/api/sales/{sale_id}/status/", {"status": "ready"}, format="json")
        early = self.client.post(f"/api/sales/{sale_id}/status/", {"status": "delivered"}, format="json")
        self.assertEqual(early.status_code, 409)
        self.assertEqual(early.data["error_kind"], "PaymentIncomplete")

        paid = self.client.post(
            f"/api/sales/{sale_id}/payments/", {"amount": "2285.00", "method": "bkash"}, format="json"
        )
        self.assertEqual(paid.status_code, 201)
        self.assertEqual(paid.data["account_balance"], "3285.00")

        done = self.client.post(f"/api/sales/{sale_id}/status/", {"status": "delivered"}, format="json")
        self.assertEqual(done.status_code, 200)
        self.assertEqual(done.data["entity"]["status"], "delivered")

    def test_delete_requires_void_capability(self):
        self.client.force_authenticate(self.seller)
        sale_id = self._create().data["entity"]["id"]

        self.assertEqual(self.client.delete(f"/api/sales/{sale_id}/").status_code, 403)

        self.client.force_authenticate(self.admin)
        res = self.client.delete(f"/api/sales/{sale_id}/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["entity"]["invoice_no"][:4], "OPT-")
        self.assertEqual(balance("optics"), Decimal("0.00"))

    def test_receptionist_cannot_sell_but_can_collect(self):
        self.client.force_authenticate(self.seller)
        sale_id = self._create().data["entity"]["id"]

        self.client.force_authenticate(self.receptionist)
        self.assertEqual(self._create().status_code, 403)

        res = self.client.post(f"/api/sales/{sale_id}/payments/", {"amount": "100.00"}, format="json")
        self.assertEqual(res.status_code, 201)

    def test_list_and_filter(self):
        self.client.force_authenticate(self.seller)
        self._create()

        res = self.client.get("/api/sales/?status=pending&account=optics")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 1)

    def test_unknown_sale_is_404(self):
        self.client.force_authenticate(self.admin)
        res = self.client.delete("/api/sales/00000000-0000-0000-0000-000000000000/")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error_kind"], "NotFound")

    def test_date_filters(self):
        self.client.force_authenticate(self.seller)
        self._create()

        today = self.client.get("/api/sales/?date_from=2000-01-01&date_to=2999-12-31")
        self.assertEqual(today.status_code, 200)
        self.assertEqual(today.data["count"], 1)

        before = self.client.get("/api/sales/?date_to=2000-01-01")
        self.assertEqual(before.data["count"], 0)

    def test_malformed_date_filter_is_400(self):
        self.client.force_authenticate(self.seller)

        for query in ("date_from=not-a-date", "date_to=2024-02-30"):
            res = self.client.get(f"/api/sales/?{query}")
            self.assertEqual(res.status_code, 400, query)
