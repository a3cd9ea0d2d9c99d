# sales/tests/test_sale_reversal.py

from decimal import Decimal

from django.test import TestCase

from accounting.models import JournalEntry
from accounting.services import journal_entry_service
from accounting.services.exceptions import InsufficientBalance, NotFound
from accounting.tests.helpers import balance
from inventory.models import StockItem, StockMovement
from sales.models import Payment, Sale, SaleItem
from sales.services.payment_service import add_payment
from sales.services.sale_reversal import delete_sale
from sales.services.sale_service import create_sale
from sales.tests.helpers import optics_stock


class DeleteSaleTests(TestCase):
    """
    Deleting a sale restores stock, reverses every payment posting (and its
    Main rollup) and removes the sale, all at once.
    """

    def setUp(self):
        self.frame, self.lens = optics_stock()
        self.sale = create_sale(
            account="optics",
            items=[
                {"stock_item_id": self.frame.pk, "quantity": 2},
                {"stock_item_id": self.lens.pk, "quantity": 1},
            ],
            advance_payment="1000.00",
        )
        add_payment(sale_id=self.sale.pk, amount="500.00", method="cash")
        # total 4000, paid 1500

    def test_delete_restores_everything(self):
        snapshot = delete_sale(sale_id=self.sale.pk)

        self.assertEqual(snapshot["invoice_no"], self.sale.invoice_no)
        self.assertEqual(snapshot["refunded_amount"], "1500.00")
        self.assertEqual(len(snapshot["reversed_entries"]), 2)

        self.assertEqual(StockItem.objects.get(pk=self.frame.pk).quantity, 10)
        self.assertEqual(StockItem.objects.get(pk=self.lens.pk).quantity, 4)
        self.assertEqual(balance("optics"), Decimal("0.00"))
        self.assertEqual(balance("main"), Decimal("0.00"))

        self.assertFalse(Sale.objects.exists())
        self.assertFalse(SaleItem.objects.exists())
        self.assertFalse(Payment.objects.exists())
        self.assertFalse(JournalEntry.objects.exists())

        reversal_moves = StockMovement.objects.filter(reason=StockMovement.Reason.SALE_REVERSAL)
        self.assertEqual(reversal_moves.count(), 2)
        self.assertTrue(all(m.sale_reference == self.sale.invoice_no for m in reversal_moves))

    def test_delete_fails_whole_when_cash_already_spent(self):
        journal_entry_service.post_entry(
            account="optics", direction="expense", category="Frames", amount="1200.00"
        )

        with self.assertRaises(InsufficientBalance):
            delete_sale(sale_id=self.sale.pk)

        self.assertTrue(Sale.objects.filter(pk=self.sale.pk).exists())
        self.assertEqual(StockItem.objects.get(pk=self.frame.pk).quantity, 8)
        self.assertEqual(balance("optics"), Decimal("300.00"))
        self.assertEqual(Payment.objects.filter(sale=self.sale).count(), 2)

    def test_delete_delivered_sale(self):
        add_payment(sale_id=self.sale.pk, amount="2500.00", method="card")
        Sale.objects.filter(pk=self.sale.pk).update(status=Sale.STATUS_DELIVERED)

        delete_sale(sale_id=self.sale.pk)

        self.assertEqual(balance("optics"), Decimal("0.00"))

    def test_missing_sale(self):
        with self.assertRaises(NotFound):
            delete_sale(sale_id="not-a-uuid")
