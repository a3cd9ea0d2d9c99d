# sales/tests/test_sale_service.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from accounting.models import JournalEntry
from accounting.services.exceptions import (
    InsufficientStock,
    InvalidPayment,
    LedgerValidationError,
)
from accounting.tests.helpers import balance, make_user
from inventory.models import StockItem, StockMovement
from sales.models import Payment, Sale
from sales.services.sale_service import create_sale
from sales.tests.helpers import optics_stock


class CreateSaleTests(TestCase):
    """
    GUARANTEES:
    - stock, pricing, advance and ledger credit happen together or not at all
    - only the advance is credited; due = total - advance
    """

    def setUp(self):
        self.seller = make_user(role="optics_seller")
        self.frame, self.lens = optics_stock()

    def _items(self, frame_qty=1, lens_qty=2):
        return [
            {"stock_item_id": self.frame.pk, "quantity": frame_qty},
            {"stock_item_id": self.lens.pk, "quantity": lens_qty},
        ]

    def _frame_only(self):
        return [{"stock_item_id": self.frame.pk, "quantity": 1}]

    def _qty(self, item):
        return StockItem.objects.get(pk=item.pk).quantity

    def test_sale_with_advance(self):
        sale = create_sale(
            account="optics",
            items=self._items(),
            fitting_price="200.00",
            discount_amount="100.00",
            advance_payment="1000.00",
            payment_method="bkash",
            transaction_ref="TX-1",
            customer_name="Ayesha",
            seller=self.seller,
        )

        self.assertTrue(sale.invoice_no.startswith("OPT-"))
        self.assertEqual(sale.subtotal_amount, Decimal("3500.00"))
        self.assertEqual(sale.total_amount, Decimal("3600.00"))
        self.assertEqual(sale.advance_payment, Decimal("1000.00"))
        self.assertEqual(sale.due_amount, Decimal("2600.00"))
        self.assertEqual(sale.status, Sale.STATUS_PENDING)
        self.assertEqual(sale.items.count(), 2)

        self.assertEqual(self._qty(self.frame), 9)
        self.assertEqual(self._qty(self.lens), 2)
        self.assertEqual(
            StockMovement.objects.filter(sale=sale, reason=StockMovement.Reason.SALE).count(), 2
        )

        payment = Payment.objects.get(sale=sale)
        self.assertTrue(payment.is_advance)
        self.assertEqual(payment.method, "bkash")
        self.assertEqual(payment.amount, Decimal("1000.00"))

        entry = payment.journal_entry
        self.assertEqual(entry.direction, JournalEntry.Direction.INCOME)
        self.assertEqual(entry.category_name, "Optics Sale Income")
        self.assertEqual(entry.reference_id, str(sale.pk))

        self.assertEqual(balance("optics"), Decimal("1000.00"))
        self.assertEqual(balance("main"), Decimal("1000.00"))

    def test_sale_without_advance_credits_nothing(self):
        sale = create_sale(account="optics", items=self._frame_only())

        self.assertEqual(sale.due_amount, sale.total_amount)
        self.assertFalse(sale.payments.exists())
        self.assertEqual(balance("optics"), Decimal("0.00"))

    def test_full_advance_leaves_no_due(self):
        sale = create_sale(
            account="optics", items=self._frame_only(), advance_payment="1500.00"
        )
        self.assertEqual(sale.due_amount, Decimal("0.00"))

    def test_insufficient_stock_creates_nothing(self):
        with self.assertRaises(InsufficientStock):
            create_sale(account="optics", items=self._items(1, 5), advance_payment="100")

        self.assertFalse(Sale.objects.exists())
        self.assertEqual(self._qty(self.frame), 10)
        self.assertEqual(balance("optics"), Decimal("0.00"))

    def test_second_sale_of_last_unit_is_rejected_without_side_effects(self):
        last = StockItem.objects.create(
            sku="LN-LAST", name="Toric Lens", kind="lens", unit_price="800.00", quantity=1
        )
        line = [{"stock_item_id": last.pk, "quantity": 1}]

        first = create_sale(account="optics", items=line, advance_payment="800.00")
        after_first = (balance("optics"), balance("main"), StockMovement.objects.count())

        with self.assertRaises(InsufficientStock) as ctx:
            create_sale(account="optics", items=line, advance_payment="800.00")

        self.assertEqual(
            ctx.exception.shortages[0],
            {"stock_item_id": last.pk, "name": "Toric Lens", "requested": 1, "available": 0},
        )
        self.assertEqual(self._qty(last), 0)
        self.assertEqual(
            (balance("optics"), balance("main"), StockMovement.objects.count()), after_first
        )
        self.assertEqual(list(Sale.objects.values_list("pk", flat=True)), [first.pk])
        self.assertEqual(Payment.objects.count(), 1)

    def test_main_account_cannot_sell(self):
        with self.assertRaises(LedgerValidationError):
            create_sale(account="main", items=self._frame_only())

        self.assertEqual(self._qty(self.frame), 10)
        self.assertFalse(Sale.objects.exists())

    def test_advance_over_total_rolls_back_stock(self):
        with self.assertRaises(InvalidPayment):
            create_sale(account="optics", items=self._frame_only(), advance_payment="1500.01")

        self.assertEqual(self._qty(self.frame), 10)
        self.assertFalse(Sale.objects.exists())
        self.assertFalse(StockMovement.objects.filter(reason=StockMovement.Reason.SALE).exists())

    def test_negative_advance_rejected(self):
        with self.assertRaises(InvalidPayment):
            create_sale(account="optics", items=self._items(), advance_payment="-1")

    def test_discount_over_gross_rolls_back_stock(self):
        with self.assertRaises(LedgerValidationError):
            create_sale(
                account="optics",
                items=self._frame_only(),
                fitting_price="100",
                discount_amount="1600.01",
            )

        self.assertEqual(self._qty(self.frame), 10)

    def test_invalid_method_with_advance_rejected(self):
        with self.assertRaises(LedgerValidationError):
            create_sale(
                account="optics", items=self._items(), advance_payment="10", payment_method="cheque"
            )
        self.assertEqual(self._qty(self.frame), 10)

    def test_pricing_fields_are_immutable(self):
        sale = create_sale(account="optics", items=self._frame_only())

        sale.total_amount = Decimal("1.00")
        with self.assertRaises(ValidationError):
            sale.save()

    def test_invoice_numbers_increment(self):
        first = create_sale(account="optics", items=self._frame_only())
        second = create_sale(account="optics", items=self._frame_only())

        self.assertEqual(first.invoice_no[:-4], second.invoice_no[:-4])
        self.assertEqual(int(second.invoice_no[-4:]), int(first.invoice_no[-4:]) + 1)
