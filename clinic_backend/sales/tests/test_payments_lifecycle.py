# sales/tests/test_payments_lifecycle.py

from decimal import Decimal

from django.test import TestCase

from accounting.services.exceptions import (
    InvalidPayment,
    InvalidStatusTransition,
    LedgerValidationError,
    NotFound,
    PaymentIncomplete,
)
from accounting.tests.helpers import balance, make_user
from sales.models import Payment, Sale
from sales.services.payment_service import add_payment
from sales.services.sale_lifecycle import can_transition, update_status
from sales.services.sale_service import create_sale
from sales.tests.helpers import optics_stock


class AddPaymentTests(TestCase):
    """
    GUARANTEES:
    - 0 < amount <= due, checked on the locked sale
    - each payment credits the account and reduces due; status untouched
    """

    def setUp(self):
        self.user = make_user(role="receptionist")
        frame, _ = optics_stock()
        self.sale = create_sale(
            account="optics",
            items=[{"stock_item_id": frame.pk, "quantity": 1}],
            advance_payment="500.00",
        )
        # total 1500, due 1000, optics = 500

    def test_partial_then_final_payment(self):
        add_payment(sale_id=self.sale.pk, amount="400.00", method="cash", user=self.user)
        payment = add_payment(sale_id=self.sale.pk, amount="600.00", method="card", transaction_ref="C-9")

        self.sale.refresh_from_db()
        self.assertEqual(self.sale.due_amount, Decimal("0.00"))
        self.assertEqual(self.sale.amount_paid, Decimal("1500.00"))
        self.assertEqual(self.sale.status, Sale.STATUS_PENDING)
        self.assertFalse(payment.is_advance)
        self.assertEqual(payment.transaction_ref, "C-9")
        self.assertEqual(Payment.objects.filter(sale=self.sale).count(), 3)
        self.assertEqual(balance("optics"), Decimal("1500.00"))
        self.assertEqual(balance("main"), Decimal("1500.00"))

    def test_overpayment_rejected(self):
        with self.assertRaises(InvalidPayment):
            add_payment(sale_id=self.sale.pk, amount="1000.01", method="cash")

        self.sale.refresh_from_db()
        self.assertEqual(self.sale.due_amount, Decimal("1000.00"))
        self.assertEqual(balance("optics"), Decimal("500.00"))

    def test_non_positive_amount_rejected(self):
        for amount in (0, "-10", "x"):
            with self.assertRaises(InvalidPayment):
                add_payment(sale_id=self.sale.pk, amount=amount, method="cash")

    def test_unknown_method_rejected(self):
        with self.assertRaises(LedgerValidationError):
            add_payment(sale_id=self.sale.pk, amount=10, method="cheque")

    def test_paid_sale_rejects_any_payment(self):
        add_payment(sale_id=self.sale.pk, amount="1000.00", method="nagad")

        with self.assertRaises(InvalidPayment):
            add_payment(sale_id=self.sale.pk, amount="0.01", method="cash")

    def test_missing_sale(self):
        with self.assertRaises(NotFound):
            add_payment(sale_id="00000000-0000-0000-0000-000000000000", amount=1, method="cash")


class SaleLifecycleTests(TestCase):
    """
    pending -> ready -> delivered; delivered requires due == 0.
    """

    def setUp(self):
        frame, _ = optics_stock()
        self.sale = create_sale(
            account="optics",
            items=[{"stock_item_id": frame.pk, "quantity": 1}],
            advance_payment="500.00",
        )

    def test_transition_table(self):
        self.assertTrue(can_transition(from_status="pending", to_status="ready"))
        self.assertTrue(can_transition(from_status="ready", to_status="delivered"))
        self.assertFalse(can_transition(from_status="pending", to_status="delivered"))
        self.assertFalse(can_transition(from_status="delivered", to_status="ready"))
        self.assertFalse(can_transition(from_status="ready", to_status="pending"))

    def test_ready_is_always_allowed_from_pending(self):
        sale = update_status(sale_id=self.sale.pk, new_status="ready")
        self.assertEqual(sale.status, Sale.STATUS_READY)

    def test_delivery_requires_full_payment(self):
        update_status(sale_id=self.sale.pk, new_status="ready")

        with self.assertRaises(PaymentIncomplete):
            update_status(sale_id=self.sale.pk, new_status="delivered")

        add_payment(sale_id=self.sale.pk, amount="1000.00", method="cash")
        sale = update_status(sale_id=self.sale.pk, new_status="delivered")
        self.assertEqual(sale.status, Sale.STATUS_DELIVERED)

    def test_skipping_ready_is_rejected(self):
        add_payment(sale_id=self.sale.pk, amount="1000.00", method="cash")

        with self.assertRaises(InvalidStatusTransition):
            update_status(sale_id=self.sale.pk, new_status="delivered")

    def test_status_change_does_not_touch_money(self):
        update_status(sale_id=self.sale.pk, new_status="ready")
        self.assertEqual(balance("optics"), Decimal("500.00"))
