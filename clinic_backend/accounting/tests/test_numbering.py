# accounting/tests/test_numbering.py

from datetime import date

from django.test import TestCase

from accounting.models import JournalEntry, NumberSequence
from accounting.services import numbering
from accounting.tests.helpers import account


class NumberingTests(TestCase):
    """
    GUARANTEES:
    - numbers are per scope (prefix + day) and strictly increasing
    - formats: journal <ACC><I|E>, fund <ACC>F<I|O>, invoice <INV>
    """

    def test_next_number_increments_per_scope(self):
        self.assertEqual(numbering.next_number("HI-20240101"), 1)
        self.assertEqual(numbering.next_number("HI-20240101"), 2)
        self.assertEqual(numbering.next_number("HE-20240101"), 1)
        self.assertEqual(
            NumberSequence.objects.get(scope="HI-20240101").last_value, 2
        )

    def test_blank_scope_rejected(self):
        with self.assertRaises(ValueError):
            numbering.next_number("  ")

    def test_transaction_number_format(self):
        optics = account("optics")
        day = date(2024, 3, 5)

        first = numbering.next_transaction_no(optics, JournalEntry.Direction.INCOME, day)
        second = numbering.next_transaction_no(optics, JournalEntry.Direction.INCOME, day)
        expense = numbering.next_transaction_no(optics, JournalEntry.Direction.EXPENSE, day)

        self.assertEqual(first, "OI-20240305-0001")
        self.assertEqual(second, "OI-20240305-0002")
        self.assertEqual(expense, "OE-20240305-0001")

    def test_voucher_and_invoice_formats(self):
        operation = account("operation")
        day = date(2024, 3, 5)

        self.assertEqual(
            numbering.next_voucher_no(operation, "fund_in", day), "OPFI-20240305-0001"
        )
        self.assertEqual(
            numbering.next_voucher_no(operation, "fund_out", day), "OPFO-20240305-0001"
        )
        self.assertEqual(numbering.next_invoice_no(operation, day), "OPR-20240305-0001")
        self.assertEqual(numbering.next_invoice_no(account("main"), day), "MAIN-20240305-0001")
