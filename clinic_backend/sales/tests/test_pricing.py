# sales/tests/test_pricing.py

from decimal import Decimal

from django.test import SimpleTestCase

from accounting.services.exceptions import LedgerValidationError
from sales.services.pricing import compute_pricing


class PricingTests(SimpleTestCase):
    """
    total = subtotal + fitting - discount; discount never exceeds
    subtotal + fitting; percent wins over a fixed amount.
    """

    LINES = [(Decimal("1200.00"), 1), (Decimal("400.00"), 2)]

    def test_plain_total(self):
        p = compute_pricing(lines=self.LINES)

        self.assertEqual(p.subtotal, Decimal("2000.00"))
        self.assertEqual(p.discount_amount, Decimal("0.00"))
        self.assertEqual(p.total, Decimal("2000.00"))

    def test_fitting_and_fixed_discount(self):
        p = compute_pricing(lines=self.LINES, fitting_price="300", discount_amount="250.00")

        self.assertEqual(p.fitting_price, Decimal("300.00"))
        self.assertEqual(p.total, Decimal("2050.00"))
        self.assertIsNone(p.discount_percent)

    def test_percent_applies_to_subtotal_plus_fitting(self):
        p = compute_pricing(lines=self.LINES, fitting_price="500", discount_percent="10")

        self.assertEqual(p.discount_percent, Decimal("10.00"))
        self.assertEqual(p.discount_amount, Decimal("250.00"))
        self.assertEqual(p.total, Decimal("2250.00"))

    def test_percent_wins_over_amount(self):
        p = compute_pricing(lines=self.LINES, discount_percent="5", discount_amount="999")
        self.assertEqual(p.discount_amount, Decimal("100.00"))

    def test_percent_rounds_half_up(self):
        p = compute_pricing(lines=[(Decimal("0.05"), 1)], discount_percent="50")
        self.assertEqual(p.discount_amount, Decimal("0.03"))

    def test_discount_equal_to_gross_is_allowed(self):
        p = compute_pricing(lines=self.LINES, fitting_price="100", discount_amount="2100")
        self.assertEqual(p.total, Decimal("0.00"))

    def test_discount_over_gross_rejected(self):
        with self.assertRaises(LedgerValidationError):
            compute_pricing(lines=self.LINES, discount_amount="2000.01")

    def test_bad_percent_and_negatives_rejected(self):
        for kwargs in (
            {"discount_percent": "101"},
            {"discount_percent": "-1"},
            {"discount_amount": "-5"},
            {"fitting_price": "-1"},
        ):
            with self.assertRaises(LedgerValidationError):
                compute_pricing(lines=self.LINES, **kwargs)
