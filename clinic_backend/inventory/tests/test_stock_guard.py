# inventory/tests/test_stock_guard.py

from django.core.exceptions import ValidationError
from django.test import TestCase

from accounting.services.exceptions import (
    InsufficientStock,
    LedgerValidationError,
    NotFound,
)
from accounting.tests.helpers import make_user
from inventory.models import StockItem, StockMovement
from inventory.services import stock_guard


class StockGuardTests(TestCase):
    """
    GUARANTEES:
    - all-or-nothing decrement; every short line is reported
    - duplicate lines are summed before the check
    - every change leaves one StockMovement
    """

    def setUp(self):
        self.user = make_user(role="optics_seller")
        self.frame = stock_guard.create_item(
            sku="FR-100", name="Metal Frame", kind="frame", unit_price="1200.00", quantity=5
        )
        self.lens = stock_guard.create_item(
            sku="LN-200", name="Blue Cut Lens", kind="lens", unit_price="800.00", quantity=2
        )

    def _qty(self, item):
        return StockItem.objects.get(pk=item.pk).quantity

    def test_create_item_records_opening_stock(self):
        self.assertEqual(self._qty(self.frame), 5)
        movement = StockMovement.objects.get(item=self.frame)
        self.assertEqual(movement.reason, StockMovement.Reason.RESTOCK)
        self.assertEqual(movement.new_quantity, 5)

    def test_reserve_decrements_every_line(self):
        reserved = stock_guard.reserve_and_decrement(
            [(self.frame.pk, 2), {"stock_item_id": self.lens.pk, "quantity": 2}],
            user=self.user,
        )

        self.assertEqual([r.quantity for r in reserved], [2, 2])
        self.assertEqual(self._qty(self.frame), 3)
        self.assertEqual(self._qty(self.lens), 0)
        self.assertEqual(
            StockMovement.objects.filter(reason=StockMovement.Reason.SALE).count(), 2
        )

    def test_shortage_on_one_line_decrements_nothing(self):
        with self.assertRaises(InsufficientStock) as ctx:
            stock_guard.reserve_and_decrement([(self.frame.pk, 1), (self.lens.pk, 3)])

        self.assertEqual(
            ctx.exception.shortages,
            [{"stock_item_id": self.lens.pk, "name": "Blue Cut Lens", "requested": 3, "available": 2}],
        )
        self.assertEqual(self._qty(self.frame), 5)
        self.assertEqual(self._qty(self.lens), 2)

    def test_all_short_lines_are_reported(self):
        with self.assertRaises(InsufficientStock) as ctx:
            stock_guard.reserve_and_decrement([(self.frame.pk, 6), (self.lens.pk, 3)])

        self.assertEqual(
            {s["stock_item_id"] for s in ctx.exception.shortages},
            {self.frame.pk, self.lens.pk},
        )

    def test_duplicate_lines_are_summed(self):
        with self.assertRaises(InsufficientStock):
            stock_guard.reserve_and_decrement([(self.lens.pk, 1), (self.lens.pk, 2)])

        stock_guard.reserve_and_decrement([(self.frame.pk, 2), (self.frame.pk, 3)])
        self.assertEqual(self._qty(self.frame), 0)

    def test_invalid_quantities_rejected(self):
        for qty in (0, -1, 1.5, "two", True):
            with self.assertRaises(LedgerValidationError):
                stock_guard.reserve_and_decrement([(self.frame.pk, qty)])
        self.assertEqual(self._qty(self.frame), 5)

    def test_empty_and_unknown_lines(self):
        with self.assertRaises(LedgerValidationError):
            stock_guard.reserve_and_decrement([])
        with self.assertRaises(NotFound):
            stock_guard.reserve_and_decrement([(999999, 1)])

    def test_inactive_item_cannot_be_sold(self):
        StockItem.objects.filter(pk=self.frame.pk).update(is_active=False)

        with self.assertRaises(LedgerValidationError):
            stock_guard.reserve_and_decrement([(self.frame.pk, 1)])

    def test_restore_puts_quantity_back(self):
        stock_guard.reserve_and_decrement([(self.frame.pk, 4)])
        stock_guard.restore_stock([(self.frame.pk, 4)], note="reversal")

        self.assertEqual(self._qty(self.frame), 5)
        self.assertTrue(
            StockMovement.objects.filter(reason=StockMovement.Reason.SALE_REVERSAL).exists()
        )

    def test_adjust_requires_note_and_never_goes_negative(self):
        with self.assertRaises(LedgerValidationError):
            stock_guard.adjust_stock(item_id=self.frame.pk, delta=-1, note="")

        with self.assertRaises(InsufficientStock):
            stock_guard.adjust_stock(item_id=self.frame.pk, delta=-6, note="Broken")

        stock_guard.adjust_stock(item_id=self.frame.pk, delta=-2, note="Broken in transit")
        self.assertEqual(self._qty(self.frame), 3)

    def test_movements_are_immutable(self):
        movement = StockMovement.objects.filter(item=self.frame).first()

        with self.assertRaises(ValidationError):
            movement.note = "edited"
            movement.save()
        with self.assertRaises(ValidationError):
            movement.delete()

    def test_duplicate_sku_rejected(self):
        with self.assertRaises(LedgerValidationError):
            stock_guard.create_item(sku="FR-100", name="Copy", kind="frame", unit_price=1)
