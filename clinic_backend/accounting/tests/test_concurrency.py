# accounting/tests/test_concurrency.py

"""
Row-lock behaviour under real concurrent transactions.

Runs only on databases with SELECT ... FOR UPDATE (PostgreSQL via
TEST_DATABASE_URL); skipped on SQLite. The same rules are covered serially
in test_fund_transfers and sales.tests.test_sale_service.
"""

import threading
from decimal import Decimal

from django.db import connection
from django.test import TransactionTestCase, skipUnlessDBFeature

from accounting.models import FundTransfer, JournalEntry
from accounting.services import fund_transfer_service
from accounting.services.ledger_service import ensure_accounts
from accounting.tests.helpers import balance
from engine import operations
from inventory.services.stock_guard import create_item
from sales.models import Sale


def _run_parallel(target, count):
    barrier = threading.Barrier(count)
    results = []
    lock = threading.Lock()

    def worker():
        barrier.wait()
        try:
            result = target()
            with lock:
                results.append(result)
        finally:
            connection.close()

    threads = [threading.Thread(target=worker) for _ in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return results


@skipUnlessDBFeature("has_select_for_update")
class ConcurrentPostingTests(TransactionTestCase):
    def setUp(self):
        ensure_accounts()
        fund_transfer_service.fund_in(account="optics", investor_name="Seed", amount="100.00")

    def test_parallel_expenses_never_overdraw(self):
        results = _run_parallel(
            lambda: operations.post_journal_entry(
                account="optics", direction="expense", category="Frames", amount="30.00"
            ),
            count=6,
        )

        succeeded = [r for r in results if r.ok]
        failed = [r for r in results if not r.ok]

        self.assertEqual(len(succeeded), 3)
        self.assertTrue(
            all(r.error_kind in {"InsufficientBalance", "ConcurrencyConflict"} for r in failed)
        )
        self.assertEqual(balance("optics"), Decimal("10.00"))
        self.assertEqual(balance("main"), Decimal("10.00"))

    def test_parallel_incomes_all_land_with_unique_numbers(self):
        results = _run_parallel(
            lambda: operations.post_journal_entry(
                account="optics", direction="income", category="Eye Test", amount="5.00"
            ),
            count=8,
        )

        ok = [r for r in results if r.ok]
        self.assertEqual(balance("optics"), Decimal("100.00") + Decimal("5.00") * len(ok))

        numbers = list(
            JournalEntry.objects.filter(account__kind="optics").values_list("transaction_no", flat=True)
        )
        self.assertEqual(len(numbers), len(set(numbers)))

    def test_parallel_fund_outs_past_balance(self):
        results = _run_parallel(
            lambda: operations.fund_out(account="optics", investor_name="Partner", amount="40.00"),
            count=5,
        )

        succeeded = [r for r in results if r.ok]
        self.assertEqual(len(succeeded), 2)
        self.assertTrue(
            all(r.error_kind in {"InsufficientBalance", "ConcurrencyConflict"} for r in results if not r.ok)
        )
        self.assertEqual(balance("optics"), Decimal("20.00"))
        self.assertEqual(balance("main"), Decimal("20.00"))
        self.assertEqual(
            FundTransfer.objects.filter(
                account__kind="optics", direction="fund_out", is_rollup=False
            ).count(),
            2,
        )


@skipUnlessDBFeature("has_select_for_update")
class ConcurrentLastUnitSaleTests(TransactionTestCase):
    def setUp(self):
        ensure_accounts()
        self.item = create_item(
            sku="LN-ONE", name="Toric Lens", kind="lens", unit_price="800.00", quantity=1
        )

    def test_exactly_one_sale_gets_the_last_unit(self):
        results = _run_parallel(
            lambda: operations.create_sale(
                account="optics",
                items=[{"stock_item_id": self.item.pk, "quantity": 1}],
                advance_payment="800.00",
            ),
            count=2,
        )

        succeeded = [r for r in results if r.ok]
        failed = [r for r in results if not r.ok]

        self.assertEqual(len(succeeded), 1)
        self.assertEqual([r.error_kind for r in failed], ["InsufficientStock"])

        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 0)
        self.assertEqual(Sale.objects.count(), 1)
        self.assertEqual(balance("optics"), Decimal("800.00"))
        self.assertEqual(balance("main"), Decimal("800.00"))
