# sales/services/sale_reversal.py

"""
SALE REVERSAL (DELETE WITH FULL RESTORATION)

Atomically:
- restores every sold quantity (sale_reversal stock movements)
- reverses each payment's income posting (and its Main rollup)
- deletes payments, items and the sale

Fails as a whole (e.g. InsufficientBalance when the account has already
spent the collected cash) and leaves nothing half-reversed.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from accounting.models import JournalEntry
from accounting.services import ledger_service, reversal
from inventory.services.stock_guard import restore_stock
from sales.services.locking import lock_sale

logger = logging.getLogger(__name__)


@transaction.atomic
def delete_sale(*, sale_id, user=None) -> dict:
    sale = lock_sale(sale_id)

    items = list(sale.items.select_related("stock_item"))
    payments = list(sale.payments.all())

    if items:
        restore_stock(
            [(item.stock_item_id, item.quantity) for item in items],
            user=user,
            sale=sale,
            note=f"Reversal of {sale.invoice_no}",
        )

    entry_ids = [p.journal_entry_id for p in payments if p.journal_entry_id]
    entries = list(
        JournalEntry.objects.select_for_update(of=("self",))
        .select_related("account", "linked_main_voucher")
        .filter(pk__in=entry_ids)
        .order_by("pk")
    )

    ledger_service.lock_accounts(sale.account, ledger_service.get_main_account())

    reversed_entries = [reversal.reverse_and_remove_entry(entry) for entry in entries]

    snapshot = {
        "id": str(sale.pk),
        "invoice_no": sale.invoice_no,
        "account": sale.account.kind,
        "total_amount": str(sale.total_amount),
        "refunded_amount": str(sum((p.amount for p in payments), Decimal("0.00"))),
        "restored_items": [
            {"stock_item_id": item.stock_item_id, "quantity": item.quantity}
            for item in items
        ],
        "reversed_entries": [e["transaction_no"] for e in reversed_entries],
    }

    sale.payments.all().delete()
    sale.items.all().delete()
    sale.delete()

    logger.info(
        "Sale deleted",
        extra={
            "invoice_no": snapshot["invoice_no"],
            "refunded_amount": snapshot["refunded_amount"],
            "deleted_by": str(getattr(user, "pk", "") or ""),
        },
    )
    return snapshot
