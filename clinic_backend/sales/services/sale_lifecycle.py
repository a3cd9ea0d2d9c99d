# sales/services/sale_lifecycle.py

"""
SALE LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for Sale entities:

    pending -> ready -> delivered

DESIGN PRINCIPLES:
- delivered requires due_amount == 0 (PaymentIncomplete otherwise)
- Status changes never touch money or stock
"""

from __future__ import annotations

import logging

from django.db import transaction

from accounting.services.exceptions import InvalidStatusTransition, PaymentIncomplete
from sales.models import Sale
from sales.services.locking import lock_sale

logger = logging.getLogger(__name__)


# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Sale.STATUS_DELIVERED,
}

ALLOWED_TRANSITIONS = {
    Sale.STATUS_PENDING: {Sale.STATUS_READY},
    Sale.STATUS_READY: {Sale.STATUS_DELIVERED},
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, sale: Sale, target_status: str):
    if not can_transition(
        from_status=sale.status,
        to_status=target_status,
    ):
        raise InvalidStatusTransition(
            f"Sale {sale.invoice_no} cannot transition from "
            f"'{sale.status}' to '{target_status}'"
        )

    if target_status == Sale.STATUS_DELIVERED and sale.due_amount != 0:
        raise PaymentIncomplete(
            f"Sale {sale.invoice_no} still has {sale.due_amount} due; "
            "collect the full payment before delivery"
        )


@transaction.atomic
def update_status(*, sale_id, new_status: str, user=None) -> Sale:
    sale = lock_sale(sale_id)

    new_status = (new_status or "").strip().lower()
    validate_transition(sale=sale, target_status=new_status)

    previous = sale.status
    sale.status = new_status
    sale.save(update_fields=["status", "updated_at"])

    logger.info(
        "Sale status updated",
        extra={
            "invoice_no": sale.invoice_no,
            "from_status": previous,
            "to_status": new_status,
            "updated_by": str(getattr(user, "pk", "") or ""),
        },
    )
    return sale
