# sales/services/payment_service.py

"""
PAYMENT RECORDER

Records money received against a sale's due balance.

RULES:
- amount must be > 0 and <= due_amount, checked on the LOCKED sale row
- each payment credits the sale's account via its own income JournalEntry
  (category "<Account> Sale Income", owned by the sale)
- due_amount is reduced in the same transaction; status is untouched
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from accounting.services import journal_entry_service
from accounting.services.exceptions import InvalidPayment, LedgerValidationError
from accounting.services.ledger_service import money
from sales.models import Payment, Sale
from sales.services.locking import lock_sale

logger = logging.getLogger("payments")

SALE_REFERENCE_TYPE = "sale"


def normalize_method(value) -> str:
    method = (str(value or "")).strip().lower()
    valid = {choice for choice, _ in Payment.METHOD_CHOICES}
    if method not in valid:
        raise LedgerValidationError(
            f"Invalid payment method '{value}'. Use one of: {', '.join(sorted(valid))}"
        )
    return method


def income_category_for(sale: Sale) -> str:
    return f"{sale.account.get_kind_display()} Sale Income"


def record_payment(
    *,
    sale: Sale,
    amount: Decimal,
    method: str,
    transaction_ref: str = "",
    notes: str = "",
    is_advance: bool = False,
    user=None,
) -> Payment:
    """
    Insert the Payment row and post its income entry. Caller holds the sale
    lock and has validated the amount against the due.
    """
    label = "Advance" if is_advance else "Payment"
    entry = journal_entry_service.post_entry(
        account=sale.account,
        direction="income",
        category=income_category_for(sale),
        amount=amount,
        description=f"{label} for {sale.invoice_no}",
        user=user,
        reference_type=SALE_REFERENCE_TYPE,
        reference_id=str(sale.pk),
    )

    return Payment.objects.create(
        sale=sale,
        amount=amount,
        method=method,
        transaction_ref=(transaction_ref or "").strip(),
        notes=(notes or "").strip(),
        is_advance=is_advance,
        received_by=user,
        journal_entry=entry,
    )


@transaction.atomic
def add_payment(*, sale_id, amount, method, transaction_ref: str = "", notes: str = "", user=None) -> Payment:
    logger.info(
        "Initiating sale payment",
        extra={"sale_id": str(sale_id), "amount": str(amount), "method": method},
    )

    try:
        amount = money(amount)
    except LedgerValidationError as exc:
        raise InvalidPayment(str(exc)) from exc

    method = normalize_method(method)
    sale = lock_sale(sale_id)

    if amount <= 0:
        raise InvalidPayment("Payment amount must be greater than 0")
    if amount > sale.due_amount:
        logger.warning(
            "Payment rejected: exceeds due",
            extra={"invoice_no": sale.invoice_no, "amount": str(amount), "due": str(sale.due_amount)},
        )
        raise InvalidPayment(
            f"Payment {amount} exceeds the due amount {sale.due_amount} on {sale.invoice_no}"
        )

    payment = record_payment(
        sale=sale,
        amount=amount,
        method=method,
        transaction_ref=transaction_ref,
        notes=notes,
        user=user,
    )

    sale.due_amount = sale.due_amount - amount
    sale.save(update_fields=["due_amount", "updated_at"])

    logger.info(
        "Sale payment recorded",
        extra={
            "invoice_no": sale.invoice_no,
            "payment_id": str(payment.pk),
            "amount": str(amount),
            "due": str(sale.due_amount),
        },
    )
    return payment
