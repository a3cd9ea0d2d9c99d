# sales/services/sale_service.py

"""
======================================================
PATH: sales/services/sale_service.py
======================================================
POS SALE ENGINE

SINGLE SOURCE OF TRUTH for:
- Sale + SaleItem creation
- Stock decrement (through the Stock Guard)
- Pricing (subtotal, fitting, discount, total)
- Advance payment + its account credit

GUARANTEES (one transaction, all or nothing):
1. Stock Guard decrements every line or raises InsufficientStock
2. discount <= subtotal + fitting_price (ValidationError otherwise)
3. 0 <= advance_payment <= total (InvalidPayment otherwise)
4. due_amount = total - advance_payment
5. the account is never Main (ValidationError)
6. invoice_no allocated; an advance > 0 becomes Payment(is_advance=True)
   and ONLY that cash is credited to the account
"""

from __future__ import annotations

import logging

from django.db import transaction

from accounting.services import ledger_service, numbering
from accounting.services.exceptions import InvalidPayment, LedgerValidationError
from inventory.models import StockMovement
from inventory.services.stock_guard import reserve_and_decrement
from sales.models import Sale, SaleItem
from sales.services.payment_service import normalize_method, record_payment
from sales.services.pricing import compute_pricing, line_total

logger = logging.getLogger(__name__)


@transaction.atomic
def create_sale(
    *,
    account,
    items,
    fitting_price=None,
    discount_percent=None,
    discount_amount=None,
    advance_payment=None,
    payment_method: str = "cash",
    transaction_ref: str = "",
    payment_notes: str = "",
    customer_name: str = "",
    customer_phone: str = "",
    notes: str = "",
    seller=None,
) -> Sale:
    account = ledger_service.get_account(account)
    if account.is_main:
        raise LedgerValidationError("Sales are recorded on a sub-account, not on Main")

    try:
        advance = ledger_service.money(advance_payment)
    except LedgerValidationError as exc:
        raise InvalidPayment(str(exc)) from exc
    if advance < 0:
        raise InvalidPayment("advance_payment cannot be negative")

    method = normalize_method(payment_method) if advance > 0 else (payment_method or "cash")

    # 1) stock (fails fast, nothing decremented on shortage)
    reserved = reserve_and_decrement(items, user=seller)

    # 2-3) pricing
    pricing = compute_pricing(
        lines=[(line.item.unit_price, line.quantity) for line in reserved],
        fitting_price=fitting_price,
        discount_percent=discount_percent,
        discount_amount=discount_amount,
    )

    # 4) advance bound
    if advance > pricing.total:
        raise InvalidPayment(
            f"Advance payment {advance} exceeds the sale total {pricing.total}"
        )

    # 5-6) persist
    sale = Sale.objects.create(
        invoice_no=numbering.next_invoice_no(account),
        account=account,
        customer_name=(customer_name or "").strip(),
        customer_phone=(customer_phone or "").strip(),
        fitting_price=pricing.fitting_price,
        subtotal_amount=pricing.subtotal,
        discount_percent=pricing.discount_percent,
        discount_amount=pricing.discount_amount,
        total_amount=pricing.total,
        advance_payment=advance,
        due_amount=pricing.total - advance,
        status=Sale.STATUS_PENDING,
        seller=seller,
        notes=(notes or "").strip(),
    )

    SaleItem.objects.bulk_create(
        [
            SaleItem(
                sale=sale,
                stock_item=line.item,
                item_name=line.item.name,
                item_kind=line.item.kind,
                quantity=line.quantity,
                unit_price=line.item.unit_price,
                total_price=line_total(line.item.unit_price, line.quantity),
            )
            for line in reserved
        ]
    )

    StockMovement.objects.filter(pk__in=[line.movement.pk for line in reserved]).update(
        sale=sale,
        sale_reference=sale.invoice_no,
    )

    if advance > 0:
        record_payment(
            sale=sale,
            amount=advance,
            method=method,
            transaction_ref=transaction_ref,
            notes=payment_notes,
            is_advance=True,
            user=seller,
        )

    logger.info(
        "Sale created",
        extra={
            "invoice_no": sale.invoice_no,
            "account_kind": account.kind,
            "total": str(sale.total_amount),
            "advance": str(advance),
            "due": str(sale.due_amount),
            "lines": len(reserved),
        },
    )
    return sale
