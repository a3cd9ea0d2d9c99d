# sales/services/pricing.py

"""
SALE PRICING RULES

subtotal        = Σ quantity × unit_price
discount_amount = (subtotal + fitting_price) × percent / 100   (percent given)
                = fixed amount                                 (otherwise)
total           = subtotal + fitting_price − discount_amount

RULES:
- fitting_price >= 0, discount >= 0, percent in [0, 100]
- discount_amount may never exceed subtotal + fitting_price
- subtotal + fitting_price stays below SALE_LIMIT
- A percent wins over a fixed amount when both are supplied
- Pure functions: no database access
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from accounting.services.exceptions import LedgerValidationError
from accounting.services.ledger_service import money

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

# Sale money columns are DecimalField(max_digits=12, decimal_places=2)
SALE_LIMIT = Decimal("10000000000")


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    fitting_price: Decimal
    discount_percent: Decimal | None
    discount_amount: Decimal
    total: Decimal


def line_total(unit_price, quantity: int) -> Decimal:
    return (money(unit_price) * quantity).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def compute_pricing(*, lines, fitting_price=None, discount_percent=None, discount_amount=None) -> PriceBreakdown:
    """
    lines: iterable of (unit_price, quantity)
    """
    subtotal = sum((line_total(price, qty) for price, qty in lines), ZERO)

    fitting = money(fitting_price, limit=SALE_LIMIT)
    if fitting < ZERO:
        raise LedgerValidationError("fitting_price cannot be negative")

    gross = subtotal + fitting
    if gross >= SALE_LIMIT:
        raise LedgerValidationError(f"Sale value {gross} exceeds the limit {SALE_LIMIT}")
    percent = None

    if discount_percent not in (None, ""):
        percent = money(discount_percent)
        if percent < ZERO or percent > HUNDRED:
            raise LedgerValidationError("discount_percent must be between 0 and 100")
        discount = (gross * percent / HUNDRED).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    else:
        discount = money(discount_amount, limit=SALE_LIMIT)
        if discount < ZERO:
            raise LedgerValidationError("discount_amount cannot be negative")

    if discount > gross:
        raise LedgerValidationError(
            f"Discount {discount} exceeds subtotal + fitting price ({gross})"
        )

    return PriceBreakdown(
        subtotal=subtotal,
        fitting_price=fitting,
        discount_percent=percent,
        discount_amount=discount,
        total=gross - discount,
    )
