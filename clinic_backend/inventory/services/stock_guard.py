# inventory/services/stock_guard.py

"""
INVENTORY STOCK GUARD

Purpose:
- Atomically check and decrement stock for a batch of sale lines.
- Restore stock when a sale is reversed.
- Restock / adjust outside of sales.

HARD RULES:
- Quantities are whole positive integers, validated BEFORE any lock is taken.
- Duplicate item ids in one request are summed into one line.
- Rows are locked with select_for_update() in primary-key order.
- All-or-nothing: if ANY line is short, InsufficientStock lists every
  short line and nothing is decremented.
- Every quantity change writes one StockMovement.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction
from django.db.models import F

from accounting.services.exceptions import (
    InsufficientStock,
    LedgerValidationError,
    NotFound,
)
from accounting.services.ledger_service import money
from inventory.models import StockItem, StockMovement

logger = logging.getLogger(__name__)

# StockItem.unit_price is DecimalField(max_digits=12, decimal_places=2)
UNIT_PRICE_LIMIT = Decimal("10000000000")


@dataclass
class ReservedLine:
    item: StockItem
    quantity: int
    movement: StockMovement


def _to_int_qty(value) -> int:
    """
    Quantity normalizer.
    HARD RULE: quantities are integer units in this system.
    """
    if isinstance(value, bool):
        raise LedgerValidationError("quantity must be a whole integer unit")

    if isinstance(value, int):
        qty = value
    elif isinstance(value, str) and value.strip().isdigit():
        qty = int(value.strip())
    else:
        raise LedgerValidationError("quantity must be a whole integer unit")

    if qty <= 0:
        raise LedgerValidationError("quantity must be greater than 0")
    return qty


def _item_id(value) -> int:
    raw = getattr(value, "pk", value)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise LedgerValidationError(f"Invalid stock item id: {raw!r}") from exc


def _normalize_lines(lines) -> dict[int, int]:
    """
    Accepts [(item_id, qty), ...] or [{"stock_item_id": .., "quantity": ..}, ...].
    Returns {item_id: total_qty} in first-appearance order.
    """
    if not lines:
        raise LedgerValidationError("At least one item is required")

    totals: dict[int, int] = {}
    for line in lines:
        if isinstance(line, dict):
            item_ref = line.get("stock_item_id", line.get("stock_item"))
            qty_raw = line.get("quantity")
        else:
            try:
                item_ref, qty_raw = line
            except (TypeError, ValueError) as exc:
                raise LedgerValidationError("Each line must be (stock_item_id, quantity)") from exc

        item_id = _item_id(item_ref)
        totals[item_id] = totals.get(item_id, 0) + _to_int_qty(qty_raw)

    return totals


def _lock_items(item_ids) -> dict[int, StockItem]:
    ids = sorted(set(item_ids))
    locked = {
        item.pk: item
        for item in StockItem.objects.select_for_update().filter(pk__in=ids).order_by("pk")
    }
    missing = [i for i in ids if i not in locked]
    if missing:
        raise NotFound(f"Stock item(s) not found: {missing}")
    return locked


def _move(*, item: StockItem, delta: int, reason: str, user=None, sale=None, note: str = "") -> StockMovement:
    previous = item.quantity
    StockItem.objects.filter(pk=item.pk).update(quantity=F("quantity") + delta)
    item.quantity = previous + delta

    return StockMovement.objects.create(
        item=item,
        reason=reason,
        quantity=delta,
        previous_quantity=previous,
        new_quantity=item.quantity,
        sale=sale,
        sale_reference=getattr(sale, "invoice_no", "") or "",
        performed_by=user,
        note=(note or "")[:255],
    )


# ============================================================
# SALE DECREMENT
# ============================================================

@transaction.atomic
def reserve_and_decrement(lines, *, user=None, sale=None) -> list[ReservedLine]:
    totals = _normalize_lines(lines)
    locked = _lock_items(totals.keys())

    inactive = [locked[i].name for i in totals if not locked[i].is_active]
    if inactive:
        raise LedgerValidationError(f"Inactive item(s) cannot be sold: {inactive}")

    shortages = [
        {
            "stock_item_id": item_id,
            "name": locked[item_id].name,
            "requested": qty,
            "available": locked[item_id].quantity,
        }
        for item_id, qty in totals.items()
        if qty > locked[item_id].quantity
    ]
    if shortages:
        logger.warning("Stock reservation rejected", extra={"shortages": shortages})
        detail = ", ".join(
            f"{s['name']} (requested {s['requested']}, available {s['available']})"
            for s in shortages
        )
        raise InsufficientStock(f"Insufficient stock: {detail}", shortages=shortages)

    reserved = []
    for item_id, qty in totals.items():
        item = locked[item_id]
        movement = _move(
            item=item,
            delta=-qty,
            reason=StockMovement.Reason.SALE,
            user=user,
            sale=sale,
        )
        reserved.append(ReservedLine(item=item, quantity=qty, movement=movement))

    logger.info(
        "Stock decremented",
        extra={"lines": {str(k): v for k, v in totals.items()}},
    )
    return reserved


@transaction.atomic
def restore_stock(lines, *, user=None, sale=None, note: str = "") -> list[StockMovement]:
    """Put quantities back (sale reversal)."""
    totals = _normalize_lines(lines)
    locked = _lock_items(totals.keys())

    movements = [
        _move(
            item=locked[item_id],
            delta=qty,
            reason=StockMovement.Reason.SALE_REVERSAL,
            user=user,
            sale=sale,
            note=note,
        )
        for item_id, qty in totals.items()
    ]

    logger.info(
        "Stock restored",
        extra={"sale_reference": getattr(sale, "invoice_no", ""), "lines": len(movements)},
    )
    return movements


# ============================================================
# INTAKE / ADJUSTMENT
# ============================================================

@transaction.atomic
def receive_stock(*, item_id, quantity, user=None, note: str = "") -> StockItem:
    qty = _to_int_qty(quantity)
    pk = _item_id(item_id)
    item = _lock_items([pk])[pk]
    _move(item=item, delta=qty, reason=StockMovement.Reason.RESTOCK, user=user, note=note)
    return item


@transaction.atomic
def adjust_stock(*, item_id, delta, user=None, note: str = "") -> StockItem:
    if isinstance(delta, bool) or not isinstance(delta, int):
        raise LedgerValidationError("delta must be a whole integer")
    if delta == 0:
        raise LedgerValidationError("delta cannot be zero")
    if not (note or "").strip():
        raise LedgerValidationError("note is required for manual adjustments")

    pk = _item_id(item_id)
    item = _lock_items([pk])[pk]
    if item.quantity + delta < 0:
        shortage = {
            "stock_item_id": pk,
            "name": item.name,
            "requested": -delta,
            "available": item.quantity,
        }
        raise InsufficientStock(
            f"Insufficient stock: {item.name} (requested {-delta}, available {item.quantity})",
            shortages=[shortage],
        )

    _move(item=item, delta=delta, reason=StockMovement.Reason.ADJUSTMENT, user=user, note=note)
    return item


@transaction.atomic
def create_item(*, sku, name, kind, unit_price, quantity=0, user=None) -> StockItem:
    price = money(unit_price, limit=UNIT_PRICE_LIMIT)
    if price < 0:
        raise LedgerValidationError("unit_price cannot be negative")
    if kind not in StockItem.Kind.values:
        raise LedgerValidationError(f"Invalid item kind '{kind}'")
    if StockItem.objects.filter(sku=(sku or "").strip()).exists():
        raise LedgerValidationError(f"SKU '{sku}' already exists")

    item = StockItem(sku=sku, name=name, kind=kind, unit_price=price, quantity=0)
    item.full_clean()
    item.save()

    if quantity:
        receive_stock(item_id=item.pk, quantity=quantity, user=user, note="Opening stock")
        item.refresh_from_db()
    return item
