# sales/services/locking.py

from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError

from accounting.services.exceptions import NotFound
from sales.models import Sale


def lock_sale(sale_id) -> Sale:
    """Load a Sale row under select_for_update(); NotFound if missing or malformed id."""
    sale_id = getattr(sale_id, "pk", sale_id)
    try:
        sale = (
            Sale.objects.select_for_update(of=("self",))
            .select_related("account")
            .filter(pk=sale_id)
            .first()
        )
    except (DjangoValidationError, ValueError, TypeError) as exc:
        raise NotFound(f"Sale {sale_id} not found") from exc

    if sale is None:
        raise NotFound(f"Sale {sale_id} not found")
    return sale
