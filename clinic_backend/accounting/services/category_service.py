# accounting/services/category_service.py

"""
CATEGORY LOOKUP SERVICE

A posting's category is either an existing active Category (instance or id)
or free text, which is found (case-insensitive) or created for the
posting's direction.
"""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction

from accounting.models import Category
from accounting.services.exceptions import LedgerValidationError, NotFound

logger = logging.getLogger(__name__)


def _direction(value) -> str:
    direction = (str(value or "")).strip().lower()
    if direction not in Category.Direction.values:
        raise LedgerValidationError(
            f"Invalid category direction '{value}'. Use 'income' or 'expense'."
        )
    return direction


def _check_usable(category: Category, direction: str) -> Category:
    if category.direction != direction:
        raise LedgerValidationError(
            f"Category '{category.name}' is an {category.direction} category"
        )
    if not category.is_active:
        raise LedgerValidationError(f"Category '{category.name}' is inactive")
    return category


def resolve_category(*, direction, category) -> Category:
    direction = _direction(direction)

    if isinstance(category, Category):
        return _check_usable(category, direction)

    if isinstance(category, int) and not isinstance(category, bool):
        found = Category.objects.filter(pk=category).first()
        if found is None:
            raise LedgerValidationError(f"Category {category} does not exist")
        return _check_usable(found, direction)

    name = (str(category or "")).strip()
    if not name:
        raise LedgerValidationError("category is required")

    found = Category.objects.filter(name__iexact=name, direction=direction).first()
    if found is not None:
        return _check_usable(found, direction)

    try:
        with transaction.atomic():
            created = Category.objects.create(name=name, direction=direction)
    except IntegrityError:
        created = Category.objects.get(name__iexact=name, direction=direction)

    logger.info(
        "Category created from free text",
        extra={"category": created.name, "direction": direction},
    )
    return _check_usable(created, direction)


@transaction.atomic
def create_category(*, name: str, direction) -> Category:
    direction = _direction(direction)
    name = (name or "").strip()
    if not name:
        raise LedgerValidationError("Category name is required")

    if Category.objects.filter(name__iexact=name, direction=direction).exists():
        raise LedgerValidationError(f"Category '{name}' already exists")

    return Category.objects.create(name=name, direction=direction)


@transaction.atomic
def update_category(*, category_id, name: str | None = None, is_active: bool | None = None) -> Category:
    try:
        category = Category.objects.select_for_update().filter(pk=category_id).first()
    except (TypeError, ValueError) as exc:
        raise NotFound(f"Category {category_id} not found") from exc
    if category is None:
        raise NotFound(f"Category {category_id} not found")

    if name is not None:
        name = name.strip()
        if not name:
            raise LedgerValidationError("Category name is required")
        clash = (
            Category.objects.filter(name__iexact=name, direction=category.direction)
            .exclude(pk=category.pk)
            .exists()
        )
        if clash:
            raise LedgerValidationError(f"Category '{name}' already exists")
        category.name = name

    if is_active is not None:
        category.is_active = bool(is_active)

    category.save()
    return category
