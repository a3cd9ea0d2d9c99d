# accounting/models/category.py

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class Category(models.Model):
    """
    Income / expense category lookup. Never affects balances.
    """

    class Direction(models.TextChoices):
        INCOME = "income", "Income"
        EXPENSE = "expense", "Expense"

    name = models.CharField(max_length=120)
    direction = models.CharField(max_length=10, choices=Direction.choices)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["direction", "name"]
        verbose_name_plural = "Categories"
        constraints = [
            models.UniqueConstraint(
                fields=["name", "direction"],
                name="uniq_category_name_direction",
            ),
            models.CheckConstraint(
                condition=~Q(name=""),
                name="chk_category_name_not_blank",
            ),
        ]

    def __str__(self):
        return f"{self.name} [{self.direction}]"

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError("Category name is required")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
