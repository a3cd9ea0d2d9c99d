# accounting/models/sequence.py

from django.db import models


class NumberSequence(models.Model):
    """
    Counter row behind one numbering scope (e.g. "HE-20240101").
    Incremented only under select_for_update().
    """

    scope = models.CharField(max_length=40, unique=True)
    last_value = models.PositiveBigIntegerField(default=0)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["scope"]

    def __str__(self):
        return f"{self.scope}: {self.last_value}"
