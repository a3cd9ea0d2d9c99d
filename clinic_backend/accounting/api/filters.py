# accounting/api/filters.py

import django_filters

from accounting.models import FundTransfer, JournalEntry


class JournalEntryFilter(django_filters.FilterSet):
    account = django_filters.CharFilter(field_name="account__kind")
    date_from = django_filters.DateFilter(field_name="entry_date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="entry_date", lookup_expr="lte")
    category = django_filters.CharFilter(field_name="category_name", lookup_expr="iexact")

    class Meta:
        model = JournalEntry
        fields = ["account", "direction", "is_rollup", "reference_type"]


class FundTransferFilter(django_filters.FilterSet):
    account = django_filters.CharFilter(field_name="account__kind")
    date_from = django_filters.DateFilter(field_name="transfer_date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="transfer_date", lookup_expr="lte")
    investor = django_filters.CharFilter(field_name="investor_name", lookup_expr="icontains")

    class Meta:
        model = FundTransfer
        fields = ["account", "direction", "is_rollup"]
