# sales/api/filters.py

import django_filters

from sales.models import Sale


class SaleFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    account = django_filters.CharFilter(field_name="account__kind", lookup_expr="iexact")
    date_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    invoice_no = django_filters.CharFilter(field_name="invoice_no", lookup_expr="icontains")

    class Meta:
        model = Sale
        fields = ["status", "account", "invoice_no"]
