# sales/serializers/commands.py

"""
POS command inputs (Swagger-visible).

Shape checks only; money and stock rules are enforced by the services.
"""

from rest_framework import serializers

from accounting.models import Account
from sales.models import Payment, Sale

SELLABLE_ACCOUNTS = [
    (value, label) for value, label in Account.Kind.choices if value != Account.Kind.MAIN
]


class SaleLineInputSerializer(serializers.Serializer):
    stock_item_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)


class CreateSaleSerializer(serializers.Serializer):
    account = serializers.ChoiceField(choices=SELLABLE_ACCOUNTS)
    items = SaleLineInputSerializer(many=True, allow_empty=False)

    fitting_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, min_value=0)
    discount_percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, required=False, allow_null=True
    )
    discount_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )
    advance_payment = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)

    payment_method = serializers.ChoiceField(choices=Payment.METHOD_CHOICES, default=Payment.METHOD_CASH)
    transaction_ref = serializers.CharField(required=False, allow_blank=True, default="")
    payment_notes = serializers.CharField(required=False, allow_blank=True, default="")

    customer_name = serializers.CharField(required=False, allow_blank=True, default="")
    customer_phone = serializers.CharField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class AddPaymentSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    method = serializers.ChoiceField(choices=Payment.METHOD_CHOICES, default=Payment.METHOD_CASH)
    transaction_ref = serializers.CharField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Sale.STATUS_CHOICES)
