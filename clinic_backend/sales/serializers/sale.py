# sales/serializers/sale.py

from rest_framework import serializers

from sales.models import Payment, Sale, SaleItem


class PaymentSerializer(serializers.ModelSerializer):
    """
    Money received against a sale (read-only).
    The advance taken at creation is the row with is_advance=True.
    """

    transaction_no = serializers.CharField(
        source="journal_entry.transaction_no", read_only=True, default=None
    )
    received_by_email = serializers.EmailField(
        source="received_by.email", read_only=True, default=None
    )

    class Meta:
        model = Payment
        fields = [
            "id",
            "amount",
            "method",
            "transaction_ref",
            "notes",
            "is_advance",
            "transaction_no",
            "received_by_email",
            "created_at",
        ]
        read_only_fields = fields


class SaleItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = SaleItem
        fields = [
            "id",
            "stock_item",
            "item_name",
            "item_kind",
            "quantity",
            "unit_price",
            "total_price",
        ]
        read_only_fields = fields


class SaleSerializer(serializers.ModelSerializer):
    """
    Receipt-shaped sale payload: pricing snapshot, lines and payments.
    """

    account = serializers.CharField(source="account.kind", read_only=True)
    seller_email = serializers.EmailField(source="seller.email", read_only=True, default=None)
    amount_paid = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    items = SaleItemSerializer(many=True, read_only=True)
    payments = PaymentSerializer(many=True, read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id",
            "invoice_no",
            "account",
            "customer_name",
            "customer_phone",
            "subtotal_amount",
            "fitting_price",
            "discount_percent",
            "discount_amount",
            "total_amount",
            "advance_payment",
            "amount_paid",
            "due_amount",
            "status",
            "seller_email",
            "notes",
            "items",
            "payments",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
