# accounting/api/serializers.py

from rest_framework import serializers

from accounting.models import Account, Category, FundTransfer, JournalEntry


# ==========================================================
# OUTPUT (DB truth)
# ==========================================================

class AccountSerializer(serializers.ModelSerializer):
    class Meta:
        model = Account
        fields = ["id", "kind", "name", "balance", "updated_at"]
        read_only_fields = fields


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "direction", "is_active", "created_at"]
        read_only_fields = ("id", "created_at")


class JournalEntrySerializer(serializers.ModelSerializer):
    account = serializers.CharField(source="account.kind", read_only=True)
    created_by_email = serializers.EmailField(source="created_by.email", read_only=True, default=None)
    rollup_transaction_no = serializers.CharField(
        source="linked_main_voucher.transaction_no", read_only=True, default=None
    )

    class Meta:
        model = JournalEntry
        fields = [
            "id",
            "transaction_no",
            "account",
            "direction",
            "amount",
            "category",
            "category_name",
            "description",
            "entry_date",
            "is_rollup",
            "rollup_transaction_no",
            "reference_type",
            "reference_id",
            "created_by_email",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class FundTransferSerializer(serializers.ModelSerializer):
    account = serializers.CharField(source="account.kind", read_only=True)
    created_by_email = serializers.EmailField(source="created_by.email", read_only=True, default=None)
    rollup_voucher_no = serializers.CharField(
        source="linked_main_transfer.voucher_no", read_only=True, default=None
    )

    class Meta:
        model = FundTransfer
        fields = [
            "id",
            "voucher_no",
            "account",
            "direction",
            "amount",
            "investor_name",
            "description",
            "transfer_date",
            "is_rollup",
            "rollup_voucher_no",
            "created_by_email",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# ==========================================================
# INPUT (Swagger-visible)
# ==========================================================

def _positive(value):
    if value is None or value <= 0:
        raise serializers.ValidationError("amount must be > 0")
    return value


class JournalEntryCreateSerializer(serializers.Serializer):
    account = serializers.ChoiceField(choices=Account.Kind.choices)
    direction = serializers.ChoiceField(choices=JournalEntry.Direction.choices)
    category = serializers.CharField(help_text="Category id or free-text name")
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    entry_date = serializers.DateField(required=False)
    description = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_amount(self, value):
        return _positive(value)

    def validate_category(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("category is required")
        return int(v) if v.isdigit() else v


class JournalEntryEditSerializer(serializers.Serializer):
    direction = serializers.ChoiceField(choices=JournalEntry.Direction.choices, required=False)
    category = serializers.CharField(required=False)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    entry_date = serializers.DateField(required=False)
    description = serializers.CharField(required=False, allow_blank=True)

    def validate_amount(self, value):
        return _positive(value)

    def validate_category(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("category cannot be blank")
        return int(v) if v.isdigit() else v

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide at least one field to change")
        return attrs


class FundTransferCreateSerializer(serializers.Serializer):
    account = serializers.ChoiceField(choices=Account.Kind.choices)
    direction = serializers.ChoiceField(choices=FundTransfer.Direction.choices)
    investor_name = serializers.CharField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    transfer_date = serializers.DateField(required=False)
    description = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_amount(self, value):
        return _positive(value)


class FundTransferEditSerializer(serializers.Serializer):
    investor_name = serializers.CharField(required=False)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    transfer_date = serializers.DateField(required=False)
    description = serializers.CharField(required=False, allow_blank=True)

    def validate_amount(self, value):
        return _positive(value)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide at least one field to change")
        return attrs


class CategoryWriteSerializer(serializers.Serializer):
    name = serializers.CharField(required=False)
    direction = serializers.ChoiceField(choices=Category.Direction.choices, required=False)
    is_active = serializers.BooleanField(required=False)


class AccountSummaryQuerySerializer(serializers.Serializer):
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get("date_from"), attrs.get("date_to")
        if start and end and start > end:
            raise serializers.ValidationError("date_from must be <= date_to")
        return attrs
