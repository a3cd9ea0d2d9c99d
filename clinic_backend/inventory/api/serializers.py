# inventory/api/serializers.py

from rest_framework import serializers

from inventory.models import StockItem, StockMovement


class StockItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = StockItem
        fields = [
            "id",
            "sku",
            "name",
            "kind",
            "quantity",
            "unit_price",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ("id", "quantity", "created_at", "updated_at")


class StockItemCreateSerializer(serializers.Serializer):
    sku = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=255)
    kind = serializers.ChoiceField(choices=StockItem.Kind.choices)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    quantity = serializers.IntegerField(required=False, min_value=0, default=0)


class StockItemUpdateSerializer(serializers.ModelSerializer):
    """Catalog fields only; quantity moves through restock/adjust."""

    class Meta:
        model = StockItem
        fields = ["name", "unit_price", "is_active"]


class RestockSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
    note = serializers.CharField(required=False, allow_blank=True, default="")


class AdjustSerializer(serializers.Serializer):
    delta = serializers.IntegerField()
    note = serializers.CharField()

    def validate_delta(self, value):
        if value == 0:
            raise serializers.ValidationError("delta cannot be zero")
        return value


class StockMovementSerializer(serializers.ModelSerializer):
    performed_by_email = serializers.EmailField(
        source="performed_by.email", read_only=True, default=None
    )

    class Meta:
        model = StockMovement
        fields = [
            "id",
            "reason",
            "quantity",
            "previous_quantity",
            "new_quantity",
            "sale_reference",
            "note",
            "performed_by_email",
            "created_at",
        ]
        read_only_fields = fields
