# inventory/api/views.py

"""
STOCK ITEM VIEWSET

Policy:
- inventory.view: list/retrieve/movements
- inventory.edit: create, catalog edits, restock, adjust
- quantity is never written directly; restock/adjust go through
  inventory.services.stock_guard and leave a StockMovement
"""

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.services.exceptions import LedgerError
from engine.http import error_response
from inventory.api.serializers import (
    AdjustSerializer,
    RestockSerializer,
    StockItemCreateSerializer,
    StockItemSerializer,
    StockItemUpdateSerializer,
    StockMovementSerializer,
)
from inventory.models import StockItem
from inventory.services import stock_guard
from permissions.roles import CAP_INVENTORY_EDIT, CAP_INVENTORY_VIEW, HasAnyCapability

READ_ACTIONS = {"list", "retrieve", "movements"}


@extend_schema(tags=["inventory"])
class StockItemViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    queryset = StockItem.objects.all().order_by("name")
    serializer_class = StockItemSerializer
    filterset_fields = ["kind", "is_active"]
    search_fields = ["sku", "name"]
    http_method_names = ["get", "post", "patch", "head", "options"]

    def get_permissions(self):
        if self.action in READ_ACTIONS:
            self.required_any_capabilities = {CAP_INVENTORY_VIEW, CAP_INVENTORY_EDIT}
        else:
            self.required_any_capabilities = {CAP_INVENTORY_EDIT}
        return [IsAuthenticated(), HasAnyCapability()]

    def get_serializer_class(self):
        if self.action == "partial_update":
            return StockItemUpdateSerializer
        return StockItemSerializer

    @extend_schema(request=StockItemCreateSerializer, responses={201: StockItemSerializer})
    def create(self, request, *args, **kwargs):
        s = StockItemCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            item = stock_guard.create_item(user=request.user, **s.validated_data)
        except LedgerError as exc:
            return error_response(exc)
        return Response(StockItemSerializer(item).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        item = self.get_object()
        s = StockItemUpdateSerializer(item, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        s.save()
        return Response(StockItemSerializer(item).data)

    @extend_schema(request=RestockSerializer, responses={200: StockItemSerializer})
    @action(detail=True, methods=["post"])
    def restock(self, request, pk=None):
        item = self.get_object()
        s = RestockSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            item = stock_guard.receive_stock(
                item_id=item.pk,
                quantity=s.validated_data["quantity"],
                user=request.user,
                note=s.validated_data["note"],
            )
        except LedgerError as exc:
            return error_response(exc)
        return Response(StockItemSerializer(item).data)

    @extend_schema(request=AdjustSerializer, responses={200: StockItemSerializer})
    @action(detail=True, methods=["post"])
    def adjust(self, request, pk=None):
        item = self.get_object()
        s = AdjustSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            item = stock_guard.adjust_stock(
                item_id=item.pk,
                delta=s.validated_data["delta"],
                user=request.user,
                note=s.validated_data["note"],
            )
        except LedgerError as exc:
            return error_response(exc)
        return Response(StockItemSerializer(item).data)

    @extend_schema(responses={200: StockMovementSerializer(many=True)})
    @action(detail=True, methods=["get"])
    def movements(self, request, pk=None):
        item = self.get_object()
        rows = item.movements.select_related("performed_by").order_by("-created_at", "-pk")
        page = self.paginate_queryset(rows)
        if page is not None:
            return self.get_paginated_response(StockMovementSerializer(page, many=True).data)
        return Response(StockMovementSerializer(rows, many=True).data)
