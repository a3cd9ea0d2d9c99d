# sales/api/views.py

"""
======================================================
PATH: sales/api/views.py
======================================================
SALE VIEWSET (POS)

Endpoints:
    GET    /api/sales/                      list (filters: status, account, date range)
    POST   /api/sales/                      create sale          (pos.sell)
    GET    /api/sales/<uuid>/               receipt payload
    POST   /api/sales/<uuid>/payments/      collect due          (pos.collect)
    POST   /api/sales/<uuid>/status/        advance status       (pos.collect)
    DELETE /api/sales/<uuid>/               reverse + delete     (pos.void)

Every write goes through engine.operations and returns
{ok, entity, account_balance} or {ok: false, error_kind, detail}.
======================================================
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from engine import operations
from engine.http import result_response
from permissions.roles import (
    CAP_POS_COLLECT,
    CAP_POS_SELL,
    CAP_POS_VOID,
    CAP_REPORTS_VIEW_LEDGER,
    HasAnyCapability,
)
from sales.api.filters import SaleFilter
from sales.models import Sale
from sales.serializers import (
    AddPaymentSerializer,
    CreateSaleSerializer,
    PaymentSerializer,
    SaleSerializer,
    StatusUpdateSerializer,
)

ACTION_CAPABILITIES = {
    "list": {CAP_POS_SELL, CAP_POS_COLLECT, CAP_REPORTS_VIEW_LEDGER},
    "retrieve": {CAP_POS_SELL, CAP_POS_COLLECT, CAP_REPORTS_VIEW_LEDGER},
    "create": {CAP_POS_SELL},
    "payments": {CAP_POS_COLLECT},
    "set_status": {CAP_POS_COLLECT},
    "destroy": {CAP_POS_VOID},
}


@extend_schema(tags=["sales"])
class SaleViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = SaleSerializer
    filterset_class = SaleFilter

    def get_permissions(self):
        self.required_any_capabilities = ACTION_CAPABILITIES.get(self.action, set())
        return [IsAuthenticated(), HasAnyCapability()]

    def get_queryset(self):
        return (
            Sale.objects.select_related("account", "seller")
            .prefetch_related("items", "payments__journal_entry", "payments__received_by")
            .order_by("-created_at")
        )

    def _fresh(self, sale_id):
        return self.get_queryset().get(pk=sale_id)

    @extend_schema(request=CreateSaleSerializer, responses={201: SaleSerializer})
    def create(self, request, *args, **kwargs):
        s = CreateSaleSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)

        result = operations.create_sale(
            account=data.pop("account"),
            items=[dict(line) for line in data.pop("items")],
            user=request.user,
            **data,
        )
        if result.ok:
            result = result.with_entity(self._fresh(result.entity.pk))
        return result_response(
            result,
            serializer_class=SaleSerializer,
            success_status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=AddPaymentSerializer, responses={201: PaymentSerializer})
    @action(detail=True, methods=["post"])
    def payments(self, request, pk=None):
        s = AddPaymentSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        result = operations.add_payment(sale_id=pk, user=request.user, **s.validated_data)
        return result_response(
            result,
            serializer_class=PaymentSerializer,
            success_status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=StatusUpdateSerializer, responses={200: SaleSerializer})
    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        s = StatusUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        result = operations.update_sale_status(
            sale_id=pk,
            new_status=s.validated_data["status"],
            user=request.user,
        )
        if result.ok:
            result = result.with_entity(self._fresh(result.entity.pk))
        return result_response(result, serializer_class=SaleSerializer)

    @extend_schema(responses=dict)
    def destroy(self, request, *args, **kwargs):
        result = operations.delete_sale(sale_id=kwargs["pk"], user=request.user)
        return result_response(result)
