# accounting/api/views.py

"""
ACCOUNTS LEDGER API

GET    /api/accounting/accounts/                      balances (reports.view_ledger)
GET    /api/accounting/accounts/<kind>/summary/       period totals
GET    /api/accounting/verify/                        stored vs replayed balances
GET    /api/accounting/categories/                    list
POST   /api/accounting/categories/                    create         (ledger.post)
PATCH  /api/accounting/categories/<id>/               rename/toggle  (ledger.post)
GET    /api/accounting/journal-entries/               list/filter
POST   /api/accounting/journal-entries/               post           (ledger.post)
PATCH  /api/accounting/journal-entries/<id>/          edit           (ledger.post)
DELETE /api/accounting/journal-entries/<id>/          reverse+delete (ledger.reverse)
...and the same shape for /fund-transfers/

Every write goes through engine.operations; error kinds map to HTTP
status in engine.http.
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.filters import FundTransferFilter, JournalEntryFilter
from accounting.api.serializers import (
    AccountSerializer,
    AccountSummaryQuerySerializer,
    CategorySerializer,
    CategoryWriteSerializer,
    FundTransferCreateSerializer,
    FundTransferEditSerializer,
    FundTransferSerializer,
    JournalEntryCreateSerializer,
    JournalEntryEditSerializer,
    JournalEntrySerializer,
)
from accounting.models import Account, Category, FundTransfer, JournalEntry
from accounting.services import category_service
from accounting.services.balance_service import account_summary, verify_balances
from accounting.services.exceptions import LedgerError
from engine import operations
from engine.http import error_response, result_response
from permissions.roles import (
    CAP_LEDGER_POST,
    CAP_LEDGER_REVERSE,
    CAP_REPORTS_VIEW_LEDGER,
    HasCapability,
)

LEDGER_CAPABILITIES = {
    "GET": CAP_REPORTS_VIEW_LEDGER,
    "HEAD": CAP_REPORTS_VIEW_LEDGER,
    "OPTIONS": CAP_REPORTS_VIEW_LEDGER,
    "POST": CAP_LEDGER_POST,
    "PATCH": CAP_LEDGER_POST,
    "DELETE": CAP_LEDGER_REVERSE,
}


@extend_schema(tags=["accounting"])
class AccountViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW_LEDGER
    serializer_class = AccountSerializer
    queryset = Account.objects.order_by("pk")
    lookup_field = "kind"
    pagination_class = None

    @extend_schema(parameters=[AccountSummaryQuerySerializer], responses=dict)
    @action(detail=True, methods=["get"])
    def summary(self, request, kind=None):
        account = self.get_object()
        q = AccountSummaryQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        data = account_summary(
            account,
            date_from=q.validated_data.get("date_from"),
            date_to=q.validated_data.get("date_to"),
        )
        return Response({k: str(v) if v is not None else None for k, v in data.items()})


class LedgerVerifyView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW_LEDGER

    @extend_schema(tags=["accounting"], responses=dict)
    def get(self, request):
        checks = verify_balances()
        return Response(
            {
                "ok": all(c.ok for c in checks),
                "accounts": [
                    {
                        "account": c.account_kind,
                        "stored": str(c.stored),
                        "replayed": str(c.replayed),
                        "drift": str(c.drift),
                    }
                    for c in checks
                ],
            }
        )


@extend_schema(tags=["accounting"])
class CategoryViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capabilities = LEDGER_CAPABILITIES
    serializer_class = CategorySerializer
    queryset = Category.objects.all()
    filterset_fields = ["direction", "is_active"]
    pagination_class = None

    @extend_schema(request=CategoryWriteSerializer, responses={201: CategorySerializer})
    def create(self, request, *args, **kwargs):
        s = CategoryWriteSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            category = category_service.create_category(
                name=s.validated_data.get("name", ""),
                direction=s.validated_data.get("direction", ""),
            )
        except LedgerError as exc:
            return error_response(exc)
        return Response(CategorySerializer(category).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=CategoryWriteSerializer, responses={200: CategorySerializer})
    def partial_update(self, request, *args, **kwargs):
        s = CategoryWriteSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            category = category_service.update_category(
                category_id=kwargs["pk"],
                name=s.validated_data.get("name"),
                is_active=s.validated_data.get("is_active"),
            )
        except LedgerError as exc:
            return error_response(exc)
        return Response(CategorySerializer(category).data)


@extend_schema(tags=["accounting"])
class JournalEntryViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capabilities = LEDGER_CAPABILITIES
    serializer_class = JournalEntrySerializer
    filterset_class = JournalEntryFilter
    queryset = JournalEntry.objects.select_related(
        "account", "created_by", "linked_main_voucher"
    ).order_by("-entry_date", "-created_at")

    @extend_schema(request=JournalEntryCreateSerializer, responses={201: JournalEntrySerializer})
    def create(self, request, *args, **kwargs):
        s = JournalEntryCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        result = operations.post_journal_entry(user=request.user, **s.validated_data)
        return result_response(
            result,
            serializer_class=JournalEntrySerializer,
            success_status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=JournalEntryEditSerializer, responses={200: JournalEntrySerializer})
    def partial_update(self, request, *args, **kwargs):
        s = JournalEntryEditSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        result = operations.edit_journal_entry(
            entry_id=kwargs["pk"], user=request.user, **s.validated_data
        )
        return result_response(result, serializer_class=JournalEntrySerializer)

    @extend_schema(responses=dict)
    def destroy(self, request, *args, **kwargs):
        result = operations.delete_journal_entry(entry_id=kwargs["pk"], user=request.user)
        return result_response(result)


@extend_schema(tags=["accounting"])
class FundTransferViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capabilities = LEDGER_CAPABILITIES
    serializer_class = FundTransferSerializer
    filterset_class = FundTransferFilter
    queryset = FundTransfer.objects.select_related(
        "account", "created_by", "linked_main_transfer"
    ).order_by("-transfer_date", "-created_at")

    @extend_schema(request=FundTransferCreateSerializer, responses={201: FundTransferSerializer})
    def create(self, request, *args, **kwargs):
        s = FundTransferCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)
        direction = data.pop("direction")
        op = operations.fund_in if direction == FundTransfer.Direction.FUND_IN else operations.fund_out
        result = op(user=request.user, **data)
        return result_response(
            result,
            serializer_class=FundTransferSerializer,
            success_status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=FundTransferEditSerializer, responses={200: FundTransferSerializer})
    def partial_update(self, request, *args, **kwargs):
        s = FundTransferEditSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        result = operations.edit_fund_transfer(
            transfer_id=kwargs["pk"], user=request.user, **s.validated_data
        )
        return result_response(result, serializer_class=FundTransferSerializer)

    @extend_schema(responses=dict)
    def destroy(self, request, *args, **kwargs):
        result = operations.delete_fund_transfer(transfer_id=kwargs["pk"], user=request.user)
        return result_response(result)
