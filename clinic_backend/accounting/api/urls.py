# accounting/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from accounting.api.views import (
    AccountViewSet,
    CategoryViewSet,
    FundTransferViewSet,
    JournalEntryViewSet,
    LedgerVerifyView,
)

router = DefaultRouter()
router.register("accounts", AccountViewSet, basename="account")
router.register("categories", CategoryViewSet, basename="category")
router.register("journal-entries", JournalEntryViewSet, basename="journal-entry")
router.register("fund-transfers", FundTransferViewSet, basename="fund-transfer")

urlpatterns = [
    path("", include(router.urls)),
    path("verify/", LedgerVerifyView.as_view(), name="ledger-verify"),
]
