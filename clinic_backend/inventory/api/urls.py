# inventory/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from inventory.api.views import StockItemViewSet

router = DefaultRouter()
router.register("items", StockItemViewSet, basename="stock-item")

urlpatterns = [
    path("", include(router.urls)),
]
