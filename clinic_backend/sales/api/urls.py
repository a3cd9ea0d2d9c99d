# sales/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from sales.api.views import SaleViewSet

router = DefaultRouter()
router.register(r"", SaleViewSet, basename="sales")

urlpatterns = [
    path("", include(router.urls)),
]
