"""Invoice URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.invoices.views import InvoiceViewSet

router = DefaultRouter(trailing_slash=True)
router.register("invoices", InvoiceViewSet, basename="invoice")

urlpatterns = router.urls
