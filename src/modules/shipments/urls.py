"""Shipment URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.shipments.views import ShipmentViewSet

router = DefaultRouter(trailing_slash=True)
router.register("shipments", ShipmentViewSet, basename="shipment")

urlpatterns = router.urls
