"""Driver catalog URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.drivers.views import DriverViewSet

router = DefaultRouter(trailing_slash=True)
router.register("drivers", DriverViewSet, basename="driver")

urlpatterns = router.urls
