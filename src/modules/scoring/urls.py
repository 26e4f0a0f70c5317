"""Scoring URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.scoring.views import ScoringViewSet

router = DefaultRouter(trailing_slash=True)
router.register("scoring", ScoringViewSet, basename="scoring")

urlpatterns = router.urls
