"""Scoring API views: ranking board and recent history."""

from __future__ import annotations

from rest_framework import serializers
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.scoring.repositories.django_repository import ScoringDjangoRepository
from modules.scoring.serializers import ScoringEventSerializer, UserScoreSerializer
from modules.scoring.services import ScoringLedger


class ScoringViewSet(ViewSet):
    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._ledger = ScoringLedger(repository=ScoringDjangoRepository())

    @action(detail=False, methods=["get"])
    def ranking(self, request: Request) -> Response:
        """GET /api/v1/scoring/ranking/"""
        scores = self._ledger.ranking()
        return Response(UserScoreSerializer(scores, many=True).data)

    @action(detail=False, methods=["get"])
    def history(self, request: Request) -> Response:
        """GET /api/v1/scoring/history/?user=<uuid> - latest events."""
        user_id = request.query_params.get("user")
        if user_id:
            user_id = str(serializers.UUIDField().to_internal_value(user_id))
        events = self._ledger.history(user_id=user_id)
        return Response(ScoringEventSerializer(events, many=True).data)
