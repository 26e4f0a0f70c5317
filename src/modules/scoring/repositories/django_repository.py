"""Django ORM implementation of the Scoring repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError
from django.db.models import QuerySet

from modules.scoring.exceptions import ScoringEventImmutable
from modules.scoring.models import ScoringEvent, UserScore
from modules.scoring.repositories.interfaces import IScoringRepository

RANK_ORDERING = ("-total", "-correct_count", "incorrect_count", "user_id")


class ScoringDjangoRepository(IScoringRepository):
    def get_by_id(self, id: str) -> Optional[ScoringEvent]:
        try:
            return ScoringEvent.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        queryset = ScoringEvent.objects.select_related("user", "order")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def save(self, entity: ScoringEvent) -> ScoringEvent:
        entity.save()
        return entity

    def delete(self, id: str) -> bool:
        raise ScoringEventImmutable(f"Scoring event {id} cannot be deleted.")

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def get_or_create_score_for_update(self, user_id: str) -> UserScore:
        score, _ = UserScore.objects.select_for_update().get_or_create(user_id=user_id)
        return score

    def save_score(self, score: UserScore) -> UserScore:
        score.save()
        return score

    def scores_in_rank_order(self) -> List[UserScore]:
        return list(UserScore.objects.order_by(*RANK_ORDERING))

    def update_ranks(self, scores: List[UserScore]) -> None:
        UserScore.objects.bulk_update(scores, ["rank"])

    def ranking(self) -> QuerySet:
        return UserScore.objects.select_related("user").order_by("rank", *RANK_ORDERING)

    def history(self, user_id: Optional[str] = None, limit: int = 50) -> QuerySet:
        queryset = self.list({"user_id": user_id} if user_id else None)
        return queryset.order_by("-created_at", "-id")[:limit]
