"""Scoring repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.scoring.models import ScoringEvent, UserScore


class IScoringRepository(IRepository["ScoringEvent"]):
    @abstractmethod
    def get_or_create_score_for_update(self, user_id: str) -> UserScore:
        """Lock the user's aggregate, creating it at zero when absent."""

    @abstractmethod
    def save_score(self, score: UserScore) -> UserScore:
        """Persist one aggregate."""

    @abstractmethod
    def scores_in_rank_order(self) -> List[UserScore]:
        """Every aggregate, ordered by total, correct, incorrect, user."""

    @abstractmethod
    def update_ranks(self, scores: List[UserScore]) -> None:
        """Persist ``rank`` for every aggregate in one batch."""

    @abstractmethod
    def ranking(self) -> QuerySet:
        """Aggregates ordered by rank, with their users."""

    @abstractmethod
    def history(self, user_id: Optional[str] = None, limit: int = 50) -> QuerySet:
        """Most recent events first."""
