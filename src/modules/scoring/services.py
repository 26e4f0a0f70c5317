"""Scoring Ledger service.

``record_event`` appends an immutable event, updates the user's
aggregate and recomputes every rank, all in one transaction so a rank
never reflects a partially applied score.

Ranks are dense and 1-based over all users with an aggregate, ordered
by total (desc), correct count (desc), incorrect count (asc), user id.
Recomputation is a full pass per event, fine for a warehouse team.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

import structlog
from django.conf import settings
from django.db import transaction

from modules.core.exceptions import InvalidInput
from modules.scoring.constants import ScoringAction
from modules.scoring.models import ScoringEvent

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.scoring.models import UserScore
    from modules.scoring.repositories.interfaces import IScoringRepository

logger = structlog.get_logger(__name__)


class ScoringLedger:
    def __init__(self, repository: IScoringRepository) -> None:
        self._repo = repository

    @transaction.atomic
    def record_event(
        self,
        user_id: UUID,
        order_id: Optional[UUID],
        action: str,
        points: int,
        description: str = "",
    ) -> ScoringEvent:
        if action not in ScoringAction.values:
            raise InvalidInput(f"Unknown scoring action {action!r}.")

        score = self._repo.get_or_create_score_for_update(str(user_id))
        score.total += points
        if action == ScoringAction.CORRECT:
            score.correct_count += 1
        else:
            score.incorrect_count += 1
        self._repo.save_score(score)

        event = self._repo.save(
            ScoringEvent(
                user_id=user_id,
                order_id=order_id,
                action=action,
                points=points,
                description=description,
            )
        )
        self.recompute_ranking()

        logger.info(
            "scoring.event_recorded",
            user_id=str(user_id),
            order_id=str(order_id) if order_id else None,
            action=action,
            points=points,
            total=score.total,
        )
        return event

    @transaction.atomic
    def recompute_ranking(self) -> List[UserScore]:
        scores = self._repo.scores_in_rank_order()
        for position, score in enumerate(scores, start=1):
            score.rank = position
        self._repo.update_ranks(scores)
        logger.debug("scoring.ranking_recomputed", user_count=len(scores))
        return scores

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def ranking(self) -> QuerySet:
        return self._repo.ranking()

    def history(self, user_id: Optional[str] = None) -> QuerySet:
        return self._repo.history(user_id=user_id, limit=settings.SCORING_HISTORY_LIMIT)
