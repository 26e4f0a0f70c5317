"""Integration tests for the Scoring Ledger."""

from __future__ import annotations

import pytest
from django.test import override_settings

from modules.accounts.constants import UserRole
from modules.core.exceptions import InvalidInput
from modules.scoring.constants import POINTS, ScoringAction
from modules.scoring.exceptions import ScoringEventImmutable
from modules.scoring.models import ScoringEvent, UserScore
from modules.scoring.repositories.django_repository import ScoringDjangoRepository

pytestmark = pytest.mark.integration


def _correct(ledger, user, order=None):
    return ledger.record_event(
        user_id=user.id,
        order_id=order.id if order else None,
        action=ScoringAction.CORRECT,
        points=POINTS[ScoringAction.CORRECT],
    )


def _incorrect(ledger, user):
    return ledger.record_event(
        user_id=user.id,
        order_id=None,
        action=ScoringAction.INCORRECT,
        points=POINTS[ScoringAction.INCORRECT],
    )


class TestRecordEvent:
    def test_first_event_creates_aggregate(self, ledger, separador, make_order):
        order = make_order()
        event = _correct(ledger, separador, order)

        assert event.points == 10
        assert event.order_id == order.id
        score = UserScore.objects.get(user=separador)
        assert (score.total, score.correct_count, score.incorrect_count) == (10, 1, 0)
        assert score.rank == 1

    def test_totals_accumulate(self, ledger, separador):
        _correct(ledger, separador)
        _correct(ledger, separador)
        _incorrect(ledger, separador)

        score = UserScore.objects.get(user=separador)
        assert score.total == 15
        assert score.correct_count == 2
        assert score.incorrect_count == 1
        assert ScoringEvent.objects.filter(user=separador).count() == 3

    def test_unknown_action_rejected(self, ledger, separador):
        with pytest.raises(InvalidInput):
            ledger.record_event(
                user_id=separador.id, order_id=None, action="BONUS", points=100
            )
        assert not UserScore.objects.exists()

    def test_events_are_append_only(self, ledger, separador):
        event = _correct(ledger, separador)
        with pytest.raises(ScoringEventImmutable) as exc_info:
            ScoringDjangoRepository().delete(str(event.id))
        assert exc_info.value.kind == "invalid_state"
        assert ScoringEvent.objects.filter(id=event.id).exists()


class TestRanking:
    def test_ranks_by_total(self, ledger, make_user):
        low, high = make_user(UserRole.SEPARADOR), make_user(UserRole.SEPARADOR)
        _correct(ledger, low)
        _correct(ledger, high)
        _correct(ledger, high)

        ranks = {s.user_id: s.rank for s in UserScore.objects.all()}
        assert ranks == {high.id: 1, low.id: 2}

    def test_tie_broken_by_correct_count(self, ledger, make_user):
        steady = make_user(UserRole.SEPARADOR)
        swingy = make_user(UserRole.SEPARADOR)
        # steady: 10 points from one correct; swingy: 10 = 10+10-5-5 (two correct)
        _correct(ledger, steady)
        _correct(ledger, swingy)
        _correct(ledger, swingy)
        _incorrect(ledger, swingy)
        _incorrect(ledger, swingy)

        board = list(ledger.ranking())
        assert [s.user_id for s in board] == [swingy.id, steady.id]
        assert [s.rank for s in board] == [1, 2]

    def test_ranks_are_contiguous(self, ledger, make_user):
        users = [make_user(UserRole.CONFERENTE) for _ in range(4)]
        for user in users:
            _correct(ledger, user)
        _incorrect(ledger, users[0])

        assert sorted(UserScore.objects.values_list("rank", flat=True)) == [1, 2, 3, 4]
        assert UserScore.objects.get(user=users[0]).rank == 4

    def test_users_without_events_are_not_ranked(self, ledger, separador, conferente):
        _correct(ledger, separador)
        assert list(ledger.ranking().values_list("user_id", flat=True)) == [
            separador.id
        ]


class TestHistory:
    @override_settings(SCORING_HISTORY_LIMIT=3)
    def test_history_is_limited_and_newest_first(self, ledger, separador):
        events = [_correct(ledger, separador) for _ in range(5)]

        history = list(ledger.history())
        assert len(history) == 3
        assert history[0].id == events[-1].id

    def test_history_filtered_by_user(self, ledger, separador, conferente):
        _correct(ledger, separador)
        _correct(ledger, conferente)

        history = list(ledger.history(user_id=str(conferente.id)))
        assert [event.user_id for event in history] == [conferente.id]
