"""Unit tests for the order review state machine."""

from __future__ import annotations

import pytest

from modules.orders.constants import (
    OUTCOME_TO_STATUS,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    ReviewStage,
    ValidationOutcome,
    ValidationStatus,
)
from modules.orders.models import OrderReview

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("stage", "next_stage"),
    [
        (ReviewStage.CONFERRED, ReviewStage.AUDITED),
        (ReviewStage.AUDITED, ReviewStage.VALIDATED),
    ],
)
def test_linear_transitions(stage, next_stage):
    review = OrderReview(stage=stage)
    assert review.can_transition_to(next_stage)
    for other in ReviewStage.values:
        if other != next_stage:
            assert not review.can_transition_to(other)


def test_cannot_skip_audit():
    review = OrderReview(stage=ReviewStage.CONFERRED)
    assert not review.can_transition_to(ReviewStage.VALIDATED)


def test_validated_is_terminal():
    review = OrderReview(stage=ReviewStage.VALIDATED)
    assert review.is_terminal
    assert not any(review.can_transition_to(stage) for stage in ReviewStage.values)
    assert TERMINAL_STATES == {ReviewStage.VALIDATED}


def test_unreviewed_only_moves_to_conferred():
    assert VALID_TRANSITIONS[ReviewStage.UNREVIEWED] == {ReviewStage.CONFERRED}


def test_new_review_defaults():
    review = OrderReview()
    assert review.stage == ReviewStage.CONFERRED
    assert review.validation_status == ValidationStatus.PENDING
    assert review.inconsistency_reasons == []


def test_outcomes_map_to_final_statuses():
    assert OUTCOME_TO_STATUS[ValidationOutcome.CORRECT] == (
        ValidationStatus.VALIDATED_CORRECT
    )
    assert OUTCOME_TO_STATUS[ValidationOutcome.INCORRECT] == (
        ValidationStatus.VALIDATED_INCORRECT
    )


def test_order_without_review_is_unreviewed(make_order):
    order = make_order()
    assert order.stage == ReviewStage.UNREVIEWED
