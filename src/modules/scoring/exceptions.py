"""Scoring domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import InvalidState


class ScoringEventImmutable(InvalidState):
    default_message = "Scoring events are append-only."
