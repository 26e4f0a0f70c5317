"""Order workflow exceptions.

Raised by the Service Layer; the API exception handler renders them
with the status of their kind (404, 409, 422, 400).
"""

from __future__ import annotations

from modules.core.exceptions import Conflict, InvalidInput, InvalidState, NotFound


class OrderNotFound(NotFound):
    default_message = "Order not found."


class ReviewNotFound(NotFound):
    default_message = "Order review not found."


class DuplicateOrderNumber(Conflict):
    default_message = "Order number already exists."


class ConferenceAlreadySubmitted(Conflict):
    """A review already exists for the order; conference is one-shot."""

    default_message = "This order has already been conferred."


class ReviewNotReadyForAudit(InvalidState):
    """No review, no separator, or audit already performed."""

    default_message = "Order is not ready for audit."


class ReviewNotReadyForValidation(InvalidState):
    """Audit missing or validation already recorded."""

    default_message = "Order review is not pending validation."


class SeparatorLocked(InvalidState):
    default_message = "The separator can no longer be changed."


class InvalidSeparator(InvalidInput):
    default_message = "Separator must be an active picker."
