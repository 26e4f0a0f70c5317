"""Domain error taxonomy.

Raised by the Service Layer when a business rule is violated.  The DRF
exception handler (``modules.core.exception_handler``) renders every
``DomainError`` as ``{"type": kind, "errors": [...]}`` with the class
``status_code``, so views never translate errors by hand.

Module-specific exceptions subclass one of the kinds below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class FieldError:
    """A single invalid or missing input field."""

    field: str
    code: str
    detail: str


class DomainError(Exception):
    """Base class for every expected business failure."""

    kind = "error"
    status_code = 400
    default_message = "Request could not be processed."

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[FieldError]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)


class InvalidInput(DomainError):
    """Malformed or missing input."""

    kind = "validation_error"
    status_code = 400
    default_message = "Invalid input."


class Unauthorized(DomainError):
    """No actor, or the actor is inactive."""

    kind = "not_authenticated"
    status_code = 401
    default_message = "Authentication credentials were not provided."


class Forbidden(DomainError):
    """The actor's role does not allow the operation."""

    kind = "permission_denied"
    status_code = 403
    default_message = "You do not have permission to perform this action."


class NotFound(DomainError):
    kind = "not_found"
    status_code = 404
    default_message = "Not found."


class Conflict(DomainError):
    """The operation collides with existing state (duplicates, repeats)."""

    kind = "conflict"
    status_code = 409
    default_message = "Conflict with current state."


class InvalidState(DomainError):
    """A state machine precondition is not met."""

    kind = "invalid_state"
    status_code = 422
    default_message = "Operation not allowed in the current state."
