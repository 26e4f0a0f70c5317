"""Order Workflow service layer (Use Cases).

State machine per order (see ``constants.VALID_TRANSITIONS``)::

    UNREVIEWED -> CONFERRED -> AUDITED -> VALIDATED

Business rules enforced:
- Conference is one-shot: a second submission is a ``Conflict`` and the
  existing review keeps its values.  The one-to-one constraint on
  ``OrderReview.order`` backs this under concurrent requests.
- Audit requires a conferred review with a separator and no previous
  audit; nothing is written when the precondition fails.
- Validation requires a completed audit and happens once.  It awards
  points to each participant role (separator, conferer) in the same
  transaction, through the Scoring Ledger.
- A SEPARADOR may only assign themselves; the separator is frozen once
  the order has been audited.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

import structlog
from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone

from modules.accounts.constants import UserRole
from modules.accounts.policy import Action, Actor, authorize
from modules.core.exceptions import FieldError, Forbidden, InvalidInput
from modules.orders.constants import (
    OUTCOME_TO_STATUS,
    ReviewStage,
    ValidationStatus,
)
from modules.orders.events import (
    AuditSubmitted,
    ConferenceSubmitted,
    OrderCreated,
    ReviewValidated,
    SeparatorAssigned,
)
from modules.orders.exceptions import (
    ConferenceAlreadySubmitted,
    DuplicateOrderNumber,
    InvalidSeparator,
    OrderNotFound,
    ReviewNotFound,
    ReviewNotReadyForAudit,
    ReviewNotReadyForValidation,
    SeparatorLocked,
)
from modules.orders.models import Order, OrderReview
from modules.scoring.constants import POINTS, ScoringAction
from modules.shipments.exceptions import ShipmentNotFound
from shared.domain.validators import require

if TYPE_CHECKING:
    from uuid import UUID

    from django.db.models import QuerySet

    from modules.accounts.models import User
    from modules.accounts.repositories.interfaces import IUserRepository
    from modules.orders.dtos import (
        AssignSeparatorDTO,
        ConferenceReportDTO,
        CreateOrderDTO,
        ReviewFindingsDTO,
        ValidateReviewDTO,
    )
    from modules.orders.repositories.interfaces import (
        IOrderRepository,
        IOrderReviewRepository,
    )
    from modules.scoring.services import ScoringLedger
    from modules.shipments.repositories.interfaces import IShipmentRepository

logger = structlog.get_logger(__name__)

SEPARATOR_ROLES = frozenset({UserRole.SEPARADOR, UserRole.ADMIN})


class OrderWorkflowService:
    """Application service for the order review workflow.

    Receives repositories and the scoring ledger via constructor
    injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        review_repository: IOrderReviewRepository,
        user_repository: IUserRepository,
        shipment_repository: IShipmentRepository,
        ledger: ScoringLedger,
    ) -> None:
        self._order_repo = order_repository
        self._review_repo = review_repository
        self._user_repo = user_repository
        self._shipment_repo = shipment_repository
        self._ledger = ledger

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, actor: Optional[Actor], dto: CreateOrderDTO) -> Order:
        """Register an order, optionally with its shipment and picker.

        Raises:
            DuplicateOrderNumber: the number is already registered.
            ShipmentNotFound: unknown ``shipment_id``.
            InvalidSeparator: separator is not an active SEPARADOR/ADMIN.
        """
        authorize(actor, Action.CREATE_ORDER)
        require({"order_number": dto.order_number})

        if self._order_repo.exists_by_number(dto.order_number):
            raise DuplicateOrderNumber(
                f"Order {dto.order_number} is already registered."
            )
        if dto.shipment_id and not self._shipment_repo.get_by_id(str(dto.shipment_id)):
            raise ShipmentNotFound(f"Shipment {dto.shipment_id} not found.")

        separator = self._separator(dto.separator_id) if dto.separator_id else None
        order = Order(
            order_number=dto.order_number,
            shipment_id=dto.shipment_id,
            separator=separator,
        )
        order.add_domain_event(
            OrderCreated(aggregate_id=order.id, order_number=order.order_number)
        )
        try:
            with transaction.atomic():
                order = self._order_repo.save(order)
        except IntegrityError as exc:
            raise DuplicateOrderNumber(
                f"Order {dto.order_number} is already registered."
            ) from exc

        logger.info(
            "order.created", order_id=str(order.id), order_number=order.order_number
        )
        return order

    @transaction.atomic
    def assign_separator(
        self, actor: Optional[Actor], order_id: str, dto: AssignSeparatorDTO
    ) -> Order:
        """Record who picked the order.

        Raises:
            Forbidden: a SEPARADOR assigning someone else.
            SeparatorLocked: the order has already been audited.
        """
        authorize(actor, Action.ASSIGN_SEPARATOR)
        order = self._lock_order(order_id)
        if actor.role == UserRole.SEPARADOR and dto.separator_id != actor.user_id:
            logger.warning(
                "order.separator_not_self",
                order_id=str(order.id),
                user_id=str(actor.user_id),
            )
            raise Forbidden()

        separator = self._separator(dto.separator_id)
        review = self._review_repo.get_by_order_for_update(str(order.id))
        if review is not None and review.audit_performed:
            raise SeparatorLocked(
                f"Order {order.order_number} has already been audited."
            )

        order.separator = separator
        order.add_domain_event(
            SeparatorAssigned(aggregate_id=order.id, separator_id=str(separator.id))
        )
        self._order_repo.save(order)
        if review is not None:
            review.separator = separator
            self._review_repo.save(review)

        logger.info(
            "order.separator_assigned",
            order_id=str(order.id),
            separator_id=str(separator.id),
        )
        return self.get_order(str(order.id))

    @transaction.atomic
    def submit_conference(
        self, actor: Optional[Actor], order_id: str, dto: ReviewFindingsDTO
    ) -> OrderReview:
        """Create the order's review in stage CONFERRED.

        Raises:
            OrderNotFound: unknown order.
            ConferenceAlreadySubmitted: the order already has a review.
            InvalidInput: inconsistency reported without reasons.
        """
        authorize(actor, Action.SUBMIT_CONFERENCE)
        order = self._lock_order(order_id)
        log = logger.bind(order_id=str(order.id), conferer_id=str(actor.user_id))

        if self._review_repo.get_by_order(str(order.id)) is not None:
            log.warning("order.conference_repeated")
            raise ConferenceAlreadySubmitted(
                f"Order {order.order_number} has already been conferred."
            )
        self._require_reasons(dto)

        review = OrderReview(
            order=order,
            separator_id=order.separator_id,
            conferer_id=actor.user_id,
            fully_picked=dto.fully_picked,
            has_inconsistency=dto.has_inconsistency,
            inconsistency_reasons=[str(reason) for reason in dto.reasons],
            notes=dto.notes.strip(),
            conference_performed=True,
            conferred_at=timezone.now(),
            stage=ReviewStage.CONFERRED,
        )
        review.add_domain_event(
            ConferenceSubmitted(
                aggregate_id=order.id, has_inconsistency=dto.has_inconsistency
            )
        )
        try:
            with transaction.atomic():
                review = self._review_repo.save(review)
        except IntegrityError as exc:
            log.warning("order.conference_race_lost")
            raise ConferenceAlreadySubmitted(
                f"Order {order.order_number} has already been conferred."
            ) from exc

        log.info("order.conferred", has_inconsistency=dto.has_inconsistency)
        return review

    @transaction.atomic
    def submit_audit(
        self, actor: Optional[Actor], order_id: str, dto: ReviewFindingsDTO
    ) -> OrderReview:
        """Move a conferred review to AUDITED.

        Raises:
            OrderNotFound: unknown order.
            ReviewNotReadyForAudit: no review, no separator, or already
                audited.
            InvalidInput: inconsistency reported without reasons.
        """
        authorize(actor, Action.SUBMIT_AUDIT)
        if not self._order_repo.get_by_id(order_id):
            raise OrderNotFound(f"Order {order_id} not found.")

        review = self._review_repo.get_by_order_for_update(order_id)
        if review is None:
            raise ReviewNotReadyForAudit("Order has not been conferred yet.")
        log = logger.bind(review_id=str(review.id), order_id=str(review.order_id))
        if review.separator_id is None:
            log.warning("review.audit_without_separator")
            raise ReviewNotReadyForAudit("Order has no separator assigned.")
        if review.audit_performed or not review.can_transition_to(ReviewStage.AUDITED):
            log.warning("review.audit_repeated", stage=review.stage)
            raise ReviewNotReadyForAudit("Order has already been audited.")
        self._require_reasons(dto)

        review.fully_picked = dto.fully_picked
        if dto.reasons:
            review.inconsistency_reasons = list(
                dict.fromkeys(
                    [*review.inconsistency_reasons, *(str(r) for r in dto.reasons)]
                )
            )
        review.audit_performed = True
        review.audited_at = timezone.now()
        review.audit_has_error = dto.has_inconsistency
        review.audit_notes = dto.notes.strip()
        review.auditor_id = actor.user_id
        review.stage = ReviewStage.AUDITED
        review.add_domain_event(
            AuditSubmitted(
                aggregate_id=review.order_id, audit_has_error=dto.has_inconsistency
            )
        )
        self._review_repo.save(review)
        log.info("review.audited", audit_has_error=review.audit_has_error)
        return review

    @transaction.atomic
    def validate(
        self, actor: Optional[Actor], review_id: str, dto: ValidateReviewDTO
    ) -> OrderReview:
        """Record the manager's final decision and score the participants.

        Raises:
            Forbidden: actor is neither ADMIN nor GERENTE.
            ReviewNotFound: unknown review.
            ReviewNotReadyForValidation: not audited, or already validated.
        """
        authorize(actor, Action.VALIDATE_ORDER)
        review = self._review_repo.get_for_update(review_id)
        if not review:
            raise ReviewNotFound(f"Review {review_id} not found.")
        log = logger.bind(review_id=str(review.id), order_id=str(review.order_id))

        if review.validation_status != ValidationStatus.PENDING:
            log.warning("review.already_validated", status=review.validation_status)
            raise ReviewNotReadyForValidation("Order review was already validated.")
        if not review.can_transition_to(ReviewStage.VALIDATED):
            log.warning("review.validation_before_audit", stage=review.stage)
            raise ReviewNotReadyForValidation("Order review has not been audited.")

        review.validation_status = OUTCOME_TO_STATUS[dto.outcome]
        review.stage = ReviewStage.VALIDATED
        review.validated_at = timezone.now()
        review.validator_id = actor.user_id
        review.add_domain_event(
            ReviewValidated(
                aggregate_id=review.order_id,
                validation_status=review.validation_status,
            )
        )
        self._review_repo.save(review)

        action = ScoringAction(dto.outcome.value)
        for user_id in self._participants(review):
            self._ledger.record_event(
                user_id=user_id,
                order_id=review.order_id,
                action=action,
                points=POINTS[action],
                description=f"Pedido {review.order.order_number}: {action.label}",
            )

        log.info("review.validated", validation_status=review.validation_status)
        return review

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self) -> QuerySet:
        """All orders; filtering is applied by ``OrderFilter``."""
        return self._order_repo.list()

    def get_review(self, review_id: str) -> OrderReview:
        review = self._review_repo.get_by_id(review_id)
        if not review:
            raise ReviewNotFound(f"Review {review_id} not found.")
        return review

    def list_reviews(self) -> QuerySet:
        return self._review_repo.list()

    def pending_audit(self) -> QuerySet:
        return self._review_repo.pending_audit()

    def pending_validation(self) -> QuerySet:
        return self._review_repo.pending_validation()

    def conference_report(
        self, actor: Optional[Actor], dto: ConferenceReportDTO
    ) -> Tuple[QuerySet, Dict[str, Any]]:
        """Reviews conferred in a date window plus their error counters.

        Returns the reviews (newest conference first) and a summary with
        totals, audit and validation outcomes, and per-reason counts.
        """
        authorize(actor, Action.VIEW_REPORTS)
        reviews = self._review_repo.conferred_between(
            dto.start_date, dto.end_date, stage=dto.stage, conferer_id=dto.conferer_id
        )
        summary = reviews.aggregate(
            total=Count("id"),
            with_inconsistency=Count("id", filter=Q(has_inconsistency=True)),
            audited=Count("id", filter=Q(audit_performed=True)),
            audit_errors=Count("id", filter=Q(audit_has_error=True)),
            validated_correct=Count(
                "id", filter=Q(validation_status=ValidationStatus.VALIDATED_CORRECT)
            ),
            validated_incorrect=Count(
                "id", filter=Q(validation_status=ValidationStatus.VALIDATED_INCORRECT)
            ),
        )
        summary["by_reason"] = dict(
            Counter(
                reason
                for reasons in reviews.values_list("inconsistency_reasons", flat=True)
                for reason in reasons
            )
        )
        logger.debug(
            "report.conferences_computed",
            user_id=str(actor.user_id),
            total=summary["total"],
        )
        return reviews, summary

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock_order(self, order_id: str) -> Order:
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _separator(self, separator_id: UUID) -> User:
        user = self._user_repo.get_by_id(str(separator_id))
        if not user or not user.is_active or user.role not in SEPARATOR_ROLES:
            raise InvalidSeparator(
                errors=[
                    FieldError(
                        field="separator_id",
                        code="invalid_separator",
                        detail="Separator must be an active picker.",
                    )
                ]
            )
        return user

    @staticmethod
    def _require_reasons(dto: ReviewFindingsDTO) -> None:
        if dto.has_inconsistency and not dto.reasons:
            raise InvalidInput(
                errors=[
                    FieldError(
                        field="reasons",
                        code="required",
                        detail="At least one inconsistency reason is required.",
                    )
                ]
            )

    @staticmethod
    def _participants(review: OrderReview) -> List[UUID]:
        """Separator then conferer ids; a user holding both roles appears twice."""
        return [
            user_id
            for user_id in (review.separator_id, review.conferer_id)
            if user_id is not None
        ]
