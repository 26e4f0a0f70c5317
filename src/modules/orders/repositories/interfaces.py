"""Order repository interfaces.

Defines the contracts for the Order aggregate and its review.  Every
state-changing command reads through ``get_for_update`` so the
precondition check and the write run under the same row lock.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import ILockingRepository

if TYPE_CHECKING:
    from datetime import date
    from uuid import UUID

    from django.db.models import QuerySet

    from modules.orders.models import Order, OrderReview


class IOrderRepository(ILockingRepository["Order"]):
    @abstractmethod
    def exists_by_number(self, order_number: str) -> bool:
        ...


class IOrderReviewRepository(ILockingRepository["OrderReview"]):
    @abstractmethod
    def get_by_order(self, order_id: str) -> Optional[OrderReview]:
        ...

    @abstractmethod
    def get_by_order_for_update(self, order_id: str) -> Optional[OrderReview]:
        ...

    @abstractmethod
    def pending_audit(self) -> QuerySet:
        """Reviews with a separator whose audit has not been performed."""

    @abstractmethod
    def pending_validation(self) -> QuerySet:
        """Audited reviews still waiting for a manager decision."""

    @abstractmethod
    def conferred_between(
        self,
        start_date: Optional[date],
        end_date: Optional[date],
        stage: Optional[str] = None,
        conferer_id: Optional[UUID] = None,
    ) -> QuerySet:
        """Reviews conferred inside the window, newest conference first."""
