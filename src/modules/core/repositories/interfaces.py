"""Repository contracts the service layer depends on.

Services receive concrete repositories through their constructors and
only talk to these abstractions.  ``ILockingRepository`` adds the
row-lock read every state-changing command goes through, so a
precondition check and the write that follows cannot interleave with
another request on the same row.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, Protocol, TypeVar

from django.db import models

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Queryable(Protocol[T_co]):
    def filter(self, **kwargs: Any) -> models.QuerySet: ...


class IRepository(ABC, Generic[T]):
    """Persistence of one aggregate type ``T`` (``Invoice``, ``Shipment``...)."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Return the entity, or ``None`` when the id is unknown."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Queryable[T]: ...

    @abstractmethod
    def save(self, entity: T) -> T:
        """Insert or update the entity and return it."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Hard delete; ``False`` when nothing matched."""


class ILockingRepository(IRepository[T]):
    @abstractmethod
    def get_for_update(self, id: str) -> Optional[T]:
        """Retrieve an entity with a row-level lock (SELECT FOR UPDATE).

        Must be called inside ``transaction.atomic``.
        """
