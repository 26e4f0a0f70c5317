"""Driver repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.drivers.models import Driver


class IDriverRepository(IRepository["Driver"]):
    @abstractmethod
    def exists_by_tax_id(self, tax_id: str) -> bool:
        """``tax_id`` must already be normalized."""
