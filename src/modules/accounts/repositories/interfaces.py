"""User repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import ILockingRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.accounts.models import User


class IUserRepository(ILockingRepository["User"]):
    """Repository contract for back-office users."""

    @abstractmethod
    def list_by_role(self, role: Optional[str] = None) -> QuerySet:
        """Active and inactive users, optionally restricted to one role."""
