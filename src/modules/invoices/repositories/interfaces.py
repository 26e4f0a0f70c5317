"""Invoice repository interface.

Extends the locking contract with the look-ups the registry needs:
batch locking for bind/unbind, duplicate detection among unbound
invoices, and bulk unbinding when a shipment goes away.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Optional

from modules.core.repositories.interfaces import ILockingRepository

if TYPE_CHECKING:
    from modules.invoices.models import Invoice


class IInvoiceRepository(ILockingRepository["Invoice"]):
    @abstractmethod
    def get_many_for_update(self, ids: Iterable[str]) -> List[Invoice]:
        """Lock several invoices, in primary-key order."""

    @abstractmethod
    def find_unbound_duplicate(self, code: str, number: str) -> Optional[Invoice]:
        """Return an unbound invoice sharing *code* or *number*, if any."""

    @abstractmethod
    def unbind_all(self, shipment_id: str) -> int:
        """Clear the shipment reference on every invoice bound to it."""
