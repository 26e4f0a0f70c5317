"""Shipment repository interface."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import ILockingRepository

if TYPE_CHECKING:
    from modules.shipments.models import Shipment


class IShipmentRepository(ILockingRepository["Shipment"]):
    """Repository contract for the Shipment aggregate root.

    Manifest numbers are allocated by ``Shipment.save``; state-changing
    commands read the row through ``get_for_update``.
    """
