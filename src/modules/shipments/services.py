"""Shipment Lifecycle service layer (Use Cases).

State machine: OPEN -> FINALIZED (terminal).  Deletion is a destructive
action, not a state.

Business rules enforced:
- Driver tax id must pass checksum validation before persistence.
- Structural edits on a finalized shipment are ADMIN-only.
- Finalize is rejected (Conflict) when already finalized.
- Delete unbinds every invoice before removing the row, in the same
  transaction.
- Signatures can be attached in any state and never change it.

Every command locks the shipment row first (``get_for_update``) so the
state check and the mutation cannot interleave with another request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

import structlog
from django.db import transaction
from django.utils import timezone

from modules.accounts.policy import Action, Actor, ResourceState, authorize
from modules.core.exceptions import FieldError
from modules.invoices.exceptions import InvoiceNotFound
from modules.invoices.services import InvoiceService
from modules.shipments.constants import ShipmentStatus, SignatureRole
from modules.shipments.events import (
    ShipmentCreated,
    ShipmentDeleted,
    ShipmentFinalized,
    ShipmentSigned,
    ShipmentUpdated,
)
from modules.shipments.exceptions import (
    InvalidTaxId,
    ShipmentAlreadyFinalized,
    ShipmentNotFound,
)
from modules.shipments.models import Shipment
from shared.domain.validators import (
    normalize_tax_id,
    require,
    validate_signature_image,
    validate_tax_id,
)

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.invoices.repositories.interfaces import IInvoiceRepository
    from modules.shipments.dtos import (
        AttachSignatureDTO,
        CreateShipmentDTO,
        UpdateShipmentDTO,
    )
    from modules.shipments.repositories.interfaces import IShipmentRepository

logger = structlog.get_logger(__name__)

_EDITABLE_FIELDS = (
    "driver_name",
    "responsible_name",
    "carrier",
    "pallet_count",
    "note",
)


class ShipmentService:
    """Application service for Shipment use-cases.

    Receives repositories via constructor injection (DIP); invoice
    binding is delegated to ``InvoiceService`` so the at-most-one-shipment
    rule lives in one place.
    """

    def __init__(
        self,
        shipment_repository: IShipmentRepository,
        invoice_repository: IInvoiceRepository,
    ) -> None:
        self._shipment_repo = shipment_repository
        self._invoice_repo = invoice_repository
        self._invoices = InvoiceService(
            invoice_repository=invoice_repository,
            shipment_repository=shipment_repository,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_shipment(
        self, actor: Optional[Actor], dto: CreateShipmentDTO
    ) -> Shipment:
        """Open a shipment and bind the listed invoices (all or nothing).

        Raises:
            InvalidInput: missing fields or invalid driver tax id.
            InvoiceNotFound: an invoice id does not exist.
            InvoiceAlreadyBound: an invoice is bound elsewhere.
        """
        authorize(actor, Action.CREATE_SHIPMENT)
        require(
            {
                "driver_name": dto.driver_name,
                "driver_tax_id": dto.driver_tax_id,
                "responsible_name": dto.responsible_name,
            }
        )

        shipment = Shipment(
            driver_name=dto.driver_name.strip(),
            driver_tax_id=self._validated_tax_id(dto.driver_tax_id),
            responsible_name=dto.responsible_name.strip(),
            carrier=dto.carrier,
            pallet_count=dto.pallet_count,
            note=dto.note,
            created_by_id=actor.user_id,
        )
        shipment = self._shipment_repo.save(shipment)
        log = logger.bind(
            shipment_id=str(shipment.id), manifest_number=shipment.manifest_number
        )

        self._bind_all(actor, shipment, dto.invoice_ids)

        shipment.add_domain_event(
            ShipmentCreated(
                aggregate_id=shipment.id,
                manifest_number=shipment.manifest_number,
                invoice_count=len(dto.invoice_ids),
            )
        )
        self._shipment_repo.save(shipment)
        log.info("shipment.created", invoice_count=len(dto.invoice_ids))
        return self.get_shipment(str(shipment.id))

    @transaction.atomic
    def update_shipment(
        self, actor: Optional[Actor], shipment_id: str, dto: UpdateShipmentDTO
    ) -> Shipment:
        """Edit driver/carrier data and, optionally, the invoice set.

        Allowed while OPEN for editors, and on FINALIZED shipments for
        ADMIN only.  ``created_at`` and ``manifest_number`` never change.
        """
        shipment = self._lock(shipment_id)
        authorize(
            actor,
            Action.EDIT_SHIPMENT,
            ResourceState(shipment_finalized=shipment.finalized),
        )
        log = logger.bind(shipment_id=str(shipment.id), status=shipment.status)

        provided = {
            name: getattr(dto, name)
            for name in ("driver_name", "driver_tax_id", "responsible_name")
            if getattr(dto, name) is not None
        }
        require(provided)

        if dto.driver_tax_id is not None:
            shipment.driver_tax_id = self._validated_tax_id(dto.driver_tax_id)
        for field in _EDITABLE_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                if isinstance(value, str):
                    value = value.strip()
                setattr(shipment, field, value)

        if dto.invoice_ids is not None:
            self._replace_invoices(actor, shipment, dto.invoice_ids)

        shipment.add_domain_event(ShipmentUpdated(aggregate_id=shipment.id))
        self._shipment_repo.save(shipment)
        log.info("shipment.updated")
        return self.get_shipment(str(shipment.id))

    @transaction.atomic
    def attach_signature(
        self, actor: Optional[Actor], shipment_id: str, dto: AttachSignatureDTO
    ) -> Shipment:
        """Store a driver or responsible-party signature; state is unchanged."""
        shipment = self._lock(shipment_id)
        authorize(
            actor,
            Action.SIGN_SHIPMENT,
            ResourceState(shipment_finalized=shipment.finalized),
        )
        image = validate_signature_image(dto.image)
        now = timezone.now()

        if dto.role == SignatureRole.DRIVER:
            shipment.driver_signature = image
            shipment.driver_signed_at = now
        else:
            shipment.responsible_signature = image
            shipment.responsible_signed_at = now

        shipment.add_domain_event(
            ShipmentSigned(aggregate_id=shipment.id, role=str(dto.role))
        )
        self._shipment_repo.save(shipment)
        logger.info("shipment.signed", shipment_id=str(shipment.id), role=dto.role)
        return shipment

    @transaction.atomic
    def finalize(self, actor: Optional[Actor], shipment_id: str) -> Shipment:
        """Transition OPEN -> FINALIZED.

        Raises:
            Forbidden: actor is neither ADMIN nor GERENTE.
            ShipmentAlreadyFinalized: the shipment is already finalized.
        """
        shipment = self._lock(shipment_id)
        authorize(
            actor,
            Action.FINALIZE_SHIPMENT,
            ResourceState(shipment_finalized=shipment.finalized),
        )
        log = logger.bind(shipment_id=str(shipment.id), current_status=shipment.status)

        if not shipment.can_transition_to(ShipmentStatus.FINALIZED):
            log.warning("shipment.already_finalized")
            raise ShipmentAlreadyFinalized(
                f"Shipment {shipment.manifest_number} is already finalized."
            )

        shipment.status = ShipmentStatus.FINALIZED
        shipment.finalized_at = timezone.now()
        shipment.add_domain_event(
            ShipmentFinalized(
                aggregate_id=shipment.id, manifest_number=shipment.manifest_number
            )
        )
        self._shipment_repo.save(shipment)
        log.info("shipment.finalized")
        return self.get_shipment(str(shipment.id))

    @transaction.atomic
    def delete_shipment(self, actor: Optional[Actor], shipment_id: str) -> None:
        """Unbind every invoice, then remove the shipment.

        Open shipments may be deleted by ADMIN/GERENTE; finalized ones by
        ADMIN only.
        """
        shipment = self._lock(shipment_id)
        authorize(
            actor,
            Action.DELETE_SHIPMENT,
            ResourceState(shipment_finalized=shipment.finalized),
        )

        unbound = self._invoice_repo.unbind_all(str(shipment.id))
        shipment.add_domain_event(
            ShipmentDeleted(aggregate_id=shipment.id, unbound_invoices=unbound)
        )
        self._shipment_repo.save(shipment)
        self._shipment_repo.delete(str(shipment.id))
        logger.info(
            "shipment.deleted",
            shipment_id=str(shipment.id),
            unbound_invoices=unbound,
            deleted_by=str(actor.user_id),
        )

    @transaction.atomic
    def link_invoices(
        self, actor: Optional[Actor], shipment_id: str, invoice_ids: List[UUID]
    ) -> Shipment:
        """Bind several invoices at once; any failure rolls back the batch."""
        shipment = self._lock(shipment_id)
        self._bind_all(actor, shipment, invoice_ids)
        logger.info(
            "shipment.invoices_linked",
            shipment_id=str(shipment.id),
            count=len(invoice_ids),
        )
        return self.get_shipment(str(shipment.id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_shipment(self, shipment_id: str) -> Shipment:
        shipment = self._shipment_repo.get_by_id(shipment_id)
        if not shipment:
            raise ShipmentNotFound(f"Shipment {shipment_id} not found.")
        return shipment

    def list_shipments(self) -> QuerySet:
        return self._shipment_repo.list()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock(self, shipment_id: str) -> Shipment:
        shipment = self._shipment_repo.get_for_update(shipment_id)
        if not shipment:
            raise ShipmentNotFound(f"Shipment {shipment_id} not found.")
        return shipment

    @staticmethod
    def _validated_tax_id(raw: str) -> str:
        result = validate_tax_id(raw)
        if not result.valid:
            raise InvalidTaxId(
                errors=[
                    FieldError(
                        field="driver_tax_id",
                        code=f"invalid_tax_id_{result.reason}",
                        detail="Driver tax id is not a valid CPF.",
                    )
                ]
            )
        return normalize_tax_id(raw)

    def _bind_all(
        self, actor: Optional[Actor], shipment: Shipment, invoice_ids: List[UUID]
    ) -> None:
        if not invoice_ids:
            return
        wanted = {str(invoice_id) for invoice_id in invoice_ids}
        invoices = self._invoice_repo.get_many_for_update(wanted)
        missing = wanted - {str(invoice.id) for invoice in invoices}
        if missing:
            raise InvoiceNotFound(
                f"Invoices not found: {', '.join(sorted(missing))}."
            )
        for invoice in invoices:
            self._invoices.bind_locked(actor, invoice, shipment)

    def _replace_invoices(
        self, actor: Optional[Actor], shipment: Shipment, invoice_ids: List[UUID]
    ) -> None:
        keep = {str(invoice_id) for invoice_id in invoice_ids}
        current = {
            str(invoice_id)
            for invoice_id in shipment.invoices.values_list("id", flat=True)
        }
        for invoice in self._invoice_repo.get_many_for_update(current - keep):
            self._invoices.unbind_locked(actor, invoice, shipment)
        self._bind_all(actor, shipment, [UUID(value) for value in keep - current])
