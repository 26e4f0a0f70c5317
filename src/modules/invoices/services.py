"""Invoice Registry service layer (Use Cases).

Owns invoice creation and the invoice -> shipment binding.

Business rules enforced:
- An invoice is bound to at most one shipment; bind on a bound invoice
  is rejected until it is unbound.
- Duplicates (same code or number) are rejected only against invoices
  that are still unbound, i.e. the current working set.
- Bind/unbind/delete are authorized against the state of the shipment
  involved; the shipment row is locked before the invoice row, the same
  order ``ShipmentService`` uses, so bind can never race a finalize.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

import structlog
from django.db import transaction

from modules.accounts.policy import Action, Actor, ResourceState, authorize
from modules.core.exceptions import Conflict
from modules.invoices.events import InvoiceBound, InvoiceUnbound
from modules.invoices.exceptions import (
    DuplicateInvoice,
    InvoiceAlreadyBound,
    InvoiceNotBound,
    InvoiceNotFound,
)
from modules.invoices.models import Invoice
from modules.shipments.exceptions import ShipmentNotFound
from shared.domain.validators import parse_money, require

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.invoices.dtos import CreateInvoiceDTO
    from modules.invoices.repositories.interfaces import IInvoiceRepository
    from modules.shipments.models import Shipment
    from modules.shipments.repositories.interfaces import IShipmentRepository

logger = structlog.get_logger(__name__)


class InvoiceService:
    """Application service for the Invoice Registry.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        invoice_repository: IInvoiceRepository,
        shipment_repository: IShipmentRepository,
    ) -> None:
        self._invoice_repo = invoice_repository
        self._shipment_repo = shipment_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_invoice(self, actor: Optional[Actor], dto: CreateInvoiceDTO) -> Invoice:
        """Register a scanned or typed invoice.

        Raises:
            InvalidInput: missing code/number or unparsable value.
            DuplicateInvoice: an unbound invoice has the same code or number.
        """
        authorize(actor, Action.CREATE_INVOICE)
        invoice = self._build(actor, dto)
        self._ensure_not_duplicate(invoice)
        invoice = self._invoice_repo.save(invoice)
        logger.info("invoice.created", invoice_id=str(invoice.id), code=invoice.code)
        return invoice

    @transaction.atomic
    def create_many(
        self, actor: Optional[Actor], dtos: List[CreateInvoiceDTO]
    ) -> List[Invoice]:
        """Register a batch of invoices; all or nothing.

        Raises:
            DuplicateInvoice: a duplicate inside the batch or against the
                unbound working set.
        """
        authorize(actor, Action.CREATE_INVOICE)
        invoices = [self._build(actor, dto) for dto in dtos]

        seen_codes: set[str] = set()
        seen_numbers: set[str] = set()
        for invoice in invoices:
            if invoice.code in seen_codes or invoice.number in seen_numbers:
                raise DuplicateInvoice(
                    f"Invoice {invoice.number} appears more than once in the batch."
                )
            seen_codes.add(invoice.code)
            seen_numbers.add(invoice.number)
            self._ensure_not_duplicate(invoice)

        saved = [self._invoice_repo.save(invoice) for invoice in invoices]
        logger.info("invoice.batch_created", count=len(saved))
        return saved

    @transaction.atomic
    def bind(
        self, actor: Optional[Actor], invoice_id: str, shipment_id: str
    ) -> Invoice:
        """Bind an unbound invoice to a shipment.

        Raises:
            ShipmentNotFound / InvoiceNotFound: unknown ids.
            Forbidden: the shipment is finalized and the actor is not ADMIN.
            InvoiceAlreadyBound: the invoice is bound (to any shipment).
        """
        shipment = self._shipment_repo.get_for_update(shipment_id)
        if not shipment:
            raise ShipmentNotFound(f"Shipment {shipment_id} not found.")
        invoice = self._invoice_repo.get_for_update(invoice_id)
        if not invoice:
            raise InvoiceNotFound(f"Invoice {invoice_id} not found.")
        return self.bind_locked(actor, invoice, shipment)

    def bind_locked(
        self, actor: Optional[Actor], invoice: Invoice, shipment: Shipment
    ) -> Invoice:
        """Bind with both rows already locked by the caller's transaction."""
        authorize(
            actor,
            Action.BIND_INVOICE,
            ResourceState(shipment_finalized=shipment.finalized),
        )
        log = logger.bind(invoice_id=str(invoice.id), shipment_id=str(shipment.id))
        if invoice.shipment_id is not None:
            log.warning(
                "invoice.already_bound", bound_to=str(invoice.shipment_id)
            )
            raise InvoiceAlreadyBound(
                f"Invoice {invoice.number} is already bound to a shipment."
            )

        invoice.shipment = shipment
        invoice.add_domain_event(
            InvoiceBound(aggregate_id=invoice.id, shipment_id=str(shipment.id))
        )
        self._invoice_repo.save(invoice)
        log.info("invoice.bound")
        return invoice

    @transaction.atomic
    def unbind(self, actor: Optional[Actor], invoice_id: str) -> Invoice:
        """Clear an invoice's shipment binding.

        Raises:
            InvoiceNotFound: unknown id.
            InvoiceNotBound: the invoice is not bound.
            Forbidden: the shipment is finalized and the actor is not ADMIN.
        """
        invoice, shipment = self._lock_with_shipment(invoice_id)
        if shipment is None:
            raise InvoiceNotBound(f"Invoice {invoice.number} is not bound.")
        return self.unbind_locked(actor, invoice, shipment)

    def unbind_locked(
        self, actor: Optional[Actor], invoice: Invoice, shipment: Shipment
    ) -> Invoice:
        authorize(
            actor,
            Action.UNBIND_INVOICE,
            ResourceState(shipment_finalized=shipment.finalized),
        )
        invoice.shipment = None
        invoice.add_domain_event(
            InvoiceUnbound(aggregate_id=invoice.id, shipment_id=str(shipment.id))
        )
        self._invoice_repo.save(invoice)
        logger.info(
            "invoice.unbound", invoice_id=str(invoice.id), shipment_id=str(shipment.id)
        )
        return invoice

    @transaction.atomic
    def delete_invoice(self, actor: Optional[Actor], invoice_id: str) -> None:
        """Delete an invoice.

        Never allowed on a finalized shipment; ADMIN/GERENTE may delete any
        other invoice, USUARIO only unbound ones.  A still-bound invoice is
        unbound before removal.
        """
        invoice, shipment = self._lock_with_shipment(invoice_id)
        authorize(
            actor,
            Action.DELETE_INVOICE,
            ResourceState(
                shipment_finalized=bool(shipment and shipment.finalized),
                invoice_bound=invoice.is_bound,
            ),
        )
        if shipment is not None:
            invoice.shipment = None
            invoice.add_domain_event(
                InvoiceUnbound(aggregate_id=invoice.id, shipment_id=str(shipment.id))
            )
            self._invoice_repo.save(invoice)

        self._invoice_repo.delete(str(invoice.id))
        logger.info(
            "invoice.removed",
            invoice_id=str(invoice_id),
            deleted_by=str(actor.user_id),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_invoice(self, invoice_id: str) -> Invoice:
        invoice = self._invoice_repo.get_by_id(invoice_id)
        if not invoice:
            raise InvoiceNotFound(f"Invoice {invoice_id} not found.")
        return invoice

    def list_invoices(self) -> QuerySet:
        """All invoices; filtering is applied by ``InvoiceFilter``."""
        return self._invoice_repo.list()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _build(self, actor: Optional[Actor], dto: CreateInvoiceDTO) -> Invoice:
        require({"code": dto.code, "number": dto.number})
        return Invoice(
            code=dto.code,
            number=dto.number,
            value=parse_money(dto.value),
            volumes=dto.volumes,
            created_by_id=actor.user_id if actor else None,
        )

    def _ensure_not_duplicate(self, invoice: Invoice) -> None:
        existing = self._invoice_repo.find_unbound_duplicate(
            invoice.code, invoice.number
        )
        if existing:
            logger.warning(
                "invoice.duplicate",
                code=invoice.code,
                number=invoice.number,
                existing_id=str(existing.id),
            )
            raise DuplicateInvoice(
                f"Invoice {invoice.number} ({invoice.code}) was already scanned."
            )

    def _lock_with_shipment(
        self, invoice_id: str
    ) -> Tuple[Invoice, Optional[Shipment]]:
        """Lock the invoice and, first, the shipment it is bound to."""
        current = self._invoice_repo.get_by_id(invoice_id)
        if not current:
            raise InvoiceNotFound(f"Invoice {invoice_id} not found.")

        shipment = None
        if current.shipment_id is not None:
            shipment = self._shipment_repo.get_for_update(str(current.shipment_id))

        invoice = self._invoice_repo.get_for_update(invoice_id)
        if not invoice:
            raise InvoiceNotFound(f"Invoice {invoice_id} not found.")
        expected = shipment.id if shipment is not None else None
        if invoice.shipment_id != expected:
            raise Conflict("Invoice binding changed concurrently, retry.")
        return invoice, shipment
