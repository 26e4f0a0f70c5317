"""Invoice domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import Conflict, InvalidState, NotFound


class InvoiceNotFound(NotFound):
    default_message = "Invoice not found."


class DuplicateInvoice(Conflict):
    """An unbound invoice with the same code or number already exists."""

    default_message = "Invoice already scanned."


class InvoiceAlreadyBound(Conflict):
    """Bind attempted on an invoice that is bound; unbind it first."""

    default_message = "Invoice is already bound to a shipment."


class InvoiceNotBound(InvalidState):
    default_message = "Invoice is not bound to a shipment."
