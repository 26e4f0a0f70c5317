from django.apps import AppConfig


class InvoicesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.invoices"
    label = "invoices"

    def ready(self) -> None:
        from modules.invoices.events import InvoiceBound, InvoiceUnbound
        from modules.invoices.handlers import invoice_binding_handler
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe_all((InvoiceBound, InvoiceUnbound), invoice_binding_handler)
