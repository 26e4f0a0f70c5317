from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import (
            AuditSubmitted,
            ConferenceSubmitted,
            OrderCreated,
            ReviewValidated,
        )
        from modules.orders.handlers import (
            audit_submitted_handler,
            conference_submitted_handler,
            order_created_handler,
            review_validated_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderCreated, order_created_handler)
        event_bus.subscribe(ConferenceSubmitted, conference_submitted_handler)
        event_bus.subscribe(AuditSubmitted, audit_submitted_handler)
        event_bus.subscribe(ReviewValidated, review_validated_handler)
