from django.apps import AppConfig


class ShipmentsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.shipments"
    label = "shipments"

    def ready(self) -> None:
        from modules.shipments.events import (
            ShipmentCreated,
            ShipmentDeleted,
            ShipmentFinalized,
            ShipmentSigned,
            ShipmentUpdated,
        )
        from modules.shipments.handlers import shipment_notification_handler
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe_all(
            (
                ShipmentCreated,
                ShipmentUpdated,
                ShipmentSigned,
                ShipmentFinalized,
                ShipmentDeleted,
            ),
            shipment_notification_handler,
        )
