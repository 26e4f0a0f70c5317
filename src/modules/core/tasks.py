"""Background tasks of the core module: diagnostics and the outbox relay."""

import structlog
from celery import shared_task
from django.conf import settings
from django.db import transaction

from modules.core.models import OutboxEvent
from shared.domain.events import DomainEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


@shared_task(name="core.debug_task")
def debug_task():
    """Round-trip check that a worker is consuming the queue."""
    logger.info("debug_task.executed", status="ok")
    return {"status": "ok", "message": "Celery is working"}


@shared_task(name="core.publish_outbox_events")
def publish_outbox_events():
    """Relay pending outbox rows to the in-memory event bus.

    Picks up to ``OUTBOX_BATCH_SIZE`` events that are ``PENDING`` or
    ``FAILED`` with fewer than ``OUTBOX_MAX_RETRIES`` attempts, oldest
    first.  Rows are locked with ``skip_locked`` so concurrent workers
    never publish the same event twice.  A failing event is marked
    ``FAILED`` and does not stop the batch.
    """
    published = failed = 0
    with transaction.atomic():
        batch = list(
            OutboxEvent.objects.select_for_update(skip_locked=True)
            .relayable(settings.OUTBOX_MAX_RETRIES)[: settings.OUTBOX_BATCH_SIZE]
        )
        for outbox_event in batch:
            log = logger.bind(
                outbox_event_id=str(outbox_event.id),
                event_type=outbox_event.event_type,
            )
            try:
                with transaction.atomic():
                    event = DomainEvent.from_payload(
                        outbox_event.event_type, outbox_event.payload
                    )
                    handlers = event_bus.publish(event)
            except Exception as exc:  # noqa: BLE001
                log.exception("outbox.publish_failed")
                outbox_event.mark_as_failed(str(exc))
                failed += 1
                continue
            outbox_event.mark_as_published()
            log.debug("outbox.published", handlers=handlers)
            published += 1

    logger.info("outbox.relay_completed", published=published, failed=failed)
    return {"published": published, "failed": failed}
