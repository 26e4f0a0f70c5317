"""Transactional outbox helpers.

``store_domain_events`` is called by repositories from inside their
``save`` transaction so the events and the state change commit (or roll
back) together.  ``serialize_event_payload`` turns a frozen dataclass
event into JSON-safe primitives.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List
from uuid import UUID

import structlog

from modules.core.models import OutboxEvent
from shared.domain.events import DomainEvent, DomainEventMixin

logger = structlog.get_logger(__name__)


def store_domain_events(entity: DomainEventMixin, topic: str) -> List[OutboxEvent]:
    """Persist and clear the events collected on *entity*."""
    stored = [
        OutboxEvent.objects.create(
            event_type=event.event_name,
            aggregate_id=str(event.aggregate_id),
            payload=serialize_event_payload(event),
            topic=topic,
        )
        for event in entity.domain_events
    ]
    entity.clear_domain_events()
    if stored:
        logger.info("outbox.events_stored", topic=topic, event_count=len(stored))
    return stored


def serialize_event_payload(event: DomainEvent) -> Dict[str, Any]:
    data = asdict(event)
    normalized = _normalize_for_json(data)
    return json.loads(json.dumps(normalized))


def _normalize_for_json(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_normalize_for_json(item) for item in value]
    if isinstance(value, dict):
        return {key: _normalize_for_json(val) for key, val in value.items()}
    return value
