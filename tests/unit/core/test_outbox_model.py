"""Unit tests for the OutboxEvent model and the outbox writer.

Covers:
- Default status and UUIDv7 primary key.
- mark_as_published() / mark_as_failed(error) transitions.
- The relay queryset: relayable rows and per-aggregate lookups.
- store_domain_events() writes one row per collected event and clears
  the aggregate.
"""

from __future__ import annotations

import uuid

import pytest

from modules.core.models import EventStatus, OutboxEvent
from modules.core.outbox import store_domain_events
from modules.shipments.events import ShipmentFinalized, ShipmentSigned
from modules.shipments.models import Shipment

pytestmark = pytest.mark.unit


def _make_event(**overrides) -> OutboxEvent:
    defaults = {
        "event_type": "ShipmentFinalized",
        "payload": {"aggregate_id": "abc-123", "manifest_number": 12},
        "aggregate_id": "abc-123",
        "topic": "shipments",
    }
    defaults.update(overrides)
    return OutboxEvent.objects.create(**defaults)


class TestOutboxEventModel:
    def test_create_event_with_defaults(self):
        event = _make_event()
        event.refresh_from_db()
        assert event.status == EventStatus.PENDING
        assert event.processed_at is None
        assert event.error_message is None
        assert event.retry_count == 0
        assert event.payload["manifest_number"] == 12

    def test_id_is_uuid7(self):
        event = _make_event()
        assert isinstance(event.id, uuid.UUID)
        assert event.id.version == 7

    def test_mark_as_published(self):
        event = _make_event()
        event.mark_as_published()
        event.refresh_from_db()

        assert event.status == EventStatus.PUBLISHED
        assert event.processed_at is not None

    def test_mark_as_failed_increments_retry(self):
        event = _make_event()
        event.mark_as_failed("Error 1")
        event.mark_as_failed("Error 2")
        event.refresh_from_db()

        assert event.status == EventStatus.FAILED
        assert event.retry_count == 2
        assert event.error_message == "Error 2"

    def test_str_representation(self):
        result = str(_make_event(aggregate_id="shipment-456"))
        assert "ShipmentFinalized" in result
        assert "PENDING" in result
        assert "shipment-456" in result


class TestOutboxEventQuerySet:
    def test_relayable_skips_published_and_exhausted(self):
        pending = _make_event()
        retryable = _make_event(status=EventStatus.FAILED, retry_count=2)
        _make_event(status=EventStatus.FAILED, retry_count=3)
        _make_event(status=EventStatus.PUBLISHED)

        relayable = OutboxEvent.objects.relayable(max_retries=3)

        assert {event.id for event in relayable} == {pending.id, retryable.id}

    def test_for_aggregate_accepts_uuid(self):
        aggregate_id = uuid.uuid4()
        _make_event(aggregate_id=str(aggregate_id))
        _make_event(aggregate_id="other")

        assert OutboxEvent.objects.for_aggregate(aggregate_id).count() == 1


class TestStoreDomainEvents:
    def test_writes_one_row_per_event_and_clears(self, shipment):
        shipment.add_domain_event(
            ShipmentSigned(aggregate_id=shipment.id, role="driver")
        )
        shipment.add_domain_event(
            ShipmentFinalized(
                aggregate_id=shipment.id, manifest_number=shipment.manifest_number
            )
        )

        stored = store_domain_events(shipment, topic="shipments")

        assert [row.event_type for row in stored] == [
            "ShipmentSigned",
            "ShipmentFinalized",
        ]
        assert all(row.aggregate_id == str(shipment.id) for row in stored)
        assert stored[1].payload["manifest_number"] == shipment.manifest_number
        assert shipment.domain_events == []

    def test_no_events_writes_nothing(self):
        assert store_domain_events(Shipment(), topic="shipments") == []
        assert OutboxEvent.objects.count() == 0
