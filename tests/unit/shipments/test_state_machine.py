"""Unit tests for the Shipment state machine helpers."""

from __future__ import annotations

import pytest

from modules.shipments.constants import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    ShipmentStatus,
)
from modules.shipments.models import Shipment

pytestmark = pytest.mark.unit


def test_open_can_only_finalize():
    shipment = Shipment(status=ShipmentStatus.OPEN)
    assert shipment.can_transition_to(ShipmentStatus.FINALIZED)
    assert not shipment.can_transition_to(ShipmentStatus.OPEN)
    assert shipment.finalized is False
    assert shipment.is_terminal is False


def test_finalized_is_terminal():
    shipment = Shipment(status=ShipmentStatus.FINALIZED)
    assert shipment.finalized is True
    assert shipment.is_terminal is True
    assert not shipment.can_transition_to(ShipmentStatus.FINALIZED)
    assert not shipment.can_transition_to(ShipmentStatus.OPEN)


def test_transition_table_covers_every_status():
    assert set(VALID_TRANSITIONS) == set(ShipmentStatus.values)
    assert TERMINAL_STATES == {ShipmentStatus.FINALIZED}


def test_new_shipment_defaults_to_open():
    assert Shipment().status == ShipmentStatus.OPEN


def test_manifest_numbers_are_sequential(make_shipment):
    first = make_shipment()
    second = make_shipment()
    assert first.manifest_number >= 1
    assert second.manifest_number == first.manifest_number + 1
    assert Shipment.next_manifest_number() == second.manifest_number + 1
