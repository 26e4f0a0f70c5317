"""Tests for the ``seed_data`` management command."""

from io import StringIO

import pytest
from django.core.management import call_command

from modules.accounts.models import User
from modules.invoices.models import Invoice
from modules.orders.models import Order
from modules.shipments.models import Shipment

pytestmark = pytest.mark.integration


class TestSeedData:
    def test_seeds_every_role(self):
        out = StringIO()
        call_command("seed_data", stdout=out)

        assert set(User.objects.values_list("role", flat=True)) == {
            "ADMIN",
            "GERENTE",
            "USUARIO",
            "SEPARADOR",
            "CONFERENTE",
            "AUDITOR",
        }
        assert Shipment.objects.count() == 1
        assert Invoice.objects.filter(shipment__isnull=False).count() == 5
        assert Order.objects.count() == 10
        assert "Seed completed" in out.getvalue()

    def test_is_idempotent(self):
        call_command("seed_data", stdout=StringIO())
        call_command("seed_data", stdout=StringIO())

        assert User.objects.count() == 6
        assert Shipment.objects.count() == 1
        assert Invoice.objects.count() == 5
        assert Order.objects.count() == 10
