"""API tests for /api/v1/shipments/."""

from __future__ import annotations

import pytest
from rest_framework import status

from modules.invoices.models import Invoice
from modules.shipments.constants import ShipmentStatus
from tests.conftest import SIGNATURE_IMAGE, VALID_CPF

pytestmark = pytest.mark.integration

URL = "/api/v1/shipments/"

PAYLOAD = {
    "driver_name": "João da Silva",
    "driver_tax_id": "529.982.247-25",
    "responsible_name": "Maria Oliveira",
    "carrier": "ACERT",
    "pallet_count": 3,
}


class TestShipmentCreateAPI:
    def test_create_with_invoices(self, client_for, usuario, make_invoice):
        invoice = make_invoice()
        response = client_for(usuario).post(
            URL, {**PAYLOAD, "invoice_ids": [str(invoice.id)]}, format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["driver_tax_id"] == VALID_CPF
        assert response.data["status"] == "OPEN"
        assert [row["id"] for row in response.data["invoices"]] == [str(invoice.id)]

    def test_invalid_tax_id(self, client_for, usuario):
        response = client_for(usuario).post(
            URL, {**PAYLOAD, "driver_tax_id": "123.456.789-00"}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = response.data["errors"][0]
        assert error["attr"] == "driver_tax_id"
        assert error["code"] == "invalid_tax_id_checksum"

    def test_unknown_carrier(self, client_for, usuario):
        response = client_for(usuario).post(
            URL, {**PAYLOAD, "carrier": "CORREIOS"}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["errors"][0]["attr"] == "carrier"

    def test_negative_pallets(self, client_for, usuario):
        response = client_for(usuario).post(
            URL, {**PAYLOAD, "pallet_count": -1}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestShipmentListAPI:
    def test_list_and_status_filter(self, client_for, usuario, make_shipment):
        make_shipment()
        finalized = make_shipment(status=ShipmentStatus.FINALIZED)

        response = client_for(usuario).get(URL, {"status": "FINALIZED"})
        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 1
        assert response.data["results"][0]["id"] == str(finalized.id)

    def test_invoice_count_in_list(self, client_for, usuario, shipment, make_invoice):
        make_invoice(shipment=shipment)
        make_invoice(shipment=shipment)

        response = client_for(usuario).get(URL)
        assert response.data["results"][0]["invoice_count"] == 2

    def test_search_by_driver(self, client_for, usuario, make_shipment):
        make_shipment(driver_name="Carlos Pereira")
        make_shipment(driver_name="Ana Souza")

        response = client_for(usuario).get(URL, {"search": "carlos"})
        assert [row["driver_name"] for row in response.data["results"]] == [
            "Carlos Pereira"
        ]


class TestShipmentUpdateAPI:
    def test_patch_open(self, client_for, usuario, shipment):
        response = client_for(usuario).patch(
            f"{URL}{shipment.id}/", {"note": "doca 3"}, format="json"
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data["note"] == "doca 3"

    def test_patch_finalized_as_gerente_is_403(
        self, client_for, gerente, make_shipment
    ):
        finalized = make_shipment(status=ShipmentStatus.FINALIZED)
        response = client_for(gerente).patch(
            f"{URL}{finalized.id}/", {"note": "x"}, format="json"
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestShipmentLifecycleAPI:
    def test_double_finalize_is_409(self, client_for, gerente, shipment):
        client = client_for(gerente)
        assert client.post(f"{URL}{shipment.id}/finalize/").status_code == 200

        response = client.post(f"{URL}{shipment.id}/finalize/")
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["type"] == "conflict"

    def test_signature(self, client_for, separador, shipment):
        response = client_for(separador).post(
            f"{URL}{shipment.id}/signature/",
            {"role": "driver", "image": SIGNATURE_IMAGE},
            format="json",
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data["driver_signed"] is True
        assert "driver_signature" not in response.data

    def test_link_invoices(self, client_for, usuario, shipment, make_invoice):
        invoices = [make_invoice(), make_invoice()]
        response = client_for(usuario).post(
            f"{URL}{shipment.id}/invoices/",
            {"invoice_ids": [str(invoice.id) for invoice in invoices]},
            format="json",
        )
        assert response.status_code == status.HTTP_200_OK
        assert len(response.data["invoices"]) == 2

    def test_delete_unbinds(self, client_for, gerente, shipment, make_invoice):
        invoice = make_invoice(shipment=shipment)
        response = client_for(gerente).delete(f"{URL}{shipment.id}/")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        invoice.refresh_from_db()
        assert invoice.shipment_id is None
        assert Invoice.objects.count() == 1
