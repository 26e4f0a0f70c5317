"""API tests for /api/v1/invoices/."""

from __future__ import annotations

import pytest
from rest_framework import status

from modules.invoices.models import Invoice
from modules.shipments.constants import ShipmentStatus

pytestmark = pytest.mark.integration

URL = "/api/v1/invoices/"


class TestInvoiceCreateAPI:
    def test_create_returns_201(self, client_for, usuario):
        response = client_for(usuario).post(
            URL,
            {
                "code": "35240112345678000199550010000012341000012345",
                "number": "1234",
                "value": "1.234,56",
                "volumes": 2,
            },
            format="json",
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["value"] == "1234.56"
        assert response.data["is_bound"] is False

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("12.500", "12500.00"), (12.5, "12.50"), (1500, "1500.00")],
    )
    def test_strings_use_brl_separators_and_numbers_stay_numeric(
        self, client_for, usuario, value, expected
    ):
        response = client_for(usuario).post(
            URL, {"code": "M1", "number": "9", "value": value}, format="json"
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["value"] == expected

    def test_invalid_money_is_400(self, client_for, usuario):
        response = client_for(usuario).post(
            URL, {"code": "A", "number": "1", "value": "abc"}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["type"] == "validation_error"
        assert response.data["errors"][0]["attr"] == "value"
        assert response.data["errors"][0]["code"] == "invalid_money"

    def test_duplicate_is_409(self, client_for, usuario, make_invoice):
        make_invoice(code="A", number="1")
        response = client_for(usuario).post(
            URL, {"code": "A", "number": "2"}, format="json"
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_separador_is_403(self, client_for, separador):
        response = client_for(separador).post(
            URL, {"code": "A", "number": "1"}, format="json"
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_anonymous_is_401(self, api_client):
        response = api_client.post(URL, {"code": "A", "number": "1"}, format="json")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data["type"] == "not_authenticated"


class TestInvoiceBatchAPI:
    def test_batch_creates_all(self, client_for, usuario):
        response = client_for(usuario).post(
            f"{URL}batch/",
            {"items": [{"code": "A", "number": "1"}, {"code": "B", "number": "2"}]},
            format="json",
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.data) == 2

    def test_batch_duplicate_rolls_back(self, client_for, usuario):
        response = client_for(usuario).post(
            f"{URL}batch/",
            {"items": [{"code": "A", "number": "1"}, {"code": "A", "number": "2"}]},
            format="json",
        )
        assert response.status_code == status.HTTP_409_CONFLICT
        assert Invoice.objects.count() == 0

    def test_empty_batch_is_400(self, client_for, usuario):
        response = client_for(usuario).post(
            f"{URL}batch/", {"items": []}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestInvoiceListAPI:
    def test_binding_filter(self, client_for, usuario, make_invoice, shipment):
        make_invoice(shipment=shipment)
        free = make_invoice()

        response = client_for(usuario).get(URL, {"binding": "UNBOUND"})
        assert response.status_code == status.HTTP_200_OK
        assert [row["id"] for row in response.data["results"]] == [str(free.id)]

    def test_shipment_filter(self, client_for, usuario, make_invoice, shipment):
        bound = make_invoice(shipment=shipment)
        make_invoice()

        response = client_for(usuario).get(URL, {"shipment": str(shipment.id)})
        assert response.data["count"] == 1
        assert response.data["results"][0]["id"] == str(bound.id)
        assert (
            response.data["results"][0]["shipment_manifest_number"]
            == shipment.manifest_number
        )

    def test_retrieve_unknown_is_404(self, client_for, usuario):
        response = client_for(usuario).get(
            f"{URL}00000000-0000-7000-8000-000000000000/"
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["type"] == "not_found"


class TestInvoiceBindingAPI:
    def test_unbind_unbound_is_422(self, client_for, usuario, make_invoice):
        invoice = make_invoice()
        response = client_for(usuario).post(f"{URL}{invoice.id}/unbind/")
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.data["type"] == "invalid_state"

    def test_bind_to_finalized_as_usuario_is_403(
        self, client_for, usuario, make_invoice, make_shipment
    ):
        finalized = make_shipment(status=ShipmentStatus.FINALIZED)
        invoice = make_invoice()
        response = client_for(usuario).post(
            f"{URL}{invoice.id}/bind/",
            {"shipment_id": str(finalized.id)},
            format="json",
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_bind_requires_shipment_id(self, client_for, usuario, make_invoice):
        invoice = make_invoice()
        response = client_for(usuario).post(
            f"{URL}{invoice.id}/bind/", {}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["errors"][0]["attr"] == "shipment_id"


class TestInvoiceDeleteAPI:
    def test_delete_unbound(self, client_for, usuario, make_invoice):
        invoice = make_invoice()
        response = client_for(usuario).delete(f"{URL}{invoice.id}/")
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Invoice.objects.filter(id=invoice.id).exists()

    def test_usuario_delete_bound_is_403(
        self, client_for, usuario, make_invoice, shipment
    ):
        invoice = make_invoice(shipment=shipment)
        response = client_for(usuario).delete(f"{URL}{invoice.id}/")
        assert response.status_code == status.HTTP_403_FORBIDDEN
