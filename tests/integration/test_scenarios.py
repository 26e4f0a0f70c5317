"""End-to-end scenarios through the HTTP API.

A. Shipment finalize, then a non-admin delete is refused.
B. Invoice re-binding requires an explicit unbind.
C. Full order review: audit refused before conference, then conference,
   audit and validation, with participants scored.
"""

from __future__ import annotations

import pytest
from rest_framework import status

from modules.scoring.models import ScoringEvent
from modules.shipments.models import Shipment

pytestmark = pytest.mark.integration

SHIPMENT_PAYLOAD = {
    "driver_name": "João da Silva",
    "driver_tax_id": "529.982.247-25",
    "responsible_name": "Maria Oliveira",
    "carrier": "ACERT",
}


class TestScenarioFinalizeThenDelete:
    def test_manager_cannot_delete_finalized_shipment(self, client_for, gerente):
        client = client_for(gerente)

        created = client.post("/api/v1/shipments/", SHIPMENT_PAYLOAD, format="json")
        assert created.status_code == status.HTTP_201_CREATED
        assert created.data["invoices"] == []
        shipment_id = created.data["id"]

        finalized = client.post(f"/api/v1/shipments/{shipment_id}/finalize/")
        assert finalized.status_code == status.HTTP_200_OK
        assert finalized.data["status"] == "FINALIZED"

        deleted = client.delete(f"/api/v1/shipments/{shipment_id}/")
        assert deleted.status_code == status.HTTP_403_FORBIDDEN
        assert deleted.data["type"] == "permission_denied"
        assert Shipment.objects.filter(id=shipment_id).exists()


class TestScenarioRebindInvoice:
    def test_rebind_requires_unbind(self, client_for, usuario, make_shipment):
        client = client_for(usuario)
        first, second = make_shipment(), make_shipment()

        created = client.post(
            "/api/v1/invoices/",
            {"code": "X1", "number": "100", "value": 50.00},
            format="json",
        )
        assert created.status_code == status.HTTP_201_CREATED
        assert created.data["value"] == "50.00"
        invoice_url = f"/api/v1/invoices/{created.data['id']}"

        bound = client.post(
            f"{invoice_url}/bind/", {"shipment_id": str(first.id)}, format="json"
        )
        assert bound.status_code == status.HTTP_200_OK

        moved = client.post(
            f"{invoice_url}/bind/", {"shipment_id": str(second.id)}, format="json"
        )
        assert moved.status_code == status.HTTP_409_CONFLICT
        assert moved.data["type"] == "conflict"

        assert client.post(f"{invoice_url}/unbind/").status_code == status.HTTP_200_OK
        rebound = client.post(
            f"{invoice_url}/bind/", {"shipment_id": str(second.id)}, format="json"
        )
        assert rebound.status_code == status.HTTP_200_OK
        assert str(rebound.data["shipment_id"]) == str(second.id)


class TestScenarioOrderReview:
    def test_full_review_scores_participants(
        self, client_for, make_order, separador, conferente, auditor, gerente
    ):
        order = make_order(separator=separador)
        order_url = f"/api/v1/orders/{order.id}"

        early = client_for(auditor).post(
            f"{order_url}/audit/", {"fully_picked": True}, format="json"
        )
        assert early.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert early.data["type"] == "invalid_state"

        conferred = client_for(conferente).post(
            f"{order_url}/conference/",
            {"fully_picked": True, "has_inconsistency": False},
            format="json",
        )
        assert conferred.status_code == status.HTTP_201_CREATED
        assert conferred.data["stage"] == "CONFERRED"
        review_id = conferred.data["id"]

        audited = client_for(auditor).post(
            f"{order_url}/audit/", {"fully_picked": True}, format="json"
        )
        assert audited.status_code == status.HTTP_200_OK
        assert audited.data["stage"] == "AUDITED"

        validated = client_for(gerente).post(
            f"/api/v1/reviews/{review_id}/validate/",
            {"outcome": "CORRECT"},
            format="json",
        )
        assert validated.status_code == status.HTTP_200_OK
        assert validated.data["stage"] == "VALIDATED"
        assert validated.data["validation_status"] == "VALIDATED_CORRECT"

        events = ScoringEvent.objects.filter(order=order)
        assert sorted((e.user_id, e.points) for e in events) == sorted(
            [(separador.id, 10), (conferente.id, 10)]
        )
