"""API tests for /api/v1/orders/ and /api/v1/reviews/."""

from __future__ import annotations

import pytest
from rest_framework import status

from modules.accounts.policy import Actor
from modules.orders.dtos import ReviewFindingsDTO

pytestmark = pytest.mark.integration

ORDERS = "/api/v1/orders/"
REVIEWS = "/api/v1/reviews/"


@pytest.fixture()
def review(workflow_service, make_order, separador, conferente):
    order = make_order(separator=separador)
    return workflow_service.submit_conference(
        Actor.from_user(conferente), str(order.id), ReviewFindingsDTO(fully_picked=True)
    )


class TestOrderAPI:
    def test_create(self, client_for, gerente, separador):
        response = client_for(gerente).post(
            ORDERS,
            {"order_number": "PED-77", "separator_id": str(separador.id)},
            format="json",
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["stage"] == "UNREVIEWED"
        assert response.data["separator_name"] == separador.username
        assert response.data["review_id"] is None

    def test_duplicate_number_is_409(self, client_for, gerente, make_order):
        make_order(order_number="PED-77")
        response = client_for(gerente).post(
            ORDERS, {"order_number": "PED-77"}, format="json"
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_invalid_separator_is_400(self, client_for, gerente, auditor):
        response = client_for(gerente).post(
            ORDERS,
            {"order_number": "PED-77", "separator_id": str(auditor.id)},
            format="json",
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["errors"][0]["attr"] == "separator_id"

    def test_stage_filter(self, client_for, gerente, make_order, review):
        make_order()

        unreviewed = client_for(gerente).get(ORDERS, {"stage": "UNREVIEWED"})
        conferred = client_for(gerente).get(ORDERS, {"stage": "CONFERRED"})
        assert unreviewed.data["count"] == 1
        rows = conferred.data["results"]
        assert [row["id"] for row in rows] == [str(review.order_id)]
        assert conferred.data["results"][0]["review_id"] == str(review.id)

    def test_separator_self_assignment(self, client_for, separador, make_order):
        order = make_order()
        response = client_for(separador).post(
            f"{ORDERS}{order.id}/separator/",
            {"separator_id": str(separador.id)},
            format="json",
        )
        assert response.status_code == status.HTTP_200_OK
        assert str(response.data["separator_id"]) == str(separador.id)

    def test_conference_with_unknown_reason_is_400(
        self, client_for, conferente, make_order
    ):
        order = make_order()
        response = client_for(conferente).post(
            f"{ORDERS}{order.id}/conference/",
            {"has_inconsistency": True, "reasons": ["QUEBRADO"]},
            format="json",
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_repeated_conference_is_409(self, client_for, conferente, review):
        response = client_for(conferente).post(
            f"{ORDERS}{review.order_id}/conference/", {}, format="json"
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_usuario_cannot_audit(self, client_for, usuario, review):
        response = client_for(usuario).post(
            f"{ORDERS}{review.order_id}/audit/", {}, format="json"
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestReviewAPI:
    def test_pending_audit_queue(self, client_for, auditor, review):
        response = client_for(auditor).get(f"{REVIEWS}pending-audit/")
        assert response.status_code == status.HTTP_200_OK
        assert [row["id"] for row in response.data["results"]] == [str(review.id)]

    def test_pending_validation_after_audit(
        self, client_for, auditor, gerente, review
    ):
        client_for(auditor).post(
            f"{ORDERS}{review.order_id}/audit/", {"fully_picked": True}, format="json"
        )
        response = client_for(gerente).get(f"{REVIEWS}pending-validation/")
        assert [row["id"] for row in response.data["results"]] == [str(review.id)]

    def test_validate_before_audit_is_422(self, client_for, gerente, review):
        response = client_for(gerente).post(
            f"{REVIEWS}{review.id}/validate/", {"outcome": "CORRECT"}, format="json"
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_validate_as_auditor_is_403(self, client_for, auditor, review):
        response = client_for(auditor).post(
            f"{REVIEWS}{review.id}/validate/", {"outcome": "CORRECT"}, format="json"
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_invalid_outcome_is_400(self, client_for, gerente, review):
        response = client_for(gerente).post(
            f"{REVIEWS}{review.id}/validate/", {"outcome": "MAYBE"}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_retrieve(self, client_for, gerente, review):
        response = client_for(gerente).get(f"{REVIEWS}{review.id}/")
        assert response.status_code == status.HTTP_200_OK
        assert response.data["stage"] == "CONFERRED"
        assert response.data["order_number"] == review.order.order_number
