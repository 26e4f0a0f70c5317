"""Integration tests for standardized error responses."""

import pytest

pytestmark = pytest.mark.integration


def _assert_standard_shape(data):
    assert "type" in data
    assert "errors" in data
    assert isinstance(data["errors"], list)
    assert data["errors"]
    for error in data["errors"]:
        assert set(error) == {"code", "detail", "attr"}


class TestStandardizedErrors:
    def test_auth_error_has_standard_format(self, api_client):
        response = api_client.get("/api/v1/invoices/")
        assert response.status_code == 401
        data = response.json()
        _assert_standard_shape(data)
        assert data["type"] == "not_authenticated"

    def test_parse_error_has_standard_format(self, client_for, usuario):
        response = client_for(usuario).post(
            "/api/v1/invoices/", data="{", content_type="application/json"
        )
        assert response.status_code == 400
        data = response.json()
        _assert_standard_shape(data)
        assert data["type"] == "validation_error"

    def test_serializer_errors_carry_attr(self, client_for, usuario):
        response = client_for(usuario).post(
            "/api/v1/shipments/", {"carrier": "ACERT"}, format="json"
        )
        assert response.status_code == 400
        data = response.json()
        _assert_standard_shape(data)
        attrs = {error["attr"] for error in data["errors"]}
        assert {"driver_name", "driver_tax_id", "responsible_name"} <= attrs

    def test_domain_validation_error(self, client_for, usuario):
        response = client_for(usuario).post(
            "/api/v1/invoices/", {"code": " ", "number": ""}, format="json"
        )
        assert response.status_code == 400
        data = response.json()
        _assert_standard_shape(data)
        assert {(e["attr"], e["code"]) for e in data["errors"]} == {
            ("code", "required"),
            ("number", "required"),
        }

    def test_forbidden_has_standard_format(self, client_for, separador):
        response = client_for(separador).post(
            "/api/v1/invoices/", {"code": "A", "number": "1"}, format="json"
        )
        assert response.status_code == 403
        data = response.json()
        _assert_standard_shape(data)
        assert data == {
            "type": "permission_denied",
            "errors": [
                {
                    "code": "permission_denied",
                    "detail": "You do not have permission to perform this action.",
                    "attr": None,
                }
            ],
        }

    def test_not_found_has_standard_format(self, client_for, usuario):
        response = client_for(usuario).get(
            "/api/v1/shipments/00000000-0000-7000-8000-000000000000/"
        )
        assert response.status_code == 404
        data = response.json()
        _assert_standard_shape(data)
        assert data["type"] == "not_found"

    def test_conflict_has_standard_format(self, client_for, usuario, make_invoice):
        make_invoice(code="A", number="1")
        response = client_for(usuario).post(
            "/api/v1/invoices/", {"code": "A", "number": "9"}, format="json"
        )
        assert response.status_code == 409
        data = response.json()
        _assert_standard_shape(data)
        assert data["type"] == "conflict"

    def test_invalid_state_has_standard_format(self, client_for, usuario, make_invoice):
        invoice = make_invoice()
        response = client_for(usuario).post(f"/api/v1/invoices/{invoice.id}/unbind/")
        assert response.status_code == 422
        data = response.json()
        _assert_standard_shape(data)
        assert data["type"] == "invalid_state"
        assert data["errors"][0]["code"] == "invalid_state"

    def test_method_not_allowed(self, client_for, usuario):
        response = client_for(usuario).put("/api/v1/invoices/", {}, format="json")
        assert response.status_code == 405
        _assert_standard_shape(response.json())
