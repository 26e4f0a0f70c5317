"""Integration tests for standardized pagination."""

from __future__ import annotations

import pytest

from modules.invoices.models import Invoice

pytestmark = pytest.mark.integration


@pytest.fixture()
def invoice_batch():
    """Create a batch of invoices for pagination tests."""
    invoices = [
        Invoice(code=f"CODE-{idx:03d}", number=f"{idx:05d}") for idx in range(1, 121)
    ]
    Invoice.objects.bulk_create(invoices)
    return invoices


class TestPagination:
    def test_default_page_size(self, client_for, usuario, invoice_batch):
        response = client_for(usuario).get("/api/v1/invoices/")
        assert response.status_code == 200
        assert response.data["count"] == 120
        assert len(response.data["results"]) == 20
        assert response.data["next"] is not None
        assert response.data["previous"] is None

    def test_custom_page_size(self, client_for, usuario, invoice_batch):
        response = client_for(usuario).get("/api/v1/invoices/?page_size=50")
        assert response.status_code == 200
        assert len(response.data["results"]) == 50
        assert response.data["next"] is not None

    def test_max_page_size(self, client_for, usuario, invoice_batch):
        response = client_for(usuario).get("/api/v1/invoices/?page_size=1000")
        assert response.status_code == 200
        assert len(response.data["results"]) == 100
        assert response.data["next"] is not None

    def test_last_page(self, client_for, usuario, invoice_batch):
        response = client_for(usuario).get("/api/v1/invoices/?page_size=50&page=3")
        assert response.status_code == 200
        assert len(response.data["results"]) == 20
        assert response.data["next"] is None
