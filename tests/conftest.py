import pytest

from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.accounts.constants import UserRole
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.drivers.repositories.django_repository import DriverDjangoRepository
from modules.drivers.services import DriverService
from modules.invoices.models import Invoice
from modules.invoices.repositories.django_repository import InvoiceDjangoRepository
from modules.invoices.services import InvoiceService
from modules.orders.models import Order
from modules.orders.repositories.django_repository import (
    OrderDjangoRepository,
    OrderReviewDjangoRepository,
)
from modules.orders.services import OrderWorkflowService
from modules.scoring.repositories.django_repository import ScoringDjangoRepository
from modules.scoring.services import ScoringLedger
from modules.shipments.constants import Carrier
from modules.shipments.models import Shipment
from modules.shipments.repositories.django_repository import ShipmentDjangoRepository
from modules.shipments.services import ShipmentService

User = get_user_model()

VALID_CPF = "52998224725"
# 100+ chars, data URL prefix
SIGNATURE_IMAGE = "data:image/png;base64," + "iVBORw0KGgo" * 12


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


# ---------------------------------------------------------------------------
# Users and actors
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_user():
    counter = {"n": 0}

    def _make(role=UserRole.USUARIO, username=None, is_active=True):
        counter["n"] += 1
        return User.objects.create_user(
            username=username or f"{role.lower()}{counter['n']}",
            password="testpass123",
            role=role,
            is_active=is_active,
        )

    return _make


@pytest.fixture()
def admin(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture()
def gerente(make_user):
    return make_user(UserRole.GERENTE)


@pytest.fixture()
def usuario(make_user):
    return make_user(UserRole.USUARIO)


@pytest.fixture()
def separador(make_user):
    return make_user(UserRole.SEPARADOR)


@pytest.fixture()
def conferente(make_user):
    return make_user(UserRole.CONFERENTE)


@pytest.fixture()
def auditor(make_user):
    return make_user(UserRole.AUDITOR)


@pytest.fixture()
def client_for():
    """Build an APIClient force-authenticated as *user*."""

    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client


@pytest.fixture()
def correlated_client_for(client_for):
    """Authenticated client that sends a fixed ``X-Request-ID`` on every call."""

    def _client(user, request_id):
        client = client_for(user)
        client.defaults["HTTP_X_REQUEST_ID"] = request_id
        return client

    return _client


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@pytest.fixture()
def invoice_service():
    return InvoiceService(
        invoice_repository=InvoiceDjangoRepository(),
        shipment_repository=ShipmentDjangoRepository(),
    )


@pytest.fixture()
def shipment_service():
    return ShipmentService(
        shipment_repository=ShipmentDjangoRepository(),
        invoice_repository=InvoiceDjangoRepository(),
    )


@pytest.fixture()
def driver_service():
    return DriverService(driver_repository=DriverDjangoRepository())


@pytest.fixture()
def ledger():
    return ScoringLedger(ScoringDjangoRepository())


@pytest.fixture()
def workflow_service(ledger):
    return OrderWorkflowService(
        order_repository=OrderDjangoRepository(),
        review_repository=OrderReviewDjangoRepository(),
        user_repository=UserDjangoRepository(),
        shipment_repository=ShipmentDjangoRepository(),
        ledger=ledger,
    )


# ---------------------------------------------------------------------------
# Domain data
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_shipment(usuario):
    def _make(**overrides):
        fields = {
            "driver_name": "João da Silva",
            "driver_tax_id": VALID_CPF,
            "responsible_name": "Maria Oliveira",
            "carrier": Carrier.ACERT,
            "created_by": usuario,
        }
        fields.update(overrides)
        shipment = Shipment(**fields)
        shipment.save()
        return shipment

    return _make


@pytest.fixture()
def shipment(make_shipment):
    return make_shipment()


@pytest.fixture()
def make_invoice():
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "code": f"CODE-{counter['n']:04d}",
            "number": f"{1000 + counter['n']}",
        }
        fields.update(overrides)
        return Invoice.objects.create(**fields)

    return _make


@pytest.fixture()
def make_order():
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {"order_number": f"PED-{counter['n']:05d}"}
        fields.update(overrides)
        return Order.objects.create(**fields)

    return _make
