"""Invoice API views.

Exposes ``InvoiceService`` over HTTP.  Domain exceptions propagate to
the project exception handler, which renders them with their status.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.policy import Actor
from modules.core.pagination import StandardResultsSetPagination
from modules.invoices.dtos import CreateInvoiceBatchDTO, CreateInvoiceDTO
from modules.invoices.filters import InvoiceFilter
from modules.invoices.models import Invoice
from modules.invoices.repositories.django_repository import InvoiceDjangoRepository
from modules.invoices.serializers import (
    BindInvoiceSerializer,
    CreateInvoiceBatchSerializer,
    CreateInvoiceSerializer,
    InvoiceSerializer,
)
from modules.invoices.services import InvoiceService
from modules.shipments.repositories.django_repository import ShipmentDjangoRepository


class InvoiceViewSet(GenericViewSet):
    """ViewSet for the Invoice Registry.

    Does **not** extend ``ModelViewSet``: every write goes through the
    service so binding and authorization rules apply.
    """

    queryset = Invoice.objects.all()
    serializer_class = InvoiceSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = InvoiceFilter
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    ordering_fields = ["created_at", "number", "value"]
    ordering = ["-created_at", "-id"]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = InvoiceService(
            invoice_repository=InvoiceDjangoRepository(),
            shipment_repository=ShipmentDjangoRepository(),
        )

    def get_queryset(self):
        return self._service.list_invoices()

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/invoices/?binding=UNBOUND&code=...&start_date=..."""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = InvoiceSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        invoice = self._service.get_invoice(pk)
        return Response(InvoiceSerializer(invoice).data)

    # ------------------------------------------------------------------
    # Create / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/invoices/"""
        serializer = CreateInvoiceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        invoice = self._service.create_invoice(
            Actor.from_user(request.user),
            CreateInvoiceDTO(**serializer.validated_data),
        )
        return Response(
            InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=["post"], url_path="batch")
    def batch(self, request: Request) -> Response:
        """POST /api/v1/invoices/batch/ - all-or-nothing batch intake."""
        serializer = CreateInvoiceBatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        items = serializer.validated_data["items"]
        dto = CreateInvoiceBatchDTO(items=[CreateInvoiceDTO(**item) for item in items])
        invoices = self._service.create_many(Actor.from_user(request.user), dto.items)
        return Response(
            InvoiceSerializer(invoices, many=True).data,
            status=status.HTTP_201_CREATED,
        )

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        self._service.delete_invoice(Actor.from_user(request.user), pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def bind(self, request: Request, pk: str | None = None) -> Response:
        serializer = BindInvoiceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        invoice = self._service.bind(
            Actor.from_user(request.user),
            invoice_id=pk,
            shipment_id=str(serializer.validated_data["shipment_id"]),
        )
        return Response(InvoiceSerializer(invoice).data)

    @action(detail=True, methods=["post"])
    def unbind(self, request: Request, pk: str | None = None) -> Response:
        invoice = self._service.unbind(Actor.from_user(request.user), invoice_id=pk)
        return Response(InvoiceSerializer(invoice).data)
