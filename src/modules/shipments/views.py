"""Shipment API views.

Exposes ``ShipmentService`` via a DRF ViewSet.  Errors raised by the
service (policy denials, state conflicts, validation) are rendered by the
project exception handler; the view only maps HTTP to use cases.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.policy import Actor
from modules.core.pagination import StandardResultsSetPagination
from modules.invoices.repositories.django_repository import InvoiceDjangoRepository
from modules.shipments.dtos import (
    AttachSignatureDTO,
    CreateShipmentDTO,
    UpdateShipmentDTO,
)
from modules.shipments.filters import ShipmentFilter
from modules.shipments.models import Shipment
from modules.shipments.repositories.django_repository import ShipmentDjangoRepository
from modules.shipments.serializers import (
    CreateShipmentSerializer,
    LinkInvoicesSerializer,
    ShipmentListSerializer,
    ShipmentSerializer,
    SignatureSerializer,
    UpdateShipmentSerializer,
)
from modules.shipments.services import ShipmentService


class ShipmentViewSet(GenericViewSet):
    queryset = Shipment.objects.all()
    serializer_class = ShipmentSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = ShipmentFilter
    search_fields = ["driver_name", "responsible_name", "note"]
    ordering_fields = ["created_at", "manifest_number", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ShipmentService(
            shipment_repository=ShipmentDjangoRepository(),
            invoice_repository=InvoiceDjangoRepository(),
        )

    def get_queryset(self):
        return self._service.list_shipments()

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/shipments/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = ShipmentListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/shipments/{pk}/"""
        shipment = self._service.get_shipment(pk)
        return Response(ShipmentSerializer(shipment).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/shipments/"""
        serializer = CreateShipmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        shipment = self._service.create_shipment(
            Actor.from_user(request.user),
            CreateShipmentDTO(**serializer.validated_data),
        )
        return Response(
            ShipmentSerializer(shipment).data, status=status.HTTP_201_CREATED
        )

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/shipments/{pk}/"""
        serializer = UpdateShipmentSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        shipment = self._service.update_shipment(
            Actor.from_user(request.user),
            shipment_id=pk,
            dto=UpdateShipmentDTO(**serializer.validated_data),
        )
        return Response(ShipmentSerializer(shipment).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/shipments/{pk}/ - unbinds invoices, then deletes."""
        self._service.delete_shipment(Actor.from_user(request.user), pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Lifecycle actions
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def finalize(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/shipments/{pk}/finalize/"""
        shipment = self._service.finalize(Actor.from_user(request.user), pk)
        return Response(ShipmentSerializer(shipment).data)

    @action(detail=True, methods=["post"])
    def signature(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/shipments/{pk}/signature/"""
        serializer = SignatureSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        shipment = self._service.attach_signature(
            Actor.from_user(request.user),
            shipment_id=pk,
            dto=AttachSignatureDTO(**serializer.validated_data),
        )
        return Response(ShipmentSerializer(shipment).data)

    @action(detail=True, methods=["post"], url_path="invoices")
    def link_invoices(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/shipments/{pk}/invoices/"""
        serializer = LinkInvoicesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        shipment = self._service.link_invoices(
            Actor.from_user(request.user),
            shipment_id=pk,
            invoice_ids=serializer.validated_data["invoice_ids"],
        )
        return Response(ShipmentSerializer(shipment).data)
