"""Driver catalog API views."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.policy import Actor
from modules.core.pagination import StandardResultsSetPagination
from modules.drivers.dtos import CreateDriverDTO, UpdateDriverDTO
from modules.drivers.filters import DriverFilter
from modules.drivers.models import Driver
from modules.drivers.repositories.django_repository import DriverDjangoRepository
from modules.drivers.serializers import (
    CreateDriverSerializer,
    DriverSerializer,
    UpdateDriverSerializer,
)
from modules.drivers.services import DriverService


class DriverViewSet(GenericViewSet):
    queryset = Driver.objects.all()
    serializer_class = DriverSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = DriverFilter
    filter_backends = [DjangoFilterBackend]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = DriverService(driver_repository=DriverDjangoRepository())

    def get_queryset(self):
        return self._service.list_drivers()

    def list(self, request: Request) -> Response:
        """GET /api/v1/drivers/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = DriverSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/drivers/{pk}/"""
        return Response(DriverSerializer(self._service.get_driver(pk)).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/drivers/"""
        serializer = CreateDriverSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        driver = self._service.create_driver(
            Actor.from_user(request.user),
            CreateDriverDTO(**serializer.validated_data),
        )
        return Response(DriverSerializer(driver).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/drivers/{pk}/"""
        serializer = UpdateDriverSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        driver = self._service.update_driver(
            Actor.from_user(request.user),
            driver_id=pk,
            dto=UpdateDriverDTO(**serializer.validated_data),
        )
        return Response(DriverSerializer(driver).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/drivers/{pk}/"""
        self._service.delete_driver(Actor.from_user(request.user), pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
