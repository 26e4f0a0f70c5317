"""Order workflow API views.

``OrderViewSet`` covers the picking side (create, separator, conference,
audit); ``ReviewViewSet`` the manager side (queues, validation and the
conference report).  Both delegate to ``OrderWorkflowService``; errors
are rendered by the project exception handler.
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
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import (
    AssignSeparatorDTO,
    ConferenceReportDTO,
    CreateOrderDTO,
    ReviewFindingsDTO,
    ValidateReviewDTO,
)
from modules.orders.filters import OrderFilter, OrderReviewFilter
from modules.orders.models import Order, OrderReview
from modules.orders.repositories.django_repository import (
    OrderDjangoRepository,
    OrderReviewDjangoRepository,
)
from modules.orders.serializers import (
    AssignSeparatorSerializer,
    ConferenceReportQuerySerializer,
    ConferenceReportRowSerializer,
    CreateOrderSerializer,
    OrderReviewSerializer,
    OrderSerializer,
    ReviewFindingsSerializer,
    ValidateReviewSerializer,
)
from modules.orders.services import OrderWorkflowService
from modules.scoring.repositories.django_repository import ScoringDjangoRepository
from modules.scoring.services import ScoringLedger
from modules.shipments.repositories.django_repository import ShipmentDjangoRepository


def build_workflow_service() -> OrderWorkflowService:
    return OrderWorkflowService(
        order_repository=OrderDjangoRepository(),
        review_repository=OrderReviewDjangoRepository(),
        user_repository=UserDjangoRepository(),
        shipment_repository=ShipmentDjangoRepository(),
        ledger=ScoringLedger(ScoringDjangoRepository()),
    )


class OrderViewSet(GenericViewSet):
    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "order_number"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_workflow_service()

    def get_queryset(self):
        return self._service.list_orders()

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = OrderSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        return Response(OrderSerializer(self._service.get_order(pk)).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.create_order(
            Actor.from_user(request.user),
            CreateOrderDTO(**serializer.validated_data),
        )
        return Response(
            OrderSerializer(self._service.get_order(str(order.id))).data,
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["post"])
    def separator(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/separator/"""
        serializer = AssignSeparatorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.assign_separator(
            Actor.from_user(request.user),
            order_id=pk,
            dto=AssignSeparatorDTO(**serializer.validated_data),
        )
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def conference(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/conference/"""
        serializer = ReviewFindingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = self._service.submit_conference(
            Actor.from_user(request.user),
            order_id=pk,
            dto=ReviewFindingsDTO(**serializer.validated_data),
        )
        return Response(
            OrderReviewSerializer(review).data, status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=["post"])
    def audit(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/audit/"""
        serializer = ReviewFindingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = self._service.submit_audit(
            Actor.from_user(request.user),
            order_id=pk,
            dto=ReviewFindingsDTO(**serializer.validated_data),
        )
        return Response(OrderReviewSerializer(review).data)


class ReviewViewSet(GenericViewSet):
    queryset = OrderReview.objects.all()
    serializer_class = OrderReviewSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = OrderReviewFilter
    ordering_fields = ["created_at", "conferred_at", "audited_at", "validated_at"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_workflow_service()

    def get_queryset(self):
        return self._service.list_reviews()

    def _paginated(self, queryset) -> Response:
        page = self.paginate_queryset(queryset)
        serializer = OrderReviewSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def list(self, request: Request) -> Response:
        """GET /api/v1/reviews/"""
        return self._paginated(self.filter_queryset(self.get_queryset()))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/reviews/{pk}/"""
        return Response(OrderReviewSerializer(self._service.get_review(pk)).data)

    @action(detail=False, methods=["get"], url_path="pending-audit")
    def pending_audit(self, request: Request) -> Response:
        """GET /api/v1/reviews/pending-audit/"""
        return self._paginated(self._service.pending_audit())

    @action(detail=False, methods=["get"], url_path="pending-validation")
    def pending_validation(self, request: Request) -> Response:
        """GET /api/v1/reviews/pending-validation/"""
        return self._paginated(self._service.pending_validation())

    @action(detail=False, methods=["get"])
    def report(self, request: Request) -> Response:
        """GET /api/v1/reviews/report/

        Paginated rows plus a ``summary`` block computed over the whole
        filtered window, not just the current page.
        """
        query = ConferenceReportQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        reviews, summary = self._service.conference_report(
            Actor.from_user(request.user),
            ConferenceReportDTO(**query.validated_data),
        )
        page = self.paginate_queryset(reviews)
        response = self.get_paginated_response(
            ConferenceReportRowSerializer(page, many=True).data
        )
        response.data["summary"] = summary
        return response

    @action(detail=True, methods=["post"])
    def validate(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/reviews/{pk}/validate/"""
        serializer = ValidateReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = self._service.validate(
            Actor.from_user(request.user),
            review_id=pk,
            dto=ValidateReviewDTO(**serializer.validated_data),
        )
        return Response(OrderReviewSerializer(review).data)
