"""Account API views."""

from __future__ import annotations

from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet
from rest_framework_simplejwt.views import TokenObtainPairView

from modules.accounts.models import User
from modules.accounts.policy import Actor
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.accounts.serializers import (
    RoleTokenObtainPairSerializer,
    UserSerializer,
    UserStatusSerializer,
)
from modules.accounts.services import UserService
from modules.core.pagination import StandardResultsSetPagination


class RoleTokenObtainPairView(TokenObtainPairView):
    serializer_class = RoleTokenObtainPairSerializer
    throttle_scope = "login"


class UserViewSet(GenericViewSet):
    """GET /users/?role=SEPARADOR and POST /users/{id}/status/."""

    queryset = User.objects.all()
    serializer_class = UserSerializer
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = UserService(repository=UserDjangoRepository())

    def list(self, request: Request) -> Response:
        queryset = self._service.list_users(
            Actor.from_user(request.user), role=request.query_params.get("role")
        )
        page = self.paginate_queryset(queryset)
        serializer = UserSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request: Request, pk: str | None = None) -> Response:
        serializer = UserStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = self._service.set_active(
            Actor.from_user(request.user),
            user_id=pk,
            active=serializer.validated_data["is_active"],
        )
        return Response(UserSerializer(user).data)
