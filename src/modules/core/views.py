import time
from typing import Any, Callable, Dict

import structlog
from django.core.cache import cache
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.accounts.policy import Actor
from modules.core.services import dashboard_counters
from modules.orders.constants import InconsistencyReason
from modules.shipments.constants import Carrier

logger = structlog.get_logger(__name__)

HEALTH_CACHE_KEY = "_health_check"


def _check_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _check_cache() -> None:
    cache.set(HEALTH_CACHE_KEY, "ok", 10)
    if cache.get(HEALTH_CACHE_KEY) != "ok":
        raise ConnectionError("Cache read failed")


_DEPENDENCY_CHECKS: Dict[str, Callable[[], None]] = {
    "database": _check_database,
    "cache": _check_cache,
}


def _run_check(name: str, check: Callable[[], None]) -> Dict[str, Any]:
    start = time.monotonic()
    try:
        check()
    except Exception:  # noqa: BLE001 - reported as a down dependency
        logger.exception("health_check.dependency_down", dependency=name)
        return {"status": "down"}
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
    }


def health_check(request: HttpRequest) -> JsonResponse:
    """Liveness plus dependency checks; 503 when any dependency is down."""
    services = {
        name: _run_check(name, check) for name, check in _DEPENDENCY_CHECKS.items()
    }
    healthy = all(result["status"] == "up" for result in services.values())
    overall = "healthy" if healthy else "unhealthy"
    logger.info("health_check.completed", status=overall)
    return JsonResponse(
        {
            "status": overall,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )


class MeView(APIView):
    """Current user as the domain sees it.

    * No token  -> 401
    * Bad token -> 401
    * Valid JWT -> 200 with id, username and role
    """

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        user = request.user
        return Response(
            {
                "id": str(user.pk),
                "username": user.get_username(),
                "role": user.role,
                "is_active": user.is_active,
            }
        )


class CarrierCatalogView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        return Response(
            [{"code": value, "label": label} for value, label in Carrier.choices]
        )


class InconsistencyReasonCatalogView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        return Response(
            [
                {"code": value, "label": label}
                for value, label in InconsistencyReason.choices
            ]
        )


class DashboardView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        return Response(dashboard_counters(Actor.from_user(request.user)))
