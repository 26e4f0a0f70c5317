"""Request correlation for structured logs.

Every request gets a correlation id (the caller's ``X-Request-ID`` or a
fresh UUID4).  It is bound into structlog's context vars so each log
line of the request, including domain events logged by services,
carries it, and it is echoed back on the response.
"""

import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

REQUEST_ID_HEADER = "X-Request-ID"

logger = structlog.get_logger(__name__)


class CorrelationIdMiddleware:
    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.META.get("HTTP_X_REQUEST_ID") or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=cid,
            method=request.method,
            path=request.path,
        )

        started = time.monotonic()
        logger.info("request.started")
        response = self.get_response(request)

        duration_ms = round((time.monotonic() - started) * 1000, 2)
        log = logger.bind(status_code=response.status_code, duration_ms=duration_ms)
        if response.status_code >= 500:
            log.error("request.finished")
        elif response.status_code >= 400:
            log.warning("request.finished")
        else:
            log.info("request.finished")

        response[REQUEST_ID_HEADER] = cid
        return response
