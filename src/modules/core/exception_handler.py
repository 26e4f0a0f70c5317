"""DRF exception handler producing a single error document shape.

Every failure leaving the API looks like::

    {"type": "<kind>", "errors": [{"code": "...", "detail": "...", "attr": null}]}

Domain errors keep their ``kind``/``status_code``; DRF errors (parse,
serializer validation, authentication, throttling) and pydantic
validation errors are folded into the same shape.  Anything else is
logged server-side and answered with a generic ``internal`` error.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from modules.core.exceptions import DomainError

logger = structlog.get_logger(__name__)

_DRF_KINDS = {
    exceptions.ParseError: "validation_error",
    exceptions.ValidationError: "validation_error",
    exceptions.NotAuthenticated: "not_authenticated",
    exceptions.AuthenticationFailed: "not_authenticated",
    exceptions.PermissionDenied: "permission_denied",
    exceptions.NotFound: "not_found",
    exceptions.MethodNotAllowed: "method_not_allowed",
    exceptions.Throttled: "throttled",
}


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    if isinstance(exc, DomainError):
        return _domain_response(exc)

    if isinstance(exc, PydanticValidationError):
        errors = [
            _error(
                code=item["type"],
                detail=item["msg"],
                attr=".".join(str(part) for part in item["loc"]) or None,
            )
            for item in exc.errors()
        ]
        return Response(
            {"type": "validation_error", "errors": errors},
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = drf_exception_handler(exc, context)
    if response is not None:
        response.data = {
            "type": _drf_kind(exc),
            "errors": _flatten(response.data),
        }
        return response

    view = context.get("view")
    logger.exception(
        "api.unhandled_error",
        view=view.__class__.__name__ if view is not None else None,
        error_type=exc.__class__.__name__,
    )
    return Response(
        {
            "type": "internal",
            "errors": [_error(code="internal", detail="Internal server error.")],
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _domain_response(exc: DomainError) -> Response:
    log = logger.bind(kind=exc.kind, status_code=exc.status_code)
    if exc.status_code in (401, 403):
        log.warning("api.access_denied")
    else:
        log.info("api.domain_error", detail=exc.message)

    errors = [
        _error(code=item.code, detail=item.detail, attr=item.field)
        for item in exc.errors
    ] or [_error(code=exc.kind, detail=exc.message)]
    return Response({"type": exc.kind, "errors": errors}, status=exc.status_code)


def _drf_kind(exc: Exception) -> str:
    for exc_class, kind in _DRF_KINDS.items():
        if isinstance(exc, exc_class):
            return kind
    return "error"


def _error(code: str, detail: str, attr: Optional[str] = None) -> Dict[str, Any]:
    return {"code": code, "detail": detail, "attr": attr}


def _flatten(data: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    """Turn DRF's nested ``ErrorDetail`` structures into a flat list."""
    if isinstance(data, dict):
        if set(data) == {"detail"}:
            return _flatten(data["detail"], attr)
        flattened: List[Dict[str, Any]] = []
        for key, value in data.items():
            child = key if attr is None else f"{attr}.{key}"
            flattened.extend(_flatten(value, child))
        return flattened
    if isinstance(data, list):
        flattened = []
        for index, value in enumerate(data):
            if isinstance(value, (dict, list)):
                child = str(index) if attr is None else f"{attr}.{index}"
                flattened.extend(_flatten(value, child))
            else:
                flattened.extend(_flatten(value, attr))
        return flattened
    code = getattr(data, "code", "error")
    return [_error(code=str(code), detail=str(data), attr=attr)]
