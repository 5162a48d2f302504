"""Boundary error translation for the REST API.

``api_exception_handler`` is installed as DRF's ``EXCEPTION_HANDLER``.
Every error leaving the API uses the same body::

    {
        "timestamp": "2026-01-01T12:00:00+00:00",
        "status": 409,
        "message": "Customer code 'C123' already exists.",
        "path": "/api/v1/customers/",
        "field_errors": {"customer_code": ["..."]}   # optional
    }

Three layers, checked in order:

1. ``DomainError`` subclasses raised by the service layer carry their own
   HTTP status and (optionally) per-field messages.
2. DRF ``APIException`` (auth, parse, throttle, method-not-allowed...)
   keeps DRF's status code; validation details become ``field_errors``.
3. Anything else is an infrastructure failure: logged with the traceback
   and answered with a generic 500 that never leaks internals.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.http import Http404
from django.utils import timezone
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = structlog.get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


class DomainError(Exception):
    """Base class for business-rule violations raised by services."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request could not be processed."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def field_errors(self) -> Optional[Dict[str, List[str]]]:
        return None


def build_error_body(
    status_code: int,
    message: str,
    path: str,
    field_errors: Optional[Dict[str, List[str]]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "timestamp": timezone.now().isoformat(),
        "status": status_code,
        "message": message,
        "path": path,
    }
    if field_errors:
        body["field_errors"] = field_errors
    return body


def _flatten_detail(detail: Any) -> Dict[str, List[str]]:
    """Turn DRF ``ValidationError.detail`` into ``{field: [messages]}``."""
    if isinstance(detail, dict):
        return {
            str(key): [str(item) for item in value]
            if isinstance(value, list)
            else [str(value)]
            for key, value in detail.items()
        }
    if isinstance(detail, list):
        return {"non_field_errors": [str(item) for item in detail]}
    return {"non_field_errors": [str(detail)]}


def _request_path(context: Dict[str, Any]) -> str:
    request = context.get("request")
    return request.path if request is not None else ""


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    path = _request_path(context)

    if isinstance(exc, DomainError):
        logger.info(
            "api.domain_error",
            error=type(exc).__name__,
            status_code=exc.status_code,
            path=path,
        )
        return Response(
            build_error_body(exc.status_code, exc.message, path, exc.field_errors),
            status=exc.status_code,
        )

    response = drf_exception_handler(exc, context)
    if response is not None:
        field_errors = None
        if isinstance(exc, exceptions.ValidationError):
            field_errors = _flatten_detail(exc.detail)
            message = "Validation failed"
        elif isinstance(exc, Http404):
            message = "Not found."
        else:
            detail = getattr(exc, "detail", None)
            message = str(detail) if detail is not None else str(exc)
        response.data = build_error_body(
            response.status_code, message, path, field_errors
        )
        return response

    logger.exception("api.unhandled_error", error=type(exc).__name__, path=path)
    return Response(
        build_error_body(
            status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE, path
        ),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
