"""
DRF exception handler.

Renders every API error as::

    {"status": 403, "error": "forbidden", "message": "...", "timestamp": "...", "errors": {...}}

``errors`` is present only for validation failures and maps field -> messages.
"""

import logging

from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from services.request_management.exceptions import RequestValidationError, ServiceRequestError

logger = logging.getLogger(__name__)


def error_body(status_code, error_code, message, errors=None):
    body = {
        "status": status_code,
        "error": error_code,
        "message": message,
        "timestamp": timezone.now().isoformat(),
    }
    if errors is not None:
        body["errors"] = errors
    return body


def api_exception_handler(exc, context):
    if isinstance(exc, RequestValidationError):
        return Response(error_body(exc.status_code, exc.error_code, exc.message, exc.errors), status=exc.status_code)

    if isinstance(exc, ServiceRequestError):
        return Response(error_body(exc.status_code, exc.error_code, exc.message), status=exc.status_code)

    response = exception_handler(exc, context)
    if response is not None:
        if isinstance(exc, ValidationError):
            errors = response.data if isinstance(response.data, dict) else {"non_field_errors": response.data}
            response.data = error_body(response.status_code, "validation_error", "Validation failed", errors)
        else:
            detail = getattr(exc, "detail", None)
            code = exc.get_codes() if hasattr(exc, "get_codes") else "error"
            response.data = error_body(
                response.status_code,
                code if isinstance(code, str) else "error",
                str(detail) if detail is not None else str(exc),
            )
        return response

    view = context.get("view")
    logger.exception("Unhandled error in %s", type(view).__name__ if view else "unknown view")
    return Response(
        error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "An unexpected error occurred"),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
