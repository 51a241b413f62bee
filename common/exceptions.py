"""Shared error taxonomy and the DRF exception handler.

Services raise the plain exceptions below; the API layer never builds error
responses by hand. ``api_exception_handler`` turns domain errors, DRF errors
and unexpected failures into the uniform error envelope:

    {"success": false, "message": "...", "code": "...", "errors": [...]}
"""

import structlog
from django.conf import settings
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for business-rule and lookup failures raised by services."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "error"
    default_message = "Request could not be processed."

    def __init__(self, message=None, *, field=None, **context):
        self.message = message or self.default_message
        self.field = field
        self.context = context
        super().__init__(self.message)


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not found."


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "You are not allowed to perform this action."


class Conflict(DomainError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    default_message = "The request conflicts with the current state."


class InvalidTransition(Conflict):
    code = "invalid_transition"
    default_message = "Status transition is not allowed."


class BusinessRuleViolation(DomainError):
    code = "business_rule"


class Unavailable(DomainError):
    code = "unavailable"
    default_message = "The referenced item is no longer available."


# ------------------------------ helpers ------------------------------

def _flatten_errors(detail, field=None):
    """Flatten DRF's nested error detail into ``[{"field", "message"}]``."""
    if isinstance(detail, dict):
        out = []
        for key, value in detail.items():
            name = None if key in ("non_field_errors", "detail") else key
            if field and name:
                name = f"{field}.{name}"
            out.extend(_flatten_errors(value, name or field))
        return out
    if isinstance(detail, (list, tuple)):
        out = []
        for value in detail:
            out.extend(_flatten_errors(value, field))
        return out
    return [{"field": field, "message": str(detail)}]


def error_response(message, *, code, status_code, errors=None, extra=None):
    body = {
        "success": False,
        "message": message,
        "code": code,
        "errors": errors or [],
    }
    if extra:
        body.update(extra)
    return Response(body, status=status_code)


def _domain_error_response(exc: DomainError):
    errors = [{"field": exc.field, "message": exc.message}]
    extra = {"context": exc.context} if exc.context else None
    return error_response(
        exc.message, code=exc.code, status_code=exc.status_code, errors=errors, extra=extra
    )


def _api_exception_response(exc: exceptions.APIException, response: Response):
    if isinstance(exc, exceptions.ValidationError):
        return error_response(
            "Validation failed",
            code="validation_error",
            status_code=response.status_code,
            errors=_flatten_errors(exc.detail),
        )
    errors = _flatten_errors(exc.detail)
    message = errors[0]["message"] if errors else str(exc)
    codes = exc.get_codes()
    code = codes if isinstance(codes, str) else exc.default_code
    response.data = {
        "success": False,
        "message": message,
        "code": code,
        "errors": errors,
    }
    return response


def api_exception_handler(exc, context):
    """REST framework exception handler producing the error envelope."""
    if isinstance(exc, DomainError):
        return _domain_error_response(exc)

    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()

    response = exception_handler(exc, context)
    if response is not None:
        return _api_exception_response(exc, response)

    request = context.get("request")
    logger.exception(
        "unhandled_api_error",
        path=getattr(request, "path", None),
        method=getattr(request, "method", None),
        view=context.get("view").__class__.__name__ if context.get("view") else None,
    )
    extra = {"detail": str(exc)} if settings.DEBUG else None
    return error_response(
        "Internal server error",
        code="internal_error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        extra=extra,
    )
