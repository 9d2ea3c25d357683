"""Domain error to HTTP response mapping.

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"]; domain errors and DRF's own
errors share one `{"error": {...}}` body that never carries internal details.
"""

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from ticketing.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TIER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TICKET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CATEGORY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.BANNER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_QUANTITY: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_NOT_PUBLISHED: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_ENDED: status.HTTP_409_CONFLICT,
    ErrorCode.SALE_CLOSED: status.HTTP_409_CONFLICT,
    ErrorCode.INSUFFICIENT_INVENTORY: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_RELEASE: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_TICKET_STATUS: status.HTTP_409_CONFLICT,
    ErrorCode.CATEGORY_IN_USE: status.HTTP_409_CONFLICT,
    ErrorCode.SLUG_TAKEN: status.HTTP_409_CONFLICT,
    ErrorCode.EMAIL_TAKEN: status.HTTP_409_CONFLICT,
    ErrorCode.PERSISTENCE_FAILURE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
}


def error_body(error: DomainError) -> dict:
    return {
        "error": {
            "code": error.code.value,
            "message": error.message,
            "retryable": error.retryable,
        }
    }


def domain_error_response(error: DomainError) -> Response:
    http_status = STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST)
    if error.retryable:
        logger.warning("Retryable failure %s", error)
        return Response(error_body(error), status=http_status, headers={"Retry-After": "1"})
    return Response(error_body(error), status=http_status)


def framework_error_response(exc: exceptions.APIException, response: Response) -> Response:
    """Re-shape DRF's own error responses into the same envelope."""
    if isinstance(exc, exceptions.ValidationError):
        body = {
            "code": ErrorCode.INVALID_INPUT.value,
            "message": "Invalid input",
            "retryable": False,
            "fields": response.data,
        }
    else:
        body = {
            "code": exc.default_code.upper(),
            "message": str(exc.detail),
            "retryable": False,
        }
    response.data = {"error": body}
    return response


def exception_handler(exc, context):
    if isinstance(exc, DomainError):
        return domain_error_response(exc)
    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()
    response = drf_exception_handler(exc, context)
    if response is None:
        return None
    return framework_error_response(exc, response)
