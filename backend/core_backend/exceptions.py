"""
Typed service errors and their mapping onto HTTP responses.

Services raise these exceptions; nothing else is allowed to cross the
service boundary (database errors are translated into PersistenceError by
core_backend.persistence). The DRF exception handler below turns them into
JSON responses for the transport adapter.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for every error a service may raise."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "error"
    default_message = "Service error."

    def __init__(self, message=None, detail=None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)

    def as_dict(self):
        data = {"error": self.message, "code": self.code}
        if self.detail:
            data["detail"] = self.detail
        return data


class ValidationError(ServiceError):
    """Bad, missing or out-of-range input. `detail` holds field-level errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_message = "Invalid input."


class NotFoundError(ServiceError):
    """Missing table/order/staff, or a conditional update matched nothing."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not found."


class ConflictError(ServiceError):
    """A transition predicate failed because another transition already happened."""

    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    default_message = "The resource is not in a state that allows this operation."


class AuthorizationError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "You do not have permission to perform this action."


class PersistenceError(ServiceError):
    """I/O failure or timeout in the persistence layer. Never retried here."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "persistence_error"
    default_message = "The data store is unavailable."


class UnsupportedParameterError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "unsupported_parameter"
    default_message = "Unsupported parameter value."


def service_exception_handler(exc, context):
    """
    DRF exception handler that understands ServiceError subclasses and
    falls back to the framework default for everything else.
    """
    if isinstance(exc, ServiceError):
        request = context.get("request")
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            f"{exc.__class__.__name__} on "
            f"{getattr(request, 'method', '?')} {getattr(request, 'path', '?')}: {exc.message}"
        )
        return Response(exc.as_dict(), status=exc.status_code)

    return exception_handler(exc, context)
