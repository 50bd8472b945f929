"""
DRF exception handler that renders ledger errors.

    NotFound        -> 404
    InvalidState    -> 409
    ValidationError -> 400
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import InvalidState, LedgerError, NotFound, ValidationError

logger = logging.getLogger(__name__)


STATUS_BY_ERROR = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (InvalidState, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
)


def ledger_exception_handler(exc, context):
    if isinstance(exc, LedgerError):
        http_status = status.HTTP_400_BAD_REQUEST
        for error_class, code in STATUS_BY_ERROR:
            if isinstance(exc, error_class):
                http_status = code
                break
        view = context.get('view')
        logger.info(
            f"{exc.__class__.__name__} in {view.__class__.__name__ if view else 'unknown view'}: "
            f"{exc.reason} {exc.message}"
        )
        return Response(exc.as_dict(), status=http_status)

    return exception_handler(exc, context)
