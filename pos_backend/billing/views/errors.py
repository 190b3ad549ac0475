# billing/views/errors.py

"""
API ERROR NORMALIZATION (billing)

Maps billing service errors onto HTTP responses:
- validation_error            -> 400
- not_found                   -> 404
- out_of_stock / duplicate_line / conflict -> 409
"""

from rest_framework import status
from rest_framework.response import Response

from billing.services.exceptions import (
    ConflictError,
    DuplicateLineError,
    InvoiceValidationError,
    NotFoundError,
    OutOfStockError,
    ReconciliationError,
)

STATUS_BY_ERROR = (
    (InvoiceValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (OutOfStockError, status.HTTP_409_CONFLICT),
    (DuplicateLineError, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def status_for(exc: ReconciliationError) -> int:
    for error_class, http_status in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def error_response(exc: ReconciliationError) -> Response:
    """
    Canonical API error response.
    """
    return Response({"error": exc.as_dict()}, status=status_for(exc))


class ReconciliationErrorMixin:
    """
    APIView mixin: billing service errors become canonical error responses.
    Everything else goes through DRF's normal exception handling.
    """

    def handle_exception(self, exc):
        if isinstance(exc, ReconciliationError):
            return error_response(exc)
        return super().handle_exception(exc)
