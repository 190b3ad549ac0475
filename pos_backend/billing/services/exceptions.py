# billing/services/exceptions.py

"""
BILLING SERVICE ERRORS

Centralized domain errors for invoice / stock reconciliation.

Every error carries:
- code:          stable machine-readable kind (used by the HTTP layer)
- product_name:  the product the error is about, when there is one
"""


class ReconciliationError(Exception):
    """Base exception for all billing service failures."""

    code = "reconciliation_error"

    def __init__(self, message, *, product_name=None):
        super().__init__(message)
        self.message = message
        self.product_name = product_name

    def as_dict(self) -> dict:
        data = {"code": self.code, "message": self.message}
        if self.product_name is not None:
            data["product_name"] = self.product_name
        return data


class InvoiceValidationError(ReconciliationError):
    """Malformed or missing input (bad invoice number, bad quantity, unknown field)."""

    code = "validation_error"


class NotFoundError(ReconciliationError):
    """A referenced invoice, line, or product does not exist."""

    code = "not_found"


class InvoiceNotFoundError(NotFoundError):
    pass


class LineNotFoundError(NotFoundError):
    pass


class ProductNotFoundError(NotFoundError):
    pass


class OutOfStockError(ReconciliationError):
    """Requested decrement exceeds the product's available quantity."""

    code = "out_of_stock"


class DuplicateLineError(ReconciliationError):
    """The product already has a line on this invoice."""

    code = "duplicate_line"


class ConflictError(ReconciliationError):
    """Concurrent update race persisted after the retry budget was exhausted."""

    code = "conflict"
