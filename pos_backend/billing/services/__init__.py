from .invoice_header import get_invoice_header, list_invoice_lines, update_invoice_header
from .reconciliation import (
    InvoiceBatchResult,
    LineRemoval,
    add_lines_to_invoice,
    available_products,
    create_invoice,
    delete_invoice,
    edit_invoice_line,
    remove_line,
)

__all__ = [
    "InvoiceBatchResult",
    "LineRemoval",
    "create_invoice",
    "edit_invoice_line",
    "add_lines_to_invoice",
    "remove_line",
    "delete_invoice",
    "available_products",
    "list_invoice_lines",
    "get_invoice_header",
    "update_invoice_header",
]
