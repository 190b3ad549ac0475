from .invoice_summary import (
    attach_headers,
    grouped_invoices,
    lines_for_customer,
    lines_for_day,
    lines_in_range,
    summarize_invoices,
)

__all__ = [
    "attach_headers",
    "grouped_invoices",
    "summarize_invoices",
    "lines_for_day",
    "lines_in_range",
    "lines_for_customer",
]
