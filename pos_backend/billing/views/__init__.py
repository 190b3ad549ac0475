from .invoice import (
    AvailableProductsView,
    InvoiceCreateView,
    InvoiceDetailView,
    InvoiceHeaderView,
    InvoiceLineDetailView,
    InvoiceLinesView,
)

__all__ = [
    "InvoiceCreateView",
    "InvoiceDetailView",
    "InvoiceHeaderView",
    "InvoiceLinesView",
    "InvoiceLineDetailView",
    "AvailableProductsView",
]
