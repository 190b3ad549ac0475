from .commands import (
    AddLinesSerializer,
    CreateInvoiceSerializer,
    EditLineSerializer,
    InvoiceHeaderSerializer,
    LineRequestSerializer,
)
from .invoice_line import InvoiceLineSerializer

__all__ = [
    "InvoiceLineSerializer",
    "InvoiceHeaderSerializer",
    "LineRequestSerializer",
    "CreateInvoiceSerializer",
    "AddLinesSerializer",
    "EditLineSerializer",
]
