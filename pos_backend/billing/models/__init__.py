"""
PATH: billing/models/__init__.py

Billing models export surface.
"""

from .invoice_line import InvoiceLine
from .invoice_sequence import InvoiceSequence

__all__ = [
    "InvoiceLine",
    "InvoiceSequence",
]
