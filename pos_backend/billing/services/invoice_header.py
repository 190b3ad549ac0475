# billing/services/invoice_header.py

"""
INVOICE HEADER HELPERS

The invoice header (customer name, area, date, payment method, gst, spl)
is stored on every line of the invoice. These helpers read it from the
first line and write it to all lines, so the copies never diverge.
"""

import logging

from django.db import transaction
from django.utils import timezone

from billing.models import InvoiceLine
from billing.services.exceptions import InvoiceNotFoundError, InvoiceValidationError
from billing.services.inputs import HEADER_FIELDS, clean_fields, to_invoice_number

logger = logging.getLogger(__name__)


def list_invoice_lines(invoice_number):
    invoice_number = to_invoice_number(invoice_number)
    lines = InvoiceLine.objects.filter(invoice_number=invoice_number).order_by("id")
    if not lines.exists():
        raise InvoiceNotFoundError(f"Invoice {invoice_number} not found.")
    return lines


def get_invoice_header(invoice_number) -> dict:
    first = list_invoice_lines(invoice_number).first()
    header = {key: getattr(first, key) for key in HEADER_FIELDS}
    header["invoice_number"] = first.invoice_number
    return header


@transaction.atomic
def update_invoice_header(invoice_number, fields) -> dict:
    """
    Apply header fields to every line of the invoice.
    Returns the updated header.
    """
    invoice_number = to_invoice_number(invoice_number)
    updates = clean_fields(fields, allowed=HEADER_FIELDS)
    if not updates:
        raise InvoiceValidationError("No header fields to update.")

    updated = (
        InvoiceLine.objects.filter(invoice_number=invoice_number)
        .update(**updates, updated_at=timezone.now())
    )
    if not updated:
        raise InvoiceNotFoundError(f"Invoice {invoice_number} not found.")

    logger.info(
        "Invoice header updated",
        extra={"invoice_number": invoice_number, "fields": sorted(updates)},
    )
    return get_invoice_header(invoice_number)
