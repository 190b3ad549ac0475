# billing/services/invoice_numbers.py

"""
INVOICE NUMBER ALLOCATION

Rules:
- next = max(sequence high-water mark, highest existing invoice_number) + 1
- The sequence row is locked for the whole allocating transaction, so two
  concurrent CreateInvoice calls can never receive the same number.
- Numbers are never handed out twice, even after the latest invoice is deleted.
"""

from django.db import transaction
from django.db.models import Max

from billing.models import InvoiceLine, InvoiceSequence


def _locked_sequence() -> InvoiceSequence:
    sequence, _ = InvoiceSequence.objects.select_for_update().get_or_create(
        name=InvoiceSequence.DEFAULT
    )
    return sequence


def _highest_line_number() -> int:
    return InvoiceLine.objects.aggregate(top=Max("invoice_number"))["top"] or 0


@transaction.atomic
def next_invoice_number() -> int:
    sequence = _locked_sequence()
    number = max(sequence.last_number, _highest_line_number()) + 1

    sequence.last_number = number
    sequence.save(update_fields=["last_number", "updated_at"])
    return number


def is_allocated(invoice_number: int) -> bool:
    """
    True once the number has been handed out, even if all its lines are gone.
    """
    if InvoiceLine.objects.filter(invoice_number=invoice_number).exists():
        return True

    last = (
        InvoiceSequence.objects.filter(name=InvoiceSequence.DEFAULT)
        .values_list("last_number", flat=True)
        .first()
    ) or 0
    return invoice_number <= last
