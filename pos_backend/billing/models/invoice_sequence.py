# billing/models/invoice_sequence.py

from django.db import models


class InvoiceSequence(models.Model):
    """
    Named counter holding the last allocated invoice number.

    Invoice numbers are not stored entities; this row only remembers the
    high-water mark so numbers stay strictly increasing and are never reused,
    even after the most recent invoice is deleted.

    Locked with select_for_update() during allocation.
    """

    DEFAULT = "invoice"

    name = models.CharField(max_length=32, unique=True, default=DEFAULT)
    last_number = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name}: {self.last_number}"
