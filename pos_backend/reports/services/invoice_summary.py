# reports/services/invoice_summary.py

"""
INVOICE SUMMARY (READ-ONLY)

Groups invoice lines by invoice_number:
    {
        "invoice_number": 12,
        "line_count": 3,
        "header": {id, invoice_number, payment_method, gst, spl, name, date}
    }

The header is taken from the FIRST line (lowest id) of each invoice,
since header fields are duplicated on every line.
Invoices are ordered by invoice_number.
"""

from __future__ import annotations

import datetime

from django.db.models import Count, Min
from django.utils import timezone

from billing.models import InvoiceLine

HEADER_FIELDS = ("id", "invoice_number", "payment_method", "gst", "spl", "name", "date")


def grouped_invoices(lines_qs):
    """
    Lazy grouped queryset (one row per invoice), safe to paginate.
    """
    return (
        lines_qs.order_by()
        .values("invoice_number")
        .annotate(line_count=Count("id"), first_line_id=Min("id"))
        .order_by("invoice_number")
    )


def attach_headers(rows) -> list[dict]:
    rows = list(rows)
    first_ids = [row["first_line_id"] for row in rows]
    headers = {
        header["id"]: header
        for header in InvoiceLine.objects.filter(id__in=first_ids).values(*HEADER_FIELDS)
    }
    return [
        {
            "invoice_number": row["invoice_number"],
            "line_count": row["line_count"],
            "header": headers.get(row["first_line_id"]),
        }
        for row in rows
    ]


def summarize_invoices(lines_qs) -> list[dict]:
    return attach_headers(grouped_invoices(lines_qs))


# ------------------------------------------------------------
# Line selections used by report endpoints
# ------------------------------------------------------------

def lines_for_day(day: datetime.date | None = None):
    return InvoiceLine.objects.filter(date=day or timezone.localdate())


def lines_in_range(start: datetime.date, end: datetime.date):
    return InvoiceLine.objects.filter(date__gte=start, date__lte=end)


def lines_for_customer(name: str):
    return InvoiceLine.objects.filter(name__icontains=name)
