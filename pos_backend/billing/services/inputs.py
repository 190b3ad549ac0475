# billing/services/inputs.py

"""
BILLING INPUT NORMALIZERS

Purpose:
- Turn loosely typed caller input (JSON payloads, form values) into the
  exact Python types the engine writes.
- Reject malformed input with InvoiceValidationError BEFORE any mutation.

HARD RULES:
- Quantities are whole integer units (bools rejected).
- Invoice numbers are positive integers.
- Money-like fields are Decimals; dates are calendar dates (ISO strings ok).
"""

from __future__ import annotations

import datetime
from decimal import Decimal, InvalidOperation

from django.utils.dateparse import parse_date

from billing.services.exceptions import InvoiceValidationError


HEADER_FIELDS = ("name", "area", "date", "payment_method", "gst", "spl")

LINE_PRICING_FIELDS = (
    "mrp",
    "discount",
    "add_margin",
    "net_rate",
    "sale_rate",
    "category",
    "spl",
    "gst",
)

EDITABLE_LINE_FIELDS = ("name", "area", "date", "discount", "mrp", "spl")

DECIMAL_FIELDS = {"mrp", "discount", "add_margin", "net_rate", "sale_rate", "spl", "gst"}
TEXT_FIELDS = {"name", "area", "category", "payment_method"}


def _to_whole_int(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        s = value.strip()
        if s.isdigit():
            return int(s)
    return None


def to_invoice_number(value) -> int:
    number = _to_whole_int(value)
    if number is None or number < 1:
        raise InvoiceValidationError("Invoice number must be a positive integer.")
    return number


def to_quantity(value, *, field="quantity", minimum=1) -> int:
    qty = _to_whole_int(value)
    if qty is None or qty < minimum:
        raise InvoiceValidationError(
            f"{field} must be a whole number >= {minimum}."
        )
    return qty


def _to_decimal(field, value) -> Decimal:
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvoiceValidationError(f"{field} must be a number.") from exc
    if not result.is_finite():
        raise InvoiceValidationError(f"{field} must be a number.")
    return result


def _to_date(value) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    parsed = parse_date(str(value)) if value is not None else None
    if parsed is None:
        raise InvoiceValidationError("date must be an ISO date (YYYY-MM-DD).")
    return parsed


def clean_fields(data, *, allowed) -> dict:
    """
    Validate and coerce a mapping of line/header fields.
    Unknown keys are rejected; None values are dropped.
    """
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvoiceValidationError("Field updates must be an object.")

    unknown = sorted(set(data) - set(allowed))
    if unknown:
        raise InvoiceValidationError(f"Unsupported field(s): {', '.join(unknown)}.")

    cleaned = {}
    for field, value in data.items():
        if value is None:
            continue
        if field in DECIMAL_FIELDS:
            cleaned[field] = _to_decimal(field, value)
        elif field == "date":
            cleaned[field] = _to_date(value)
        elif field in TEXT_FIELDS:
            cleaned[field] = str(value).strip()
        else:
            cleaned[field] = value
    return cleaned


def clean_line_requests(line_requests) -> list[dict]:
    """
    Validate a whole batch up front.

    Returns a list of {"product_name", "quantity", "overrides"} dicts.
    """
    if not line_requests:
        raise InvoiceValidationError("At least one line is required.")

    cleaned = []
    for index, request in enumerate(line_requests, start=1):
        if not isinstance(request, dict):
            raise InvoiceValidationError(f"Line {index} must be an object.")

        name = str(request.get("product_name") or "").strip()
        if not name:
            raise InvoiceValidationError(f"Line {index}: product_name is required.")

        qty = to_quantity(request.get("quantity"))

        extra = {k: v for k, v in request.items() if k not in ("product_name", "quantity")}
        cleaned.append(
            {
                "product_name": name,
                "quantity": qty,
                "overrides": clean_fields(extra, allowed=LINE_PRICING_FIELDS),
            }
        )
    return cleaned
