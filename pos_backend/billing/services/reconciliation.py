# billing/services/reconciliation.py

"""
INVOICE / STOCK RECONCILIATION ENGINE

SINGLE SOURCE OF TRUTH for every change that moves units between the
product stock ledger (Product.quantity) and invoice lines (InvoiceLine.quantity).

GUARANTEES:
- Conservation: for every product name,
      Product.quantity + sum(InvoiceLine.quantity for that name)
  is unchanged by any operation here.
- Product.quantity never goes below zero.
- At most one line per (invoice_number, product_name).
- Every operation is atomic and retried on lock conflicts (bounded).

BATCH POLICY (create_invoice / add_lines_to_invoice):
- Whole-batch input is validated up front (nothing is written on bad input).
- Each line is then applied in its own savepoint: a failing line is skipped
  and reported, lines that succeeded stay committed (best-effort batch).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from billing.models import InvoiceLine
from billing.services.exceptions import (
    DuplicateLineError,
    InvoiceNotFoundError,
    InvoiceValidationError,
    LineNotFoundError,
    OutOfStockError,
    ProductNotFoundError,
    ReconciliationError,
)
from billing.services.inputs import (
    EDITABLE_LINE_FIELDS,
    HEADER_FIELDS,
    clean_fields,
    clean_line_requests,
    to_invoice_number,
    to_quantity,
)
from billing.services.invoice_numbers import is_allocated, next_invoice_number
from billing.services.locking import lock_product, lock_products, retry_on_conflict
from products.models import Product

logger = logging.getLogger(__name__)

OUT_OF_STOCK_MESSAGE = "Some products are out of stock."
PRODUCT_NOT_FOUND_MESSAGE = "Some products were not found in the products. Skipped."


# ============================================================
# RESULTS
# ============================================================

@dataclass
class InvoiceBatchResult:
    """Outcome of a best-effort batch: created lines plus per-line errors."""

    invoice_number: int
    lines: list[InvoiceLine] = field(default_factory=list)
    errors: list[ReconciliationError] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.errors

    @property
    def failed(self) -> bool:
        return not self.lines


@dataclass
class LineRemoval:
    line_id: int
    invoice_number: int
    product_name: str
    quantity: int
    restocked: bool


# ============================================================
# INTERNAL HELPERS
# ============================================================

def _billing_defaults() -> dict:
    conf = getattr(settings, "BILLING", {})
    return {
        "payment_method": conf.get("DEFAULT_PAYMENT_METHOD", "CASH"),
        "gst": Decimal(str(conf.get("DEFAULT_GST", 18))),
        "spl": Decimal("0.00"),
        "date": timezone.localdate(),
        "name": "",
        "area": "",
    }


def _carried_header(template: InvoiceLine | None) -> dict:
    """
    Header values a new line inherits: from an existing line of the
    invoice when there is one, otherwise the configured defaults.
    """
    header = {**_billing_defaults(), "discount": Decimal("0.00")}
    if template is not None:
        for key in header:
            header[key] = getattr(template, key)
    return header


def _product_pricing(product: Product) -> dict:
    return {
        "mrp": product.mrp,
        "discount": product.discount,
        "add_margin": product.add_margin,
        "net_rate": product.net_rate,
        "category": product.category,
    }


def _book_line(*, invoice_number, product, quantity, fields) -> InvoiceLine:
    """
    Create one line and take its units out of stock, in one savepoint.
    Caller holds the product row lock and has checked stock.
    """
    with transaction.atomic():
        line = InvoiceLine.objects.create(
            invoice_number=invoice_number,
            product_name=product.product_name,
            quantity=quantity,
            **fields,
        )
        product.quantity -= quantity
        product.save(update_fields=["quantity", "updated_at"])
    return line


def _restock(product: Product, quantity: int) -> None:
    product.quantity += quantity
    product.save(update_fields=["quantity", "updated_at"])


def _missing_invoice(invoice_number) -> InvoiceNotFoundError:
    return InvoiceNotFoundError(f"Invoice {invoice_number} not found.")


# ============================================================
# CREATE INVOICE
# ============================================================

@retry_on_conflict
def create_invoice(*, line_requests, header=None) -> InvoiceBatchResult:
    """
    Allocate a new invoice number and book each requested line against stock.

    Error reporting:
    - only the FIRST "out of stock" and FIRST "product not found" are reported
    - a product repeated within the batch is reported as a duplicate line
    """
    requests = clean_line_requests(line_requests)
    header_fields = {**_billing_defaults(), **clean_fields(header, allowed=HEADER_FIELDS)}

    invoice_number = next_invoice_number()
    products = lock_products(r["product_name"] for r in requests)

    result = InvoiceBatchResult(invoice_number=invoice_number)
    seen = set()
    reported = set()

    for request in requests:
        name = request["product_name"]
        qty = request["quantity"]

        if name in seen:
            result.errors.append(
                DuplicateLineError(
                    f'"{name}" appears more than once in this invoice.',
                    product_name=name,
                )
            )
            continue
        seen.add(name)

        product = products.get(name)
        if product is None:
            logger.warning(
                "Invoice line skipped: product not found",
                extra={"invoice_number": invoice_number, "product_name": name},
            )
            if ProductNotFoundError not in reported:
                reported.add(ProductNotFoundError)
                result.errors.append(
                    ProductNotFoundError(PRODUCT_NOT_FOUND_MESSAGE, product_name=name)
                )
            continue

        if product.quantity < qty:
            logger.warning(
                "Invoice line skipped: out of stock",
                extra={
                    "invoice_number": invoice_number,
                    "product_name": name,
                    "requested": qty,
                    "available": product.quantity,
                },
            )
            if OutOfStockError not in reported:
                reported.add(OutOfStockError)
                result.errors.append(
                    OutOfStockError(OUT_OF_STOCK_MESSAGE, product_name=name)
                )
            continue

        fields = {**_product_pricing(product), **header_fields, **request["overrides"]}
        result.lines.append(
            _book_line(
                invoice_number=invoice_number,
                product=product,
                quantity=qty,
                fields=fields,
            )
        )

    logger.info(
        "Invoice created",
        extra={
            "invoice_number": invoice_number,
            "lines": len(result.lines),
            "errors": len(result.errors),
        },
    )
    return result


# ============================================================
# EDIT LINE
# ============================================================

@retry_on_conflict
def edit_invoice_line(
    *,
    invoice_number,
    line_id,
    add_quantity=0,
    minus_quantity=0,
    field_updates=None,
) -> InvoiceLine:
    """
    Resize one line and/or update its editable fields.

    Header fields (name, area, date, spl) are invoice-wide and are written to
    every line of the invoice; discount and mrp change this line only.

    delta = add_quantity - minus_quantity
    - line.quantity + delta must stay >= 1 (use remove_line to drop a line)
    - when adding, current stock must cover add_quantity
    - product.quantity - delta must stay >= 0
    Any failure leaves line and product untouched.
    """
    invoice_number = to_invoice_number(invoice_number)
    line_id = to_quantity(line_id, field="line_id")
    add_qty = to_quantity(add_quantity or 0, field="add_quantity", minimum=0)
    minus_qty = to_quantity(minus_quantity or 0, field="minus_quantity", minimum=0)
    updates = clean_fields(field_updates, allowed=EDITABLE_LINE_FIELDS)

    line = (
        InvoiceLine.objects.select_for_update()
        .filter(invoice_number=invoice_number, id=line_id)
        .first()
    )
    if line is None:
        if not InvoiceLine.objects.filter(invoice_number=invoice_number).exists():
            raise _missing_invoice(invoice_number)
        raise LineNotFoundError(
            f"Line {line_id} not found on invoice {invoice_number}."
        )

    product = lock_product(line.product_name)
    if product is None:
        raise ProductNotFoundError(
            f'Product "{line.product_name}" not found.',
            product_name=line.product_name,
        )

    delta = add_qty - minus_qty
    new_line_qty = line.quantity + delta
    if new_line_qty < 1:
        raise InvoiceValidationError(
            "Line quantity must stay at least 1. Remove the line instead.",
            product_name=line.product_name,
        )

    if add_qty > 0 and product.quantity < add_qty:
        raise OutOfStockError(
            f'Only {product.quantity} of "{product.product_name}" in stock.',
            product_name=product.product_name,
        )

    new_stock = product.quantity - delta
    if new_stock < 0:
        raise OutOfStockError(
            f'Only {product.quantity} of "{product.product_name}" in stock.',
            product_name=product.product_name,
        )

    if delta:
        product.quantity = new_stock
        product.save(update_fields=["quantity", "updated_at"])

    line.quantity = new_line_qty
    for key, value in updates.items():
        setattr(line, key, value)
    line.save(update_fields=["quantity", "updated_at", *updates.keys()])

    header_updates = {k: v for k, v in updates.items() if k in HEADER_FIELDS}
    if header_updates:
        InvoiceLine.objects.filter(invoice_number=invoice_number).exclude(id=line.id).update(
            **header_updates, updated_at=timezone.now()
        )

    logger.info(
        "Invoice line edited",
        extra={
            "invoice_number": invoice_number,
            "line_id": line.id,
            "product_name": line.product_name,
            "delta": delta,
            "stock": product.quantity,
        },
    )
    return line


# ============================================================
# ADD LINES
# ============================================================

@retry_on_conflict
def add_lines_to_invoice(*, invoice_number, line_requests, header_updates=None) -> InvoiceBatchResult:
    """
    Book more products on an existing invoice.

    Header carry-forward for new lines:
        header_updates > first existing line > configured defaults
    Header updates are written to the lines already on the invoice only
    when at least one new line is booked.
    Every failing line is reported, naming its product.
    """
    invoice_number = to_invoice_number(invoice_number)
    requests = clean_line_requests(line_requests)
    updates = clean_fields(header_updates, allowed=HEADER_FIELDS)

    if not is_allocated(invoice_number):
        raise _missing_invoice(invoice_number)

    products = lock_products(r["product_name"] for r in requests)

    # Read after the product locks so a racing insert of the same product is seen.
    existing = InvoiceLine.objects.filter(invoice_number=invoice_number)
    template = existing.order_by("id").first()
    on_invoice = set(existing.values_list("product_name", flat=True))

    header_fields = {**_carried_header(template), **updates}
    result = InvoiceBatchResult(invoice_number=invoice_number)

    for request in requests:
        name = request["product_name"]
        qty = request["quantity"]

        if name in on_invoice:
            result.errors.append(
                DuplicateLineError(
                    f'"{name}" is already on invoice {invoice_number}.',
                    product_name=name,
                )
            )
            continue

        product = products.get(name)
        if product is None:
            logger.warning(
                "Invoice line skipped: product not found",
                extra={"invoice_number": invoice_number, "product_name": name},
            )
            result.errors.append(
                ProductNotFoundError(f'Product "{name}" not found.', product_name=name)
            )
            continue

        if product.quantity < qty:
            logger.warning(
                "Invoice line skipped: out of stock",
                extra={
                    "invoice_number": invoice_number,
                    "product_name": name,
                    "requested": qty,
                    "available": product.quantity,
                },
            )
            result.errors.append(
                OutOfStockError(
                    f'Only {product.quantity} of "{name}" in stock.',
                    product_name=name,
                )
            )
            continue

        fields = {
            **header_fields,
            "mrp": product.mrp,
            "net_rate": product.net_rate,
            "add_margin": product.add_margin,
            "category": product.category,
            **request["overrides"],
        }
        on_invoice.add(name)
        try:
            line = _book_line(
                invoice_number=invoice_number,
                product=product,
                quantity=qty,
                fields=fields,
            )
        except IntegrityError:
            # Unique (invoice_number, product_name): a concurrent request won.
            logger.warning(
                "Invoice line skipped: concurrent duplicate",
                extra={"invoice_number": invoice_number, "product_name": name},
            )
            result.errors.append(
                DuplicateLineError(
                    f'"{name}" is already on invoice {invoice_number}.',
                    product_name=name,
                )
            )
            continue
        result.lines.append(line)

    if updates and result.lines:
        existing.update(**updates, updated_at=timezone.now())

    logger.info(
        "Invoice lines added",
        extra={
            "invoice_number": invoice_number,
            "lines": len(result.lines),
            "errors": len(result.errors),
        },
    )
    return result


# ============================================================
# REMOVE LINE
# ============================================================

@retry_on_conflict
def remove_line(*, invoice_number, line_id) -> LineRemoval:
    """
    Delete one line and put its units back in stock.

    If the product no longer exists the line is still removed;
    the result reports restocked=False.
    """
    invoice_number = to_invoice_number(invoice_number)
    line_id = to_quantity(line_id, field="line_id")

    line = (
        InvoiceLine.objects.select_for_update()
        .filter(invoice_number=invoice_number, id=line_id)
        .first()
    )
    if line is None:
        raise LineNotFoundError(
            f"Line {line_id} not found on invoice {invoice_number}."
        )

    product = lock_product(line.product_name)
    restocked = product is not None
    if restocked:
        _restock(product, line.quantity)
    else:
        logger.warning(
            "Line removed without restock: product no longer exists",
            extra={
                "invoice_number": invoice_number,
                "line_id": line.id,
                "product_name": line.product_name,
                "quantity": line.quantity,
            },
        )

    removal = LineRemoval(
        line_id=line.id,
        invoice_number=invoice_number,
        product_name=line.product_name,
        quantity=line.quantity,
        restocked=restocked,
    )
    line.delete()

    logger.info(
        "Invoice line removed",
        extra={"invoice_number": invoice_number, "product_name": removal.product_name},
    )
    return removal


# ============================================================
# DELETE INVOICE
# ============================================================

@retry_on_conflict
def delete_invoice(*, invoice_number) -> int:
    """
    Restock every line and delete the whole invoice.

    Fail-fast: if ANY referenced product is missing nothing is deleted.
    Returns the number of lines deleted.
    """
    invoice_number = to_invoice_number(invoice_number)

    lines = list(
        InvoiceLine.objects.select_for_update()
        .filter(invoice_number=invoice_number)
        .order_by("id")
    )
    if not lines:
        raise _missing_invoice(invoice_number)

    names = {line.product_name for line in lines}
    products = lock_products(names)

    missing = sorted(names - set(products))
    if missing:
        logger.warning(
            "Invoice delete refused: products missing",
            extra={"invoice_number": invoice_number, "missing": missing},
        )
        raise ProductNotFoundError(
            f"Cannot delete invoice {invoice_number}: "
            f"product(s) not found: {', '.join(missing)}.",
            product_name=missing[0],
        )

    for line in lines:
        _restock(products[line.product_name], line.quantity)

    deleted, _ = InvoiceLine.objects.filter(invoice_number=invoice_number).delete()

    logger.info(
        "Invoice deleted",
        extra={"invoice_number": invoice_number, "lines": deleted},
    )
    return deleted


# ============================================================
# STOCK QUERY
# ============================================================

def available_products(*, invoice_number, search_text=""):
    """
    Products not yet on the invoice whose name contains `search_text`
    (case-insensitive), ordered by name. Read only.
    """
    invoice_number = to_invoice_number(invoice_number)

    on_invoice = InvoiceLine.objects.filter(
        invoice_number=invoice_number
    ).values_list("product_name", flat=True)

    qs = Product.objects.exclude(product_name__in=on_invoice)
    search_text = (search_text or "").strip()
    if search_text:
        qs = qs.filter(product_name__icontains=search_text)
    return qs.order_by("product_name")
