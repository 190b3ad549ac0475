# billing/models/invoice_line.py

from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone


class InvoiceLine(models.Model):
    """
    One product-quantity entry on an invoice (the "report" row of the POS).

    GUARANTEES:
    - Lines sharing an invoice_number form one invoice.
    - At most one line per (invoice_number, product_name).
    - quantity >= 1 while the line exists (removal deletes the row).
    - Pricing fields are a snapshot taken at sale time.
    - Header fields (name, area, date, payment_method, gst, spl) are duplicated
      on every line of the same invoice.

    Stock:
    - product_name references products.Product by natural key, not by FK.
    - Product.quantity + sum(line.quantity for that name) is conserved by the
      billing services; never write quantity here directly.
    """

    invoice_number = models.PositiveIntegerField(db_index=True)

    product_name = models.CharField(max_length=255, db_index=True)

    quantity = models.PositiveIntegerField()

    # Pricing snapshot
    mrp = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    net_rate = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    add_margin = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    sale_rate = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    category = models.CharField(max_length=120, blank=True, default="")
    spl = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    gst = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("18.00"))

    # Invoice header (denormalized)
    name = models.CharField(max_length=255, blank=True, default="")
    area = models.CharField(max_length=255, blank=True, default="")
    date = models.DateField(default=timezone.localdate, db_index=True)
    payment_method = models.CharField(max_length=32, default="CASH")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["invoice_number", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["invoice_number", "product_name"],
                name="billing_one_line_per_product_per_invoice",
            ),
            models.CheckConstraint(
                condition=Q(quantity__gte=1),
                name="billing_line_quantity_at_least_one",
            ),
        ]
        indexes = [
            models.Index(fields=["invoice_number", "product_name"], name="billing_inv_number_product_idx"),
            models.Index(fields=["name"], name="billing_inv_customer_name_idx"),
        ]

    def __str__(self):
        return f"#{self.invoice_number} {self.product_name} x{self.quantity}"
