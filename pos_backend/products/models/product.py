# products/models/product.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class Product(models.Model):
    """
    Represents a sellable product and its stock on hand.

    STOCK MODEL (IMPORTANT):
    - `quantity` IS the stock ledger for this product (single source of truth).
    - It is decremented when a sale books the product on an invoice and
      incremented when an invoice line is shrunk, removed, or its invoice deleted.
    - Only billing services mutate it after creation (under a row lock);
      inventory staff may restock it through the product API.

    NATURAL KEY:
    - `product_name` is unique and is how invoice lines reference a product.
    """

    product_name = models.CharField(max_length=255, unique=True)

    quantity = models.PositiveIntegerField(default=0)

    # Pricing fields (opaque to the billing engine; snapshotted onto invoice lines)
    mrp = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    add_margin = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    net_rate = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    category = models.CharField(max_length=120, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["product_name"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name="products_quantity_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.product_name} ({self.quantity})"

    def clean(self):
        self.product_name = (self.product_name or "").strip()
        if not self.product_name:
            raise ValidationError("product_name is required")

        if self.quantity is None or int(self.quantity) < 0:
            raise ValidationError("quantity cannot be negative")

        for field in ("mrp", "discount", "add_margin", "net_rate"):
            value = getattr(self, field)
            if value is not None and Decimal(value) < Decimal("0.00"):
                raise ValidationError(f"{field} cannot be negative")
