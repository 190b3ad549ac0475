"""
======================================================
PATH: billing/migrations/0001_initial.py
======================================================
MIGRATION: CREATE InvoiceLine + InvoiceSequence

Purpose:
- InvoiceLine rows (one per product per invoice, denormalized header).
- InvoiceSequence high-water mark for invoice number allocation.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="InvoiceLine",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("invoice_number", models.PositiveIntegerField(db_index=True)),
                ("product_name", models.CharField(db_index=True, max_length=255)),
                ("quantity", models.PositiveIntegerField()),
                (
                    "mrp",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12),
                ),
                (
                    "net_rate",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12),
                ),
                (
                    "discount",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12),
                ),
                (
                    "add_margin",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12),
                ),
                (
                    "sale_rate",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12),
                ),
                ("category", models.CharField(blank=True, default="", max_length=120)),
                (
                    "spl",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12),
                ),
                (
                    "gst",
                    models.DecimalField(decimal_places=2, default=Decimal("18.00"), max_digits=5),
                ),
                ("name", models.CharField(blank=True, default="", max_length=255)),
                ("area", models.CharField(blank=True, default="", max_length=255)),
                (
                    "date",
                    models.DateField(db_index=True, default=django.utils.timezone.localdate),
                ),
                ("payment_method", models.CharField(default="CASH", max_length=32)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["invoice_number", "id"],
                "indexes": [
                    models.Index(
                        fields=["invoice_number", "product_name"],
                        name="billing_inv_number_product_idx",
                    ),
                    models.Index(fields=["name"], name="billing_inv_customer_name_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("invoice_number", "product_name"),
                        name="billing_one_line_per_product_per_invoice",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gte", 1)),
                        name="billing_line_quantity_at_least_one",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="InvoiceSequence",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(default="invoice", max_length=32, unique=True)),
                ("last_number", models.PositiveIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
    ]
