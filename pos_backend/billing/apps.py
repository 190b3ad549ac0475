# billing/apps.py

"""
BILLING APP CONFIG

Invoice billing + invoice/stock reconciliation:
- Invoice lines (one row per product per invoice, denormalized header)
- Invoice number allocation
- Reconciliation engine keeping product stock and invoice lines consistent
"""

from django.apps import AppConfig


class BillingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "billing"
    verbose_name = "Billing & Invoices"
