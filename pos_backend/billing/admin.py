# billing/admin.py
"""
=====================================================
PATH: billing/admin.py
=====================================================

Admin rules:
- Invoice lines are READ-ONLY here.
  Quantities move stock, so every write goes through billing services.
"""

from __future__ import annotations

from django.contrib import admin

from billing.models import InvoiceLine, InvoiceSequence


@admin.register(InvoiceLine)
class InvoiceLineAdmin(admin.ModelAdmin):
    list_display = (
        "invoice_number",
        "product_name",
        "quantity",
        "mrp",
        "net_rate",
        "name",
        "date",
        "payment_method",
    )
    list_filter = ("payment_method", "date")
    search_fields = ("product_name", "name", "=invoice_number")
    ordering = ("-invoice_number", "id")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(InvoiceSequence)
class InvoiceSequenceAdmin(admin.ModelAdmin):
    list_display = ("name", "last_number", "updated_at")
    readonly_fields = ("name", "last_number", "updated_at")

    def has_add_permission(self, request):
        return False
