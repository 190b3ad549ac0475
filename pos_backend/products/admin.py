# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules:
- Products are created and restocked here or through the API.
- product_name is the natural key used by invoice lines; rename with care.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "product_name",
        "category",
        "quantity",
        "mrp",
        "net_rate",
        "discount",
        "updated_at",
    )
    list_filter = ("category",)
    search_fields = ("product_name",)
    ordering = ("product_name",)
    readonly_fields = ("created_at", "updated_at")
