# billing/urls.py

"""
BILLING URLS

Mounted under /api/billing/
"""

from django.urls import path

from billing.views import (
    AvailableProductsView,
    InvoiceCreateView,
    InvoiceDetailView,
    InvoiceHeaderView,
    InvoiceLineDetailView,
    InvoiceLinesView,
)

app_name = "billing"

urlpatterns = [
    path("invoices/", InvoiceCreateView.as_view(), name="invoice-create"),
    path("invoices/<int:invoice_number>/", InvoiceDetailView.as_view(), name="invoice-detail"),
    path(
        "invoices/<int:invoice_number>/details/",
        InvoiceHeaderView.as_view(),
        name="invoice-header",
    ),
    path(
        "invoices/<int:invoice_number>/lines/",
        InvoiceLinesView.as_view(),
        name="invoice-lines",
    ),
    path(
        "invoices/<int:invoice_number>/lines/<int:line_id>/",
        InvoiceLineDetailView.as_view(),
        name="invoice-line-detail",
    ),
    path(
        "invoices/<int:invoice_number>/available-products/",
        AvailableProductsView.as_view(),
        name="available-products",
    ),
]
