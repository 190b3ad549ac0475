# reports/urls.py

from django.urls import path

from reports.views import (
    InvoiceExportView,
    InvoiceLinesReportView,
    InvoiceRangeView,
    InvoicesByNameView,
    TodayInvoicesView,
)

app_name = "reports"

urlpatterns = [
    path("invoices/today/", TodayInvoicesView.as_view(), name="invoices-today"),
    path("invoices/range/", InvoiceRangeView.as_view(), name="invoices-range"),
    path("invoices/by-name/", InvoicesByNameView.as_view(), name="invoices-by-name"),
    path(
        "invoices/<int:invoice_number>/lines/",
        InvoiceLinesReportView.as_view(),
        name="invoice-lines",
    ),
    path("export/", InvoiceExportView.as_view(), name="export"),
]
