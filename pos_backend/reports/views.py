# reports/views.py

"""
SALES REPORT ENDPOINTS (READ-ONLY)

Mounted under /api/reports/

- GET invoices/today/                              today's invoices
- GET invoices/range/?start_date=&end_date=         invoices in a date range
- GET invoices/by-name/?name=                       invoices by customer name
- GET invoices/<n>/lines/                           lines of one invoice
- GET export/?start_date=&end_date=                 unpaginated export

Contract:
- dates are YYYY-MM-DD, range is inclusive
- listings are grouped by invoice_number and paginated
- 404 when no invoice matches
"""

from django.utils.dateparse import parse_date
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from billing.serializers import InvoiceLineSerializer
from billing.services import list_invoice_lines
from billing.views.errors import ReconciliationErrorMixin
from reports.services import (
    attach_headers,
    grouped_invoices,
    lines_for_customer,
    lines_for_day,
    lines_in_range,
    summarize_invoices,
)
from users.permissions import IsStaff

DATE_RANGE_PARAMS = [
    OpenApiParameter(name="start_date", required=True, type=str, description="YYYY-MM-DD"),
    OpenApiParameter(name="end_date", required=True, type=str, description="YYYY-MM-DD"),
]


def error_response(*, code: str, message: str, http_status: int):
    return Response({"error": {"code": code, "message": message}}, status=http_status)


def no_invoices_response():
    return error_response(
        code="not_found",
        message="No invoices found.",
        http_status=status.HTTP_404_NOT_FOUND,
    )


def parse_date_range(params):
    """
    Returns (start, end, error_response). Exactly one side is None.
    """
    raw_start = (params.get("start_date") or "").strip()
    raw_end = (params.get("end_date") or "").strip()

    if not raw_start or not raw_end:
        return None, None, error_response(
            code="validation_error",
            message="start_date and end_date parameters are required.",
            http_status=status.HTTP_400_BAD_REQUEST,
        )

    start, end = parse_date(raw_start), parse_date(raw_end)
    if start is None or end is None:
        return None, None, error_response(
            code="validation_error",
            message="Dates must be in YYYY-MM-DD format.",
            http_status=status.HTTP_400_BAD_REQUEST,
        )
    if start > end:
        return None, None, error_response(
            code="validation_error",
            message="start_date must be on or before end_date.",
            http_status=status.HTTP_400_BAD_REQUEST,
        )
    return start, end, None


class InvoiceReportView(generics.GenericAPIView):
    """
    Base: paginate invoices grouped from `get_lines()`.
    """

    permission_classes = [IsAuthenticated, IsStaff]

    def get_lines(self, request):
        raise NotImplementedError

    def get(self, request, *args, **kwargs):
        lines = self.get_lines(request)
        if isinstance(lines, Response):
            return lines

        page = self.paginate_queryset(grouped_invoices(lines))
        if not page:
            return no_invoices_response()
        return self.get_paginated_response(attach_headers(page))


class TodayInvoicesView(InvoiceReportView):
    def get_lines(self, request):
        return lines_for_day()


class InvoiceRangeView(InvoiceReportView):
    @extend_schema(parameters=DATE_RANGE_PARAMS)
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_lines(self, request):
        start, end, error = parse_date_range(request.query_params)
        if error is not None:
            return error
        return lines_in_range(start, end)


class InvoicesByNameView(InvoiceReportView):
    @extend_schema(parameters=[OpenApiParameter(name="name", required=True, type=str)])
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_lines(self, request):
        name = (request.query_params.get("name") or "").strip()
        if not name:
            return error_response(
                code="validation_error",
                message="name parameter is required.",
                http_status=status.HTTP_400_BAD_REQUEST,
            )
        return lines_for_customer(name)


class InvoiceLinesReportView(ReconciliationErrorMixin, generics.GenericAPIView):
    permission_classes = [IsAuthenticated, IsStaff]
    serializer_class = InvoiceLineSerializer

    def get(self, request, invoice_number):
        lines = list_invoice_lines(invoice_number)
        return Response(
            {
                "invoice_number": invoice_number,
                "count": lines.count(),
                "lines": self.get_serializer(lines, many=True).data,
            }
        )


class InvoiceExportView(generics.GenericAPIView):
    """
    Unpaginated grouped invoices for a date range (printable report data).
    """

    permission_classes = [IsAuthenticated, IsStaff]
    pagination_class = None

    @extend_schema(parameters=DATE_RANGE_PARAMS)
    def get(self, request):
        start, end, error = parse_date_range(request.query_params)
        if error is not None:
            return error

        invoices = summarize_invoices(lines_in_range(start, end))
        if not invoices:
            return no_invoices_response()

        return Response(
            {
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "count": len(invoices),
                "invoices": invoices,
            }
        )
