# billing/views/invoice.py

"""
INVOICE ENDPOINTS

Thin HTTP layer over billing.services:
- request payloads are validated by command serializers (400)
- every stock-affecting change is delegated to the reconciliation engine
- engine errors are mapped by ReconciliationErrorMixin

Batch responses (create / add lines):
- 201 every line booked
- 207 some lines booked, some rejected
- 400 no line booked
Body always carries: invoice_number, lines, errors
"""

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from billing.serializers import (
    AddLinesSerializer,
    CreateInvoiceSerializer,
    EditLineSerializer,
    InvoiceHeaderSerializer,
    InvoiceLineSerializer,
)
from billing.services import (
    add_lines_to_invoice,
    available_products,
    create_invoice,
    delete_invoice,
    edit_invoice_line,
    get_invoice_header,
    list_invoice_lines,
    remove_line,
    update_invoice_header,
)
from billing.views.errors import ReconciliationErrorMixin
from products.serializers import ProductSerializer
from users.permissions import IsStaff


def batch_response(result) -> Response:
    if result.complete:
        http_status = status.HTTP_201_CREATED
    elif result.failed:
        http_status = status.HTTP_400_BAD_REQUEST
    else:
        http_status = status.HTTP_207_MULTI_STATUS

    return Response(
        {
            "invoice_number": result.invoice_number,
            "lines": InvoiceLineSerializer(result.lines, many=True).data,
            "errors": [error.as_dict() for error in result.errors],
        },
        status=http_status,
    )


class BillingAPIView(ReconciliationErrorMixin, APIView):
    permission_classes = [IsAuthenticated, IsStaff]


# ======================================================
# INVOICES
# ======================================================

class InvoiceCreateView(BillingAPIView):
    """
    POST /api/billing/invoices/
    """

    @extend_schema(
        request=CreateInvoiceSerializer,
        responses={
            201: OpenApiResponse(description="All lines booked"),
            207: OpenApiResponse(description="Some lines rejected"),
            400: OpenApiResponse(description="Invalid payload or no line booked"),
        },
    )
    def post(self, request):
        serializer = CreateInvoiceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        lines = [dict(line) for line in data.pop("lines")]

        result = create_invoice(header=data, line_requests=lines)
        return batch_response(result)


class InvoiceDetailView(BillingAPIView):
    """
    GET    /api/billing/invoices/<n>/   lines of the invoice
    DELETE /api/billing/invoices/<n>/   restock everything and delete
    """

    @extend_schema(responses={200: InvoiceLineSerializer(many=True)})
    def get(self, request, invoice_number):
        lines = list_invoice_lines(invoice_number)
        return Response(
            {
                "invoice_number": invoice_number,
                "lines": InvoiceLineSerializer(lines, many=True).data,
            }
        )

    @extend_schema(
        request=None,
        responses={
            200: OpenApiResponse(description="Invoice deleted, stock restored"),
            404: OpenApiResponse(description="Invoice or product not found"),
        },
    )
    def delete(self, request, invoice_number):
        deleted = delete_invoice(invoice_number=invoice_number)
        return Response(
            {
                "message": f"Invoice {invoice_number} deleted.",
                "invoice_number": invoice_number,
                "lines_deleted": deleted,
            },
            status=status.HTTP_200_OK,
        )


class InvoiceHeaderView(BillingAPIView):
    """
    GET /api/billing/invoices/<n>/details/
    PUT /api/billing/invoices/<n>/details/   header applied to every line
    """

    @extend_schema(responses={200: InvoiceHeaderSerializer})
    def get(self, request, invoice_number):
        return Response(get_invoice_header(invoice_number))

    @extend_schema(request=InvoiceHeaderSerializer, responses={200: InvoiceHeaderSerializer})
    def put(self, request, invoice_number):
        serializer = InvoiceHeaderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        header = update_invoice_header(invoice_number, dict(serializer.validated_data))
        return Response(header, status=status.HTTP_200_OK)


# ======================================================
# LINES
# ======================================================

class InvoiceLinesView(BillingAPIView):
    """
    POST /api/billing/invoices/<n>/lines/
    """

    @extend_schema(
        request=AddLinesSerializer,
        responses={
            201: OpenApiResponse(description="All lines booked"),
            207: OpenApiResponse(description="Some lines rejected"),
            404: OpenApiResponse(description="Invoice not found"),
        },
    )
    def post(self, request, invoice_number):
        serializer = AddLinesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        result = add_lines_to_invoice(
            invoice_number=invoice_number,
            line_requests=[dict(line) for line in data["lines"]],
            header_updates=dict(data.get("header") or {}),
        )
        return batch_response(result)


class InvoiceLineDetailView(BillingAPIView):
    """
    PATCH  /api/billing/invoices/<n>/lines/<id>/   resize / edit a line
    DELETE /api/billing/invoices/<n>/lines/<id>/   remove a line, restock
    """

    @extend_schema(request=EditLineSerializer, responses={200: InvoiceLineSerializer})
    def patch(self, request, invoice_number, line_id):
        serializer = EditLineSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        line = edit_invoice_line(
            invoice_number=invoice_number,
            line_id=line_id,
            add_quantity=data.pop("add_quantity", 0),
            minus_quantity=data.pop("minus_quantity", 0),
            field_updates=data,
        )
        return Response(InvoiceLineSerializer(line).data, status=status.HTTP_200_OK)

    @extend_schema(request=None, responses={200: OpenApiResponse(description="Line removed")})
    def delete(self, request, invoice_number, line_id):
        removal = remove_line(invoice_number=invoice_number, line_id=line_id)
        return Response(
            {
                "message": "Line removed.",
                "line_id": removal.line_id,
                "product_name": removal.product_name,
                "quantity": removal.quantity,
                "restocked": removal.restocked,
            },
            status=status.HTTP_200_OK,
        )


# ======================================================
# PRODUCT PICKER
# ======================================================

class AvailableProductsView(ReconciliationErrorMixin, generics.ListAPIView):
    """
    GET /api/billing/invoices/<n>/available-products/?q=<text>

    Products not yet on the invoice (paginated).
    """

    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated, IsStaff]

    def get_queryset(self):
        return available_products(
            invoice_number=self.kwargs["invoice_number"],
            search_text=self.request.query_params.get("q", ""),
        )

    @extend_schema(
        parameters=[
            OpenApiParameter(name="q", required=False, type=str),
        ]
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)
