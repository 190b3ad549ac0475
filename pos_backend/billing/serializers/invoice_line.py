# billing/serializers/invoice_line.py

from rest_framework import serializers

from billing.models import InvoiceLine


class InvoiceLineSerializer(serializers.ModelSerializer):
    """
    Read-only representation of one invoice line.
    Lines are only ever written by billing services.
    """

    class Meta:
        model = InvoiceLine
        fields = [
            "id",
            "invoice_number",
            "product_name",
            "quantity",
            "mrp",
            "net_rate",
            "discount",
            "add_margin",
            "sale_rate",
            "category",
            "spl",
            "gst",
            "name",
            "area",
            "date",
            "payment_method",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
