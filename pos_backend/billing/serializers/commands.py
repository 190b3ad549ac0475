# billing/serializers/commands.py

"""
BILLING COMMAND SERIALIZERS

These serializers do NOT touch the database.
They only validate request payloads before the billing services run.
Omitted optional fields are absent from validated_data.
"""

from rest_framework import serializers


def _money(**kwargs):
    return serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, **kwargs
    )


class InvoiceHeaderSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    area = serializers.CharField(required=False, allow_blank=True, max_length=255)
    date = serializers.DateField(required=False)
    payment_method = serializers.CharField(required=False, max_length=32)
    gst = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, required=False
    )
    spl = _money()


class LineRequestSerializer(serializers.Serializer):
    product_name = serializers.CharField(max_length=255)
    quantity = serializers.IntegerField(min_value=1)

    # Optional pricing overrides (default to the product's values)
    mrp = _money()
    discount = _money()
    add_margin = _money()
    net_rate = _money()
    sale_rate = _money()
    category = serializers.CharField(required=False, allow_blank=True, max_length=120)
    spl = _money()
    gst = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, required=False
    )


class CreateInvoiceSerializer(InvoiceHeaderSerializer):
    """
    POST /api/billing/invoices/

    Header fields at the top level, products under `lines`.
    """

    lines = LineRequestSerializer(many=True, allow_empty=False)


class AddLinesSerializer(serializers.Serializer):
    """
    POST /api/billing/invoices/<n>/lines/
    """

    lines = LineRequestSerializer(many=True, allow_empty=False)
    header = InvoiceHeaderSerializer(required=False)


class EditLineSerializer(serializers.Serializer):
    """
    PATCH /api/billing/invoices/<n>/lines/<id>/
    """

    add_quantity = serializers.IntegerField(min_value=0, required=False, default=0)
    minus_quantity = serializers.IntegerField(min_value=0, required=False, default=0)

    name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    area = serializers.CharField(required=False, allow_blank=True, max_length=255)
    date = serializers.DateField(required=False)
    discount = _money()
    mrp = _money()
    spl = _money()

