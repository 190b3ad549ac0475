# products/serializers/product.py

"""
PRODUCT SERIALIZER

Purpose:
- Canonical Product serializer for inventory management and billing pickers.
- product_name is the natural key used by invoice lines, so:
  - it must be unique (case-sensitive, trimmed)
  - it cannot be renamed while invoice lines still reference it
- quantity is the live stock ledger that billing services move under a row
  lock, so updates re-read the row FOR UPDATE and write only the fields
  the request sent (no stale stock written back)
"""

from django.db import transaction
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from billing.models import InvoiceLine
from products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(
        max_length=255,
        validators=[
            UniqueValidator(
                queryset=Product.objects.all(),
                message="Product already exists.",
            )
        ],
    )

    class Meta:
        model = Product
        fields = [
            "id",
            "product_name",
            "quantity",
            "mrp",
            "discount",
            "add_margin",
            "net_rate",
            "category",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "created_at",
            "updated_at",
        ]

    def validate_product_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("productName is required")

        instance = self.instance
        if instance is not None and value != instance.product_name:
            if InvoiceLine.objects.filter(product_name=instance.product_name).exists():
                raise serializers.ValidationError(
                    "Product is referenced by existing invoices and cannot be renamed."
                )

        return value

    def validate_quantity(self, value):
        if value is None or value < 0:
            raise serializers.ValidationError("quantity cannot be negative")
        return value

    def validate(self, attrs):
        for field in ("mrp", "discount", "add_margin", "net_rate"):
            value = attrs.get(field)
            if value is not None and value < 0:
                raise serializers.ValidationError({field: f"{field} cannot be negative"})
        return attrs

    def update(self, instance, validated_data):
        with transaction.atomic():
            locked = Product.objects.select_for_update().get(pk=instance.pk)
            for field, value in validated_data.items():
                setattr(locked, field, value)
            locked.save(update_fields=[*validated_data.keys(), "updated_at"])

        for field in Product._meta.concrete_fields:
            setattr(instance, field.attname, getattr(locked, field.attname))
        return instance
