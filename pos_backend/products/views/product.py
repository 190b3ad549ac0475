# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Inventory management endpoints (CRUD) for admins and managers.
- Read + search endpoints for any staff member (billing product picker).

Filtering:
- ?product_name=<text>  substring match
- ?type=<text>          substring match on product_name (legacy picker tabs)
- ?category=<exact>     django-filter
"""

import logging

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from products.models import Product
from products.serializers import ProductSerializer
from users.permissions import IsInventoryManager, IsStaff

logger = logging.getLogger(__name__)


class ProductViewSet(viewsets.ModelViewSet):
    """
    Product endpoints.

    Staff (any role):
    - list / retrieve
    - GET /api/products/products/search/?q=<text>

    Admin / manager:
    - create / update / delete
    """

    serializer_class = ProductSerializer
    filterset_fields = ["category"]

    def get_permissions(self):
        if self.action in ("list", "retrieve", "search"):
            return [IsAuthenticated(), IsStaff()]
        return [IsAuthenticated(), IsInventoryManager()]

    def get_queryset(self):
        qs = Product.objects.all().order_by("product_name")

        params = self.request.query_params
        name = (params.get("product_name") or "").strip()
        kind = (params.get("type") or "").strip()

        if name:
            qs = qs.filter(product_name__icontains=name)
        if kind:
            qs = qs.filter(product_name__icontains=kind)

        return qs

    def perform_create(self, serializer):
        product = serializer.save()
        logger.info(
            "Product created",
            extra={"product_id": product.id, "product_name": product.product_name},
        )

    def perform_update(self, serializer):
        product = serializer.save()
        logger.info(
            "Product updated",
            extra={"product_id": product.id, "quantity": product.quantity},
        )

    def perform_destroy(self, instance):
        # Invoice lines keep referencing the name; restock on removal is then skipped.
        logger.info(
            "Product deleted",
            extra={"product_id": instance.id, "product_name": instance.product_name},
        )
        instance.delete()

    # -----------------------------
    # Search (billing product picker)
    # -----------------------------
    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="q",
                type=str,
                location=OpenApiParameter.QUERY,
                required=True,
                description="Substring of the product name (case-insensitive).",
            ),
        ],
        responses={
            200: OpenApiResponse(
                response=ProductSerializer(many=True),
                description="Matching products",
            ),
            400: OpenApiResponse(description="Missing q parameter"),
            404: OpenApiResponse(description="No matching products"),
        },
        description="Search products by name for the billing screen.",
    )
    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request):
        q = (request.query_params.get("q") or "").strip()
        if not q:
            return Response(
                {"detail": "q parameter is required."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        qs = Product.objects.filter(product_name__icontains=q).order_by("product_name")
        data = ProductSerializer(qs, many=True).data

        if not data:
            return Response(
                {"detail": "No matching products found."},
                status=status.HTTP_404_NOT_FOUND,
            )

        return Response({"count": len(data), "results": data}, status=status.HTTP_200_OK)
