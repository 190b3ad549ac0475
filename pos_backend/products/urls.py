# products/urls.py

"""
PRODUCTS URLS

Purpose:
- Register product inventory routes under /api/products/
- Includes viewset actions like:
    /api/products/products/search/?q=<text>
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from products.views import ProductViewSet

router = DefaultRouter()

router.register(r"products", ProductViewSet, basename="products")

urlpatterns = [
    path("", include(router.urls)),
]
