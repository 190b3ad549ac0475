# backend/pagination.py

"""
API PAGINATION

DRF PageNumberPagination with a client-controlled page size:
- ?page=<n>
- ?page_size=<n>  (capped at max_page_size)
"""

from rest_framework.pagination import PageNumberPagination


class StandardPagination(PageNumberPagination):
    page_size_query_param = "page_size"
    max_page_size = 100
