"""Pagination utilities for API v1."""

from rest_framework.pagination import PageNumberPagination


class SalesResultsSetPagination(PageNumberPagination):
    """Page number pagination for sale listings, client-controlled page size."""

    page_size = 25
    page_size_query_param = "page_size"
    max_page_size = 200
