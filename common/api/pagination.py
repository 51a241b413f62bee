from rest_framework.pagination import PageNumberPagination


class DefaultPagination(PageNumberPagination):
    """Default pagination with an adjustable page size via query param."""

    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100
