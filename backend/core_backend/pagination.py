from rest_framework.pagination import PageNumberPagination


class StandardPagination(PageNumberPagination):
    """
    Page-number pagination used by every list endpoint.

    `?page=` selects the page (1-based) and `?limit=` the page size.
    """

    page_size = 20
    page_size_query_param = "limit"
    max_page_size = 100
