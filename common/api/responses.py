"""Success envelope shared by all endpoints."""

from rest_framework import status as http_status
from rest_framework.response import Response


def envelope(message: str, data=None, status: int = http_status.HTTP_200_OK) -> Response:
    """Wrap ``data`` in ``{"success": true, "message": ..., "data": ...}``."""
    return Response(
        {"success": True, "message": message, "data": data if data is not None else {}},
        status=status,
    )


def paginated_envelope(paginator, message: str, key: str, items) -> Response:
    """Envelope for a page produced by a DRF ``PageNumberPagination`` instance."""
    page = paginator.page
    return envelope(
        message,
        {
            key: items,
            "pagination": {
                "current_page": page.number,
                "total_pages": page.paginator.num_pages,
                "total": page.paginator.count,
                "page_size": paginator.get_page_size(paginator.request),
            },
        },
    )
