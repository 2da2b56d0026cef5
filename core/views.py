"""Base views for the Newsroom API."""

from collections.abc import Mapping
from typing import Any, Optional

from rest_framework import status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import ValidationError


def envelope(
    data: Optional[Any] = None,
    message: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    """Success envelope: `{success: true, data?, message?}`."""
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    return Response(body, status=status_code)


class EnvelopePagination(PageNumberPagination):
    """Page-number pagination rendered inside the success envelope."""

    page_size_query_param = "limit"
    max_page_size = 50

    def get_paginated_response(self, data):
        return envelope(
            {
                "results": data,
                "pagination": {
                    "page": self.page.number,
                    "limit": self.get_page_size(self.request),
                    "total": self.page.paginator.count,
                    "pages": self.page.paginator.num_pages,
                },
            }
        )

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "success": {"type": "boolean"},
                "data": {
                    "type": "object",
                    "properties": {
                        "results": schema,
                        "pagination": {"type": "object"},
                    },
                },
            },
        }


class NewsroomBaseAPIView(APIView):
    """
    Base API view for all Newsroom endpoints.

    Provides:
    - Authentication required by default
    - Common serializer context
    - Envelope pagination helper
    """

    permission_classes = [IsAuthenticated]
    pagination_class = EnvelopePagination

    def get_serializer_context(self):
        """Return context dict for serializers."""
        return {"request": self.request}

    def paginate(self, queryset, serializer_class) -> Response:
        """Paginate a queryset and return the enveloped page."""
        paginator = self.pagination_class()
        page = paginator.paginate_queryset(queryset, self.request, view=self)
        serializer = serializer_class(
            page, many=True, context=self.get_serializer_context()
        )
        return paginator.get_paginated_response(serializer.data)

    def payload(self, request) -> Mapping[str, Any]:
        """
        Request body as a mapping.

        Raises:
            ValidationError: If the body is a JSON array or scalar
        """
        if not isinstance(request.data, Mapping):
            raise ValidationError("Request body must be a JSON object")
        return request.data
