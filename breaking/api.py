"""
API views for breaking news and last news.

Every view is configured per collection in api/v1/urls.py through
`as_view(model=..., write_permission=...)`.
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import SAFE_METHODS, AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from accounts.permissions import IsAdminRole, IsEditorOrAdmin
from core.exceptions import ValidationError
from core.views import NewsroomBaseAPIView, envelope

from .models import BreakingNews
from .serializers import (
    BulkActiveSerializer,
    BulkIdsSerializer,
    FlaggedItemSerializer,
    FlaggedItemWriteSerializer,
)
from .services import FlaggedItemService


class FlaggedItemBaseView(NewsroomBaseAPIView):
    """Editors read, `write_permission` writes."""

    model = BreakingNews
    write_permission = IsAdminRole

    def get_permissions(self):
        if self.request.method in SAFE_METHODS:
            return [IsEditorOrAdmin()]
        return [self.write_permission()]

    def get_service(self) -> FlaggedItemService:
        return FlaggedItemService(self.model, user=self.request.user)


class FlaggedItemPublicBaseView(FlaggedItemBaseView):
    def get_permissions(self):
        return [AllowAny()]


# =============================================================================
# Public Views
# =============================================================================


class FlaggedItemActiveView(FlaggedItemPublicBaseView):
    """GET <collection>/active/ - active items by priority (max 5)."""

    @extend_schema(
        summary="Active items",
        parameters=[OpenApiParameter(name="limit", type=int, description="Max 5")],
        responses={200: FlaggedItemSerializer(many=True)},
        tags=["Breaking News"],
    )
    def get(self, request: Request) -> Response:
        limit = request.query_params.get("limit")
        if limit is not None:
            if not limit.isdigit():
                raise ValidationError("limit must be a non-negative integer")
            limit = int(limit)

        items = self.get_service().active(limit=limit)
        return envelope(FlaggedItemSerializer(items, many=True).data)


class FlaggedItemLatestView(FlaggedItemPublicBaseView):
    """GET <collection>/latest/ - the single item to display."""

    @extend_schema(
        summary="Latest active item",
        responses={200: FlaggedItemSerializer},
        tags=["Breaking News"],
    )
    def get(self, request: Request) -> Response:
        item = self.get_service().current()
        if item is None:
            return envelope(None, message="No active item")
        return envelope(FlaggedItemSerializer(item).data)


class FlaggedItemPublicView(FlaggedItemPublicBaseView):
    """GET <collection>/<id>/<slug>/ - public read, counts a view."""

    @extend_schema(
        summary="Read active item",
        responses={200: FlaggedItemSerializer},
        tags=["Breaking News"],
    )
    def get(self, request: Request, item_id: int, slug: str) -> Response:
        item = self.get_service().record_view(item_id)
        return envelope(FlaggedItemSerializer(item).data)


# =============================================================================
# Management Views
# =============================================================================


class FlaggedItemListCreateView(FlaggedItemBaseView):
    """
    GET  <collection>/  - every item (editor+)
    POST <collection>/  - create
    """

    @extend_schema(
        summary="List items",
        parameters=[
            OpenApiParameter(name="active", type=str, description="'true' or 'false'"),
            OpenApiParameter(name="search", type=str),
            OpenApiParameter(name="page", type=int),
            OpenApiParameter(name="limit", type=int),
        ],
        responses={200: FlaggedItemSerializer(many=True)},
        tags=["Breaking News"],
    )
    def get(self, request: Request) -> Response:
        queryset = self.get_service().list(request.query_params)
        return self.paginate(queryset, FlaggedItemSerializer)

    @extend_schema(
        summary="Create item",
        description="New items are active unless is_active is false.",
        request=FlaggedItemWriteSerializer,
        responses={201: FlaggedItemSerializer},
        tags=["Breaking News"],
    )
    def post(self, request: Request) -> Response:
        serializer = FlaggedItemWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = self.get_service().create(serializer.validated_data)
        return envelope(
            FlaggedItemSerializer(item).data,
            message=f"{self.model._meta.verbose_name.capitalize()} created",
            status_code=status.HTTP_201_CREATED,
        )


class FlaggedItemDetailView(FlaggedItemBaseView):
    """GET / PATCH / PUT / DELETE <collection>/<id>/"""

    @extend_schema(summary="Get item", responses={200: FlaggedItemSerializer}, tags=["Breaking News"])
    def get(self, request: Request, item_id: int) -> Response:
        return envelope(FlaggedItemSerializer(self.get_service().get(item_id)).data)

    @extend_schema(
        summary="Update item",
        request=FlaggedItemWriteSerializer,
        responses={200: FlaggedItemSerializer},
        tags=["Breaking News"],
    )
    def patch(self, request: Request, item_id: int) -> Response:
        return self._update(request, item_id, partial=True)

    @extend_schema(
        summary="Replace item",
        request=FlaggedItemWriteSerializer,
        responses={200: FlaggedItemSerializer},
        tags=["Breaking News"],
    )
    def put(self, request: Request, item_id: int) -> Response:
        return self._update(request, item_id, partial=False)

    def _update(self, request: Request, item_id: int, partial: bool) -> Response:
        serializer = FlaggedItemWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        item = self.get_service().update(item_id, serializer.validated_data)
        return envelope(FlaggedItemSerializer(item).data, message="Item updated")

    @extend_schema(summary="Delete item", responses={200: dict}, tags=["Breaking News"])
    def delete(self, request: Request, item_id: int) -> Response:
        self.get_service().delete(item_id)
        return envelope(message="Item deleted")


class FlaggedItemToggleView(FlaggedItemBaseView):
    """PATCH <collection>/<id>/toggle/"""

    @extend_schema(
        summary="Toggle active flag",
        description="Activating a breaking-news item deactivates every other one.",
        request=None,
        responses={200: FlaggedItemSerializer},
        tags=["Breaking News"],
    )
    def patch(self, request: Request, item_id: int) -> Response:
        item = self.get_service().toggle(item_id)
        message = "Item activated" if item.is_active else "Item deactivated"
        return envelope(FlaggedItemSerializer(item).data, message=message)


class FlaggedItemBulkStatusView(FlaggedItemBaseView):
    """PATCH <collection>/bulk/status/"""

    @extend_schema(
        summary="Bulk activate/deactivate",
        description="Breaking news accepts a single id when activating.",
        request=BulkActiveSerializer,
        responses={200: dict},
        tags=["Breaking News"],
    )
    def patch(self, request: Request) -> Response:
        payload = self.payload(request)
        is_active = payload.get("is_active")
        affected = self.get_service().bulk_set_active(payload.get("ids"), is_active)

        action = "activated" if is_active else "deactivated"
        return envelope(
            {"affected_rows": affected, "is_active": is_active},
            message=f"{affected} item(s) {action}",
        )


class FlaggedItemBulkDeleteView(FlaggedItemBaseView):
    """DELETE <collection>/bulk/"""

    @extend_schema(
        summary="Bulk delete items",
        request=BulkIdsSerializer,
        responses={200: dict},
        tags=["Breaking News"],
    )
    def delete(self, request: Request) -> Response:
        deleted = self.get_service().bulk_delete(self.payload(request).get("ids"))
        return envelope({"affected_rows": deleted}, message=f"{deleted} item(s) deleted")


class FlaggedItemStatsView(FlaggedItemBaseView):
    """GET <collection>/stats/ - counts and top items by views (editor+)."""

    @extend_schema(summary="Item statistics", responses={200: dict}, tags=["Breaking News"])
    def get(self, request: Request) -> Response:
        return envelope(self.get_service().stats())
