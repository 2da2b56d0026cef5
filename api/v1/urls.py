"""URL configuration for Newsroom API v1."""

import logging
import time
from pathlib import Path

from django.conf import settings
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.urls import path

from accounts.permissions import IsAdminRole, IsEditorOrAdmin
from breaking.api import (
    FlaggedItemActiveView,
    FlaggedItemBulkDeleteView,
    FlaggedItemBulkStatusView,
    FlaggedItemDetailView,
    FlaggedItemLatestView,
    FlaggedItemListCreateView,
    FlaggedItemPublicView,
    FlaggedItemStatsView,
    FlaggedItemToggleView,
)
from breaking.models import BreakingNews, LastNews
from content.api import (
    CategoryBulkDeleteView,
    CategoryDetailView,
    CategoryListCreateView,
    PostBulkDeleteView,
    PostBulkStatusView,
    PostDetailView,
    PostFeaturedView,
    PostListCreateView,
    PostPublicView,
)
from core.api import MirrorReconcileView

logger = logging.getLogger(__name__)

# Server start time for uptime calculation
_server_start_time = time.time()


# Health check views (simple, no authentication)
def health_ping(request):
    """Basic health check for Docker healthcheck."""
    return JsonResponse({"status": "ok"})


def health_status(request):
    """Detailed health status with database check, mirror root and uptime."""
    status_data = {
        "status": "healthy",
        "version": "0.1.0",
        "timestamp": int(time.time()),
    }

    uptime_seconds = int(time.time() - _server_start_time)
    hours = uptime_seconds // 3600
    minutes = (uptime_seconds % 3600) // 60
    status_data["uptime"] = f"{hours}h {minutes}m"

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        status_data["database"] = "connected"
    except DatabaseError:
        logger.exception("Health check database probe failed")
        status_data["database"] = "error"
        status_data["status"] = "degraded"

    mirror_root = Path(settings.NEWSROOM_MIRROR_ROOT)
    status_data["mirror"] = "ok" if mirror_root.is_dir() else "missing"

    return JsonResponse(status_data)


def flagged_item_urls(prefix, model, write_permission):
    """Routes for one flagged-item collection."""
    config = {"model": model, "write_permission": write_permission}
    name = prefix.rstrip("/")
    return [
        path(f"{prefix}active/", FlaggedItemActiveView.as_view(**config), name=f"{name}-active"),
        path(f"{prefix}latest/", FlaggedItemLatestView.as_view(**config), name=f"{name}-latest"),
        path(f"{prefix}stats/", FlaggedItemStatsView.as_view(**config), name=f"{name}-stats"),
        path(
            f"{prefix}bulk/status/",
            FlaggedItemBulkStatusView.as_view(**config),
            name=f"{name}-bulk-status",
        ),
        path(f"{prefix}bulk/", FlaggedItemBulkDeleteView.as_view(**config), name=f"{name}-bulk"),
        path(prefix, FlaggedItemListCreateView.as_view(**config), name=f"{name}-list"),
        path(
            f"{prefix}<int:item_id>/",
            FlaggedItemDetailView.as_view(**config),
            name=f"{name}-detail",
        ),
        path(
            f"{prefix}<int:item_id>/toggle/",
            FlaggedItemToggleView.as_view(**config),
            name=f"{name}-toggle",
        ),
        path(
            f"{prefix}<int:item_id>/<str:slug>/",
            FlaggedItemPublicView.as_view(**config),
            name=f"{name}-public",
        ),
    ]


urlpatterns = [
    # Health (no auth required for Docker healthchecks)
    path("health/", health_ping, name="health"),
    path("health/ping/", health_ping, name="health-ping"),
    path("health/status/", health_status, name="health-status"),
    # =========================================================================
    # Posts
    # =========================================================================
    # Bulk routes must come before <int:post_id> routes
    path("posts/bulk/status/", PostBulkStatusView.as_view(), name="post-bulk-status"),
    path("posts/bulk/", PostBulkDeleteView.as_view(), name="post-bulk"),
    path("posts/", PostListCreateView.as_view(), name="post-list"),
    path("posts/<int:post_id>/", PostDetailView.as_view(), name="post-detail"),
    path(
        "posts/<int:post_id>/featured/",
        PostFeaturedView.as_view(),
        name="post-featured",
    ),
    path(
        "posts/<int:post_id>/<str:slug>/",
        PostPublicView.as_view(),
        name="post-public",
    ),
    # =========================================================================
    # Categories
    # =========================================================================
    path("categories/bulk/", CategoryBulkDeleteView.as_view(), name="category-bulk"),
    path("categories/", CategoryListCreateView.as_view(), name="category-list"),
    path(
        "categories/<int:category_id>/",
        CategoryDetailView.as_view(),
        name="category-detail",
    ),
    # =========================================================================
    # Breaking News & Last News
    # =========================================================================
    *flagged_item_urls("breaking-news/", BreakingNews, IsAdminRole),
    *flagged_item_urls("last-news/", LastNews, IsEditorOrAdmin),
    # =========================================================================
    # Mirror maintenance (admin)
    # =========================================================================
    path("mirrors/reconcile/", MirrorReconcileView.as_view(), name="mirror-reconcile"),
]
