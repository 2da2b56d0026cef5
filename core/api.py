"""Administrative API views for engine maintenance."""

from dataclasses import asdict

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.permissions import IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response

from core.exceptions import ValidationError
from core.services.reconcile import MirrorReconcileService
from core.views import NewsroomBaseAPIView, envelope


class MirrorReconcileView(NewsroomBaseAPIView):
    """Reconcile the post mirror with the database (admin only)."""

    permission_classes = [IsAdminUser]

    @extend_schema(
        summary="Reconcile post mirrors",
        description="Bring filesystem mirrors in line with the database. Database wins.",
        request={
            "application/json": {
                "type": "object",
                "properties": {
                    "mode": {
                        "type": "string",
                        "enum": MirrorReconcileService.VALID_MODES,
                        "default": "audit",
                        "description": "Reconcile mode",
                    },
                    "dry_run": {
                        "type": "boolean",
                        "default": False,
                        "description": "Preview changes without applying",
                    },
                    "force": {
                        "type": "boolean",
                        "default": False,
                        "description": "Required for clean/full modes",
                    },
                },
            }
        },
        responses={
            200: OpenApiResponse(description="Reconciliation statistics"),
            400: OpenApiResponse(description="Invalid parameters"),
        },
        tags=["Administration"],
    )
    def post(self, request: Request) -> Response:
        payload = self.payload(request)
        mode = payload.get("mode", "audit")
        dry_run = payload.get("dry_run", False)
        force = payload.get("force", False)

        if not isinstance(dry_run, bool) or not isinstance(force, bool):
            raise ValidationError("dry_run and force must be booleans")

        stats = MirrorReconcileService().reconcile(
            mode=mode, dry_run=dry_run, force=force
        )
        return envelope(
            {"mode": mode, "dry_run": dry_run, **asdict(stats)},
            message="Mirrors reconciled" if not dry_run else "Dry run complete",
        )
