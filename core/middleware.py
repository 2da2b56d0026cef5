"""Middleware for adding context to Sentry error reports."""

from django.conf import settings
from sentry_sdk import set_context, set_tag, set_user


class SentryContextMiddleware:
    """
    Add user and request context to Sentry error reports.

    The sentry_sdk calls are no-ops until sentry_sdk.init() runs, so this is
    safe to enable even if Sentry is not configured.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        # Add authenticated user info (privacy-safe)
        if hasattr(request, 'user') and request.user.is_authenticated:
            set_user({
                "id": request.user.id,
                "username": request.user.username,
                "is_staff": request.user.is_staff,
                # Explicitly NOT including: email, ip_address (GDPR)
            })

        # Add request context
        set_tag("request_path", request.path)
        set_tag("request_method", request.method)

        set_context("mirror", {
            "root": str(settings.NEWSROOM_MIRROR_ROOT),
        })

        return self.get_response(request)
