import logging

from django.apps import AppConfig
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)

# Engine settings that must be positive integers
POSITIVE_INT_SETTINGS = (
    "NEWSROOM_MIRROR_WORKERS",
    "NEWSROOM_READING_SPEED_WPM",
    "NEWSROOM_SLUG_MAX_ATTEMPTS",
    "NEWSROOM_ACTIVE_MAX_ITEMS",
    "NEWSROOM_BULK_MAX_IDS",
)


class CoreConfig(AppConfig):
    name = "core"

    def ready(self):
        """Validate engine settings on startup."""
        from django.conf import settings

        for name in POSITIVE_INT_SETTINGS:
            value = getattr(settings, name, None)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ImproperlyConfigured(
                    f"{name} must be a positive integer, got {value!r}"
                )

        root = getattr(settings, "NEWSROOM_MIRROR_ROOT", None)
        if not root:
            raise ImproperlyConfigured(
                "NEWSROOM_MIRROR_ROOT is required. "
                "Set it to the directory that holds published post mirrors."
            )

        logger.debug(f"Mirror root: {root}")
