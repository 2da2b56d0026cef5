from django.apps import AppConfig


class ContentConfig(AppConfig):
    name = "content"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        """Import signal handlers when app is ready."""
        import content.signal_handlers  # noqa
