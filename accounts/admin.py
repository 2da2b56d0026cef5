from django.contrib import admin

from .models import EditorProfile


@admin.register(EditorProfile)
class EditorProfileAdmin(admin.ModelAdmin):
    """Admin interface for editorial roles."""

    list_display = ["user", "role", "created_at"]
    list_filter = ["role"]
    search_fields = ["user__username", "user__email"]
    readonly_fields = ["created_at", "updated_at"]

    def get_readonly_fields(self, request, obj=None):
        """Profiles cannot be moved to another user."""
        if obj:
            return self.readonly_fields + ["user"]
        return self.readonly_fields
