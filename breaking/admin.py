from django.contrib import admin

from core.services.slugs import save_with_unique_slug

from .models import BreakingNews, LastNews


@admin.register(BreakingNews, LastNews)
class FlaggedItemAdmin(admin.ModelAdmin):
    """
    Admin interface for flagged news items.

    The active flag is read-only here; use the API toggle so that breaking
    news stays exclusive.
    """

    list_display = ["title", "is_active", "priority", "expires_at", "views", "created_at"]
    list_filter = ["is_active"]
    search_fields = ["title", "slug"]
    readonly_fields = ["slug", "is_active", "views", "created_at", "updated_at"]

    def save_model(self, request, obj, form, change):
        """Slugs are derived from the title; is_active is never written here."""
        if not change:
            save_with_unique_slug(obj, obj.title, placeholder=obj.SLUG_PLACEHOLDER)
            return

        fields = [*form.changed_data, "updated_at"]
        if "title" in form.changed_data:
            save_with_unique_slug(
                obj,
                obj.title,
                placeholder=obj.SLUG_PLACEHOLDER,
                update_fields=[*fields, "slug"],
            )
        else:
            obj.save(update_fields=fields)
