from django.contrib import admin

from core.services.mirror import MirrorSynchronizer
from core.services.slugs import save_with_unique_slug
from core.text import estimate_minutes

from .models import Category, Post


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """Admin interface for categories."""

    list_display = ["name", "slug", "sort_order", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["name", "slug"]
    readonly_fields = ["slug", "created_at", "updated_at"]

    def save_model(self, request, obj, form, change):
        if not change or "name" in form.changed_data:
            save_with_unique_slug(obj, obj.name, placeholder=Category.SLUG_PLACEHOLDER)
        else:
            obj.save()


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    """
    Admin interface for posts.

    Saves go through the same slug, reading-time and mirror steps as the API.
    """

    list_display = ["title", "category", "author", "is_published", "is_featured", "views", "created_at"]
    list_filter = ["is_published", "is_featured", "category"]
    search_fields = ["title", "slug", "body"]
    readonly_fields = ["slug", "views", "reading_time", "mirror_synced_at", "created_at", "updated_at"]
    raw_id_fields = ["author"]

    def save_model(self, request, obj, form, change):
        if not change or "body" in form.changed_data:
            obj.reading_time = estimate_minutes(obj.body)
        if not change or "title" in form.changed_data:
            save_with_unique_slug(obj, obj.title, placeholder=Post.SLUG_PLACEHOLDER)
        else:
            obj.save()
        MirrorSynchronizer().sync_quietly(obj)

    def delete_model(self, request, obj):
        post_id = obj.pk
        super().delete_model(request, obj)
        MirrorSynchronizer().remove_quietly(post_id)

    def delete_queryset(self, request, queryset):
        # "Delete selected" bypasses delete_model
        post_ids = list(queryset.values_list("pk", flat=True))
        super().delete_queryset(request, queryset)
        synchronizer = MirrorSynchronizer()
        for post_id in post_ids:
            synchronizer.remove_quietly(post_id)
